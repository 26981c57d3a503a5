from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Policy


class PolicyRepository(Protocol):
    def list_all(self) -> Sequence[Policy]:
        raise NotImplementedError

    def create(self, *, policy_name: str, description: str, effective_date: date, created_by: int) -> int:
        raise NotImplementedError

    def delete(self, *, policy_id: int) -> bool:
        raise NotImplementedError
