from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Policy:
    policy_id: int
    policy_name: str
    description: str
    effective_date: date
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    author_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "policy_id": self.policy_id,
            "policy_name": self.policy_name,
            "description": self.description,
            "effective_date": self.effective_date.isoformat(),
            "created_by": self.author_name or self.created_by,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M:%S") if self.created_at else None,
        }
