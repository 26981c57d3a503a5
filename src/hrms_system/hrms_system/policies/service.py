from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..employees.service import require_actor, require_hr
from .model import Policy
from .repository import PolicyRepository

logger = logging.getLogger(__name__)


class PolicyService:
    """Use case: company policies published by HR."""

    def __init__(self, policies: PolicyRepository, employees: EmployeeRepository):
        self._policies = policies
        self._employees = employees

    def list_policies(self) -> Sequence[Policy]:
        return self._policies.list_all()

    def publish(
        self,
        *,
        actor_id: int,
        policy_name: str,
        description: str,
        effective_date: Optional[date],
    ) -> int:
        actor = require_actor(self._employees, actor_id)
        require_hr(actor)

        policy_name = require_non_empty(policy_name, "Policy name")
        description = require_non_empty(description, "Description")
        if effective_date is None:
            raise ValidationError("Effective date is required")

        policy_id = self._policies.create(
            policy_name=policy_name,
            description=description,
            effective_date=effective_date,
            created_by=actor.emp_id,
        )
        logger.info("Policy %s published by %s", policy_id, actor.emp_id)
        return policy_id

    def delete(self, *, actor_id: int, policy_id: int) -> None:
        require_hr(require_actor(self._employees, actor_id))
        if not self._policies.delete(policy_id=int(policy_id)):
            raise NotFoundError("Policy not found")
