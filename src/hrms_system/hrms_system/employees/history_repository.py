from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import EmployeeHistory


class EmployeeHistoryRepository(Protocol):
    def record_change(
        self,
        *,
        emp_id: int,
        start_date: date,
        old_designation_id: Optional[int],
        new_designation_id: Optional[int],
        old_dept_id: Optional[int],
        new_dept_id: Optional[int],
        old_salary: Optional[Decimal],
        new_salary: Optional[Decimal],
        change_reason: Optional[str] = None,
    ) -> int:
        """Close the employee's open period at ``start_date`` and open a new one."""
        raise NotImplementedError

    def list_history(self, *, emp_ids: Optional[Sequence[int]] = None) -> Sequence[EmployeeHistory]:
        """Newest first; ``emp_ids=None`` means every employee."""
        raise NotImplementedError
