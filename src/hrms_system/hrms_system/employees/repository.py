from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note: the service layer depends on this interface, not on a concrete database.
    """

    def get_by_id(self, emp_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, **fields: Any) -> int:
        raise NotImplementedError

    def update(self, emp_id: int, **fields: Any) -> bool:
        raise NotImplementedError

    def list_employees(
        self,
        *,
        department_id: Optional[int] = None,
        reporting_manager_id: Optional[int] = None,
        role: Optional[str] = None,
    ) -> Sequence[Employee]:
        raise NotImplementedError
