from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department, Designation


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, dept_name: str) -> Optional[Department]:
        raise NotImplementedError

    def get_headed_by(self, emp_id: int) -> Optional[Department]:
        raise NotImplementedError

    def create(self, *, dept_name: str) -> int:
        raise NotImplementedError

    def rename(self, *, dept_id: int, dept_name: str) -> bool:
        raise NotImplementedError

    def set_head(self, *, dept_id: int, emp_id: Optional[int]) -> bool:
        raise NotImplementedError

    def delete(self, *, dept_id: int) -> bool:
        raise NotImplementedError


class DesignationRepository(Protocol):
    def list_all(self) -> Sequence[Designation]:
        raise NotImplementedError

    def get_by_name(self, designation_name: str) -> Optional[Designation]:
        raise NotImplementedError

    def create(self, *, designation_name: str, level: Optional[int] = None) -> int:
        raise NotImplementedError
