from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, RoleName


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object; no database access code lives here.
    """

    emp_id: int
    first_name: str
    last_name: str
    username: str
    email: str
    password_hash: str
    role: RoleName
    department_id: Optional[int] = None
    designation_id: Optional[int] = None
    reporting_manager_id: Optional[int] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    phone: Optional[str] = None
    address: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[date] = None
    doj: Optional[date] = None
    salary: Optional[Decimal] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    def to_dict(self, *, include_salary: bool = False) -> dict:
        data = {
            "emp_id": self.emp_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "department_id": self.department_id,
            "designation_id": self.designation_id,
            "reporting_manager_id": self.reporting_manager_id,
            "status": self.status.value,
            "phone": self.phone,
            "address": self.address,
            "gender": self.gender,
            "dob": self.dob.isoformat() if self.dob else None,
            "doj": self.doj.isoformat() if self.doj else None,
        }
        if include_salary:
            data["salary"] = float(self.salary) if self.salary is not None else None
        return data


@dataclass(frozen=True)
class Department:
    dept_id: int
    dept_name: str
    dept_head_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {"dept_id": self.dept_id, "dept_name": self.dept_name, "dept_head_id": self.dept_head_id}


@dataclass(frozen=True)
class Designation:
    designation_id: int
    designation_name: str
    level: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "designation_id": self.designation_id,
            "designation_name": self.designation_name,
            "level": self.level,
        }


@dataclass(frozen=True)
class EmployeeHistory:
    """One designation, department or salary period of an employee.

    ``end_date`` is empty for the period that is still current.
    """

    history_id: int
    emp_id: int
    start_date: date
    old_designation_id: Optional[int] = None
    new_designation_id: Optional[int] = None
    old_dept_id: Optional[int] = None
    new_dept_id: Optional[int] = None
    old_salary: Optional[Decimal] = None
    new_salary: Optional[Decimal] = None
    end_date: Optional[date] = None
    change_reason: Optional[str] = None
    employee_name: Optional[str] = None

    @property
    def change_types(self) -> list[str]:
        changes = []
        if self.old_designation_id != self.new_designation_id:
            changes.append("Designation")
        if self.old_dept_id != self.new_dept_id:
            changes.append("Department")
        if self.old_salary != self.new_salary:
            changes.append("Salary")
        return changes

    def to_dict(self, *, include_salary: bool = False) -> dict:
        data = {
            "history_id": self.history_id,
            "emp_id": self.emp_id,
            "employee_name": self.employee_name,
            "change_type": " + ".join(self.change_types),
            "old_designation_id": self.old_designation_id,
            "new_designation_id": self.new_designation_id,
            "old_dept_id": self.old_dept_id,
            "new_dept_id": self.new_dept_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "change_reason": self.change_reason,
        }
        if include_salary:
            data["old_salary"] = float(self.old_salary) if self.old_salary is not None else None
            data["new_salary"] = float(self.new_salary) if self.new_salary is not None else None
        return data
