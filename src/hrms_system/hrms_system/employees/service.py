from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import EmployeeStatus, RoleName
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .department_repository import DepartmentRepository, DesignationRepository
from .history_repository import EmployeeHistoryRepository
from .model import Department, Designation, Employee, EmployeeHistory
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def require_actor(employees: EmployeeRepository, actor_id: int) -> Employee:
    """Reload the acting employee; the session only carries the id."""
    actor = employees.get_by_id(int(actor_id))
    if not actor or not actor.is_active:
        raise AuthenticationError("Your session is no longer valid, please sign in again")
    return actor


def require_hr(actor: Employee) -> None:
    if not actor.role.is_hr_reviewer:
        logger.warning("Denied HR-only action for emp_id=%s role=%s", actor.emp_id, actor.role.value)
        raise AuthorizationError("Only HR managers and executives can do this")


def headed_department_id(departments: DepartmentRepository, actor: Employee) -> Optional[int]:
    """Department the actor heads. Holding the Department Head role alone is not enough."""
    if actor.role != RoleName.DEPARTMENT_HEAD:
        return None
    headed = departments.get_headed_by(actor.emp_id)
    return headed.dept_id if headed else None


def visible_employees(
    employees: EmployeeRepository, departments: DepartmentRepository, actor: Employee
) -> Sequence[Employee]:
    if actor.role.is_hr_reviewer:
        return employees.list_employees()
    dept_id = headed_department_id(departments, actor)
    if dept_id is not None:
        return employees.list_employees(department_id=dept_id)
    if actor.role == RoleName.TEAM_LEAD:
        return [actor, *employees.list_employees(reporting_manager_id=actor.emp_id)]
    return [actor]


def can_view_employee(departments: DepartmentRepository, actor: Employee, target: Employee) -> bool:
    if actor.emp_id == target.emp_id or actor.role.is_hr_reviewer:
        return True
    dept_id = headed_department_id(departments, actor)
    if dept_id is not None:
        return target.department_id == dept_id
    if actor.role == RoleName.TEAM_LEAD:
        return target.reporting_manager_id == actor.emp_id
    return False


def _parse_role(value: Any) -> RoleName:
    try:
        return RoleName(value)
    except ValueError:
        raise ValidationError("Unknown role")


def _parse_salary(value: Any) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        salary = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("Salary must be a number")
    if salary < 0:
        raise ValidationError("Salary cannot be negative")
    return salary


@dataclass(frozen=True)
class SessionEmployee:
    """What we store into the Flask session after login."""

    emp_id: int
    full_name: str
    role: RoleName
    department_id: Optional[int]


class AuthService:
    """Use case: authenticate an employee (login) and username lookup."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, username: str, password: str) -> SessionEmployee:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid username or password")
        employee = self._employees.get_by_username(username.strip())
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(employee.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        logger.info("Employee %s signed in", employee.emp_id)
        return SessionEmployee(
            emp_id=employee.emp_id,
            full_name=employee.full_name,
            role=employee.role,
            department_id=employee.department_id,
        )

    def lookup_email(self, username: str) -> str:
        username = require_non_empty(username, "Username")
        employee = self._employees.get_by_username(username)
        if not employee:
            raise NotFoundError("User not found")
        return employee.email


class EmployeeService:
    """Use case: manage employee records."""

    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        history: EmployeeHistoryRepository,
        *,
        clock=now_local,
    ):
        self._employees = employees
        self._departments = departments
        self._history = history
        self._clock = clock

    def _record_history(self, target: Employee, changes: dict[str, Any], reason: Optional[str]) -> None:
        """Write a history period when designation, department or salary moves."""
        old = (target.designation_id, target.department_id, target.salary)
        new = (
            changes.get("designation_id", target.designation_id),
            changes.get("department_id", target.department_id),
            changes.get("salary", target.salary),
        )
        if old == new:
            return
        self._history.record_change(
            emp_id=target.emp_id,
            start_date=self._clock().date(),
            old_designation_id=old[0],
            new_designation_id=new[0],
            old_dept_id=old[1],
            new_dept_id=new[1],
            old_salary=old[2],
            new_salary=new[2],
            change_reason=reason,
        )

    def _validate_refs(self, *, department_id: Optional[int], reporting_manager_id: Optional[int]) -> None:
        if department_id is not None and not self._departments.get_by_id(int(department_id)):
            raise ValidationError("Department does not exist")
        if reporting_manager_id is not None and not self._employees.get_by_id(int(reporting_manager_id)):
            raise ValidationError("Reporting manager does not exist")

    def _insert(
        self,
        *,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password: str,
        role: RoleName,
        department_id: Optional[int] = None,
        designation_id: Optional[int] = None,
        reporting_manager_id: Optional[int] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        gender: Optional[str] = None,
        dob: Optional[date] = None,
        doj: Optional[date] = None,
        salary: Any = None,
    ) -> int:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        username = require_non_empty(username, "Username")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._employees.get_by_username(username):
            raise ConflictError("Username already exists")
        if self._employees.get_by_email(email):
            raise ConflictError("Email already exists")
        self._validate_refs(department_id=department_id, reporting_manager_id=reporting_manager_id)

        return self._employees.create(
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            department_id=department_id,
            designation_id=designation_id,
            reporting_manager_id=reporting_manager_id,
            status=EmployeeStatus.ACTIVE,
            phone=optional_text(phone, "Phone"),
            address=optional_text(address, "Address"),
            gender=optional_text(gender, "Gender"),
            dob=dob,
            doj=doj or date.today(),
            salary=_parse_salary(salary),
        )

    def bootstrap_executive(self, *, first_name: str, last_name: str, username: str, email: str, password: str) -> int:
        """Create the very first CXO account; refused once any CXO exists."""
        if self._employees.list_employees(role=RoleName.CXO):
            raise ConflictError("An executive account already exists")
        emp_id = self._insert(
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email,
            password=password,
            role=RoleName.CXO,
        )
        logger.info("Bootstrapped executive account emp_id=%s", emp_id)
        return emp_id

    def create_employee(self, *, actor_id: int, role: Any = RoleName.EMPLOYEE, **fields: Any) -> int:
        actor = require_actor(self._employees, actor_id)
        require_hr(actor)

        emp_id = self._insert(role=_parse_role(role), **fields)
        logger.info("Employee %s created by %s", emp_id, actor.emp_id)
        return emp_id

    def update_employee(self, *, actor_id: int, emp_id: int, **changes: Any) -> None:
        actor = require_actor(self._employees, actor_id)
        require_hr(actor)

        target = self._employees.get_by_id(int(emp_id))
        if not target:
            raise NotFoundError("Employee not found")

        if "role" in changes:
            changes["role"] = _parse_role(changes["role"])
        if "status" in changes:
            try:
                changes["status"] = EmployeeStatus(changes["status"])
            except ValueError:
                raise ValidationError("Unknown employee status")
        if "salary" in changes:
            changes["salary"] = _parse_salary(changes["salary"])
        if "email" in changes:
            changes["email"] = require_email(changes["email"])
            other = self._employees.get_by_email(changes["email"])
            if other and other.emp_id != target.emp_id:
                raise ConflictError("Email already exists")
        for name in ("first_name", "last_name"):
            if name in changes:
                changes[name] = require_non_empty(changes[name], name.replace("_", " ").capitalize())
        for name in ("phone", "address", "gender"):
            if name in changes:
                changes[name] = optional_text(changes[name], name.capitalize())
        if changes.get("reporting_manager_id") is not None and int(changes["reporting_manager_id"]) == target.emp_id:
            raise ValidationError("An employee cannot report to themselves")
        self._validate_refs(
            department_id=changes.get("department_id"),
            reporting_manager_id=changes.get("reporting_manager_id"),
        )
        reason = optional_text(changes.pop("change_reason", None), "Change reason")
        changes.pop("password_hash", None)
        changes.pop("username", None)
        if not changes:
            raise ValidationError("Nothing to update")

        self._employees.update(target.emp_id, **changes)
        self._record_history(target, changes, reason)
        logger.info("Employee %s updated by %s (%s)", target.emp_id, actor.emp_id, ", ".join(sorted(changes)))

    def list_visible(self, *, actor_id: int) -> Sequence[Employee]:
        actor = require_actor(self._employees, actor_id)
        return visible_employees(self._employees, self._departments, actor)

    def list_history(self, *, actor_id: int, emp_id: Optional[int] = None) -> Sequence[EmployeeHistory]:
        """History periods the actor may see, newest first. Same reach as ``list_visible``."""
        actor = require_actor(self._employees, actor_id)

        if emp_id is not None:
            target = self._employees.get_by_id(int(emp_id))
            if not target:
                raise NotFoundError("Employee not found")
            if not can_view_employee(self._departments, actor, target):
                raise AuthorizationError("You are not allowed to view this employee's history")
            return self._history.list_history(emp_ids=[target.emp_id])

        if actor.role.is_hr_reviewer:
            return self._history.list_history()
        visible = visible_employees(self._employees, self._departments, actor)
        return self._history.list_history(emp_ids=[e.emp_id for e in visible])

    def profile(self, *, actor_id: int) -> Employee:
        return require_actor(self._employees, actor_id)

    def update_profile(
        self,
        *,
        actor_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        salary: Any = None,
    ) -> None:
        actor = require_actor(self._employees, actor_id)

        changes: dict[str, Any] = {}
        if first_name is not None:
            changes["first_name"] = require_non_empty(first_name, "First name")
        if last_name is not None:
            changes["last_name"] = require_non_empty(last_name, "Last name")
        if email is not None:
            changes["email"] = require_email(email)
            other = self._employees.get_by_email(changes["email"])
            if other and other.emp_id != actor.emp_id:
                raise ConflictError("Email already exists")
        if phone is not None:
            changes["phone"] = optional_text(phone, "Phone")
        if address is not None:
            changes["address"] = optional_text(address, "Address")
        if salary is not None:
            require_hr(actor)
            changes["salary"] = _parse_salary(salary)

        if changes:
            self._employees.update(actor.emp_id, **changes)
            self._record_history(actor, changes, None)


class DepartmentService:
    """Use case: departments and department heads."""

    def __init__(self, departments: DepartmentRepository, employees: EmployeeRepository):
        self._departments = departments
        self._employees = employees

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def create(self, *, actor_id: int, dept_name: str) -> int:
        require_hr(require_actor(self._employees, actor_id))
        dept_name = require_non_empty(dept_name, "Department name")
        if self._departments.get_by_name(dept_name):
            raise ConflictError("Department already exists")
        return self._departments.create(dept_name=dept_name)

    def rename(self, *, actor_id: int, dept_id: int, dept_name: str) -> None:
        require_hr(require_actor(self._employees, actor_id))
        dept_name = require_non_empty(dept_name, "Department name")
        if not self._departments.get_by_id(int(dept_id)):
            raise NotFoundError("Department not found")
        existing = self._departments.get_by_name(dept_name)
        if existing and existing.dept_id != int(dept_id):
            raise ConflictError("Department already exists")
        self._departments.rename(dept_id=int(dept_id), dept_name=dept_name)

    def delete(self, *, actor_id: int, dept_id: int) -> None:
        require_hr(require_actor(self._employees, actor_id))
        if not self._departments.delete(dept_id=int(dept_id)):
            raise NotFoundError("Department not found")

    def assign_head(self, *, actor_id: int, dept_id: int, emp_id: int) -> None:
        actor = require_actor(self._employees, actor_id)
        require_hr(actor)

        if not self._departments.get_by_id(int(dept_id)):
            raise NotFoundError("Department not found")
        head = self._employees.get_by_id(int(emp_id))
        if not head or not head.is_active:
            raise ValidationError("Employee is not active")
        if head.role != RoleName.DEPARTMENT_HEAD:
            raise ValidationError("Only employees with the Department Head role can lead a department")

        self._departments.set_head(dept_id=int(dept_id), emp_id=head.emp_id)
        logger.info("Department %s head set to %s by %s", dept_id, head.emp_id, actor.emp_id)


class DesignationService:
    def __init__(self, designations: DesignationRepository, employees: EmployeeRepository):
        self._designations = designations
        self._employees = employees

    def list_designations(self) -> Sequence[Designation]:
        return self._designations.list_all()

    def create(self, *, actor_id: int, designation_name: str, level: Optional[int] = None) -> int:
        require_hr(require_actor(self._employees, actor_id))
        designation_name = require_non_empty(designation_name, "Designation name")
        if self._designations.get_by_name(designation_name):
            raise ConflictError("Designation already exists")
        if level is not None and int(level) < 1:
            raise ValidationError("Level must be a positive number")
        return self._designations.create(
            designation_name=designation_name,
            level=int(level) if level is not None else None,
        )
