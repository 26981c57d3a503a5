from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import EmployeeStatus, RoleName
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

WRITABLE_COLUMNS = (
    "first_name",
    "last_name",
    "username",
    "email",
    "password_hash",
    "role",
    "department_id",
    "designation_id",
    "reporting_manager_id",
    "status",
    "phone",
    "address",
    "gender",
    "dob",
    "doj",
    "salary",
)

_SELECT = f"SELECT emp_id, {', '.join(WRITABLE_COLUMNS)} FROM employees"


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        emp_id=int(row["emp_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=RoleName(row["role"]),
        department_id=row.get("department_id"),
        designation_id=row.get("designation_id"),
        reporting_manager_id=row.get("reporting_manager_id"),
        status=EmployeeStatus(row.get("status") or EmployeeStatus.ACTIVE.value),
        phone=row.get("phone"),
        address=row.get("address"),
        gender=row.get("gender"),
        dob=row.get("dob"),
        doj=row.get("doj"),
        salary=row.get("salary"),
    )


def _db_value(value: Any) -> Any:
    # Enums are stored by value.
    return getattr(value, "value", value)


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: Any) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_id(self, emp_id: int) -> Optional[Employee]:
        return self._get_one("emp_id", int(emp_id))

    def get_by_username(self, username: str) -> Optional[Employee]:
        return self._get_one("username", username)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("email", email)

    def create(self, **fields: Any) -> int:
        columns = [c for c in WRITABLE_COLUMNS if fields.get(c) is not None]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees({', '.join(columns)}) VALUES({', '.join(['%s'] * len(columns))})",
                tuple(_db_value(fields[c]) for c in columns),
            )
            return int(cur.lastrowid)

    def update(self, emp_id: int, **fields: Any) -> bool:
        columns = [c for c in WRITABLE_COLUMNS if c in fields]
        if not columns:
            return False
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE emp_id=%s",
                tuple(_db_value(fields[c]) for c in columns) + (int(emp_id),),
            )
            return cur.rowcount > 0

    def list_employees(
        self,
        *,
        department_id: Optional[int] = None,
        reporting_manager_id: Optional[int] = None,
        role: Optional[str] = None,
    ) -> Sequence[Employee]:
        clauses = ["1=1"]
        params: list[object] = []

        if department_id is not None:
            clauses.append("department_id=%s")
            params.append(int(department_id))
        if reporting_manager_id is not None:
            clauses.append("reporting_manager_id=%s")
            params.append(int(reporting_manager_id))
        if role is not None:
            clauses.append("role=%s")
            params.append(_db_value(role))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY first_name, last_name",
                tuple(params),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]
