from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .department_repository import DepartmentRepository, DesignationRepository
from .model import Department, Designation


def _row_to_department(r: dict) -> Department:
    return Department(dept_id=int(r["dept_id"]), dept_name=r["dept_name"], dept_head_id=r.get("dept_head_id"))


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, dept_name, dept_head_id FROM departments ORDER BY dept_name")
            return [_row_to_department(r) for r in fetchall(cur)]

    def _get_one(self, where: str, value) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT dept_id, dept_name, dept_head_id FROM departments WHERE {where}=%s LIMIT 1", (value,))
            r = fetchone(cur)
            return _row_to_department(r) if r else None

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        return self._get_one("dept_id", int(dept_id))

    def get_by_name(self, dept_name: str) -> Optional[Department]:
        return self._get_one("dept_name", dept_name)

    def get_headed_by(self, emp_id: int) -> Optional[Department]:
        return self._get_one("dept_head_id", int(emp_id))

    def create(self, *, dept_name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments(dept_name) VALUES(%s)", (dept_name,))
            return int(cur.lastrowid)

    def rename(self, *, dept_id: int, dept_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE departments SET dept_name=%s WHERE dept_id=%s", (dept_name, int(dept_id)))
            return cur.rowcount > 0

    def set_head(self, *, dept_id: int, emp_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # One department per head.
            if emp_id is not None:
                cur.execute(
                    "UPDATE departments SET dept_head_id=NULL WHERE dept_head_id=%s AND dept_id<>%s",
                    (int(emp_id), int(dept_id)),
                )
            cur.execute("UPDATE departments SET dept_head_id=%s WHERE dept_id=%s", (emp_id, int(dept_id)))
            return cur.rowcount > 0

    def delete(self, *, dept_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE dept_id=%s", (int(dept_id),))
            return cur.rowcount > 0


class MySQLDesignationRepository(DesignationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Designation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT designation_id, designation_name, level FROM designations ORDER BY designation_name")
            return [
                Designation(
                    designation_id=int(r["designation_id"]),
                    designation_name=r["designation_name"],
                    level=r.get("level"),
                )
                for r in fetchall(cur)
            ]

    def get_by_name(self, designation_name: str) -> Optional[Designation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT designation_id, designation_name, level FROM designations WHERE designation_name=%s",
                (designation_name,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Designation(
                designation_id=int(r["designation_id"]),
                designation_name=r["designation_name"],
                level=r.get("level"),
            )

    def create(self, *, designation_name: str, level: Optional[int] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO designations(designation_name, level) VALUES(%s,%s)",
                (designation_name, level),
            )
            return int(cur.lastrowid)
