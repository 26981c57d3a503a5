from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .history_repository import EmployeeHistoryRepository
from .model import EmployeeHistory

_SELECT = """
    SELECT h.history_id, h.emp_id, h.old_designation_id, h.new_designation_id,
           h.old_dept_id, h.new_dept_id, h.old_salary, h.new_salary,
           h.start_date, h.end_date, h.change_reason,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM employee_history h
    JOIN employees e ON e.emp_id = h.emp_id
"""


def _row_to_history(r: dict) -> EmployeeHistory:
    return EmployeeHistory(
        history_id=int(r["history_id"]),
        emp_id=int(r["emp_id"]),
        start_date=r["start_date"],
        old_designation_id=r.get("old_designation_id"),
        new_designation_id=r.get("new_designation_id"),
        old_dept_id=r.get("old_dept_id"),
        new_dept_id=r.get("new_dept_id"),
        old_salary=r.get("old_salary"),
        new_salary=r.get("new_salary"),
        end_date=r.get("end_date"),
        change_reason=r.get("change_reason"),
        employee_name=r.get("employee_name"),
    )


class MySQLEmployeeHistoryRepository(EmployeeHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employee_history SET end_date=%s WHERE emp_id=%s AND end_date IS NULL",
                (start_date, int(emp_id)),
            )
            cur.execute(
                """
                INSERT INTO employee_history(
                    emp_id, old_designation_id, new_designation_id, old_dept_id, new_dept_id,
                    old_salary, new_salary, start_date, change_reason
                ) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(emp_id),
                    old_designation_id,
                    new_designation_id,
                    old_dept_id,
                    new_dept_id,
                    old_salary,
                    new_salary,
                    start_date,
                    change_reason,
                ),
            )
            return int(cur.lastrowid)

    def list_history(self, *, emp_ids: Optional[Sequence[int]] = None) -> Sequence[EmployeeHistory]:
        if emp_ids is not None and not emp_ids:
            return []
        sql = _SELECT
        params: tuple = ()
        if emp_ids is not None:
            sql += " WHERE h.emp_id IN (" + ",".join(["%s"] * len(emp_ids)) + ")"
            params = tuple(int(i) for i in emp_ids)
        sql += " ORDER BY h.created_at DESC, h.history_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_history(r) for r in fetchall(cur)]
