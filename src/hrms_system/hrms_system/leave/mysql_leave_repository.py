from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType, ReviewStage, RoleName
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveInterval, LeaveRequest
from .repository import LeaveRepository
from .workflow import review_columns

_SELECT = """
    SELECT r.leave_id, r.emp_id, r.leave_type, r.start_date, r.end_date, r.total_days,
           r.reason, r.status, r.created_at,
           r.reviewed_by_dept_head, r.dept_head_comments, r.dept_review_date,
           r.reviewed_by_hr, r.hr_comments, r.hr_review_date,
           e.first_name, e.last_name, e.role, e.department_id
    FROM leave_requests r
    JOIN employees e ON e.emp_id = r.emp_id
"""


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        emp_id=int(r["emp_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=int(r["total_days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        requester_role=RoleName(r["role"]),
        requester_department_id=r.get("department_id"),
        requester_name=f"{r['first_name']} {r['last_name']}",
        reviewed_by_dept_head=r.get("reviewed_by_dept_head"),
        dept_head_comments=r.get("dept_head_comments"),
        dept_review_date=r.get("dept_review_date"),
        reviewed_by_hr=r.get("reviewed_by_hr"),
        hr_comments=r.get("hr_comments"),
        hr_review_date=r.get("hr_review_date"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        emp_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str,
        status: LeaveStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(emp_id, leave_type, start_date, end_date, total_days, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(emp_id), leave_type.value, start_date, end_date, int(total_days), reason, status.value),
            )
            return int(cur.lastrowid)

    def get(self, *, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        emp_id: Optional[int] = None,
        department_id: Optional[int] = None,
        statuses: Optional[Iterable[LeaveStatus]] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if emp_id is not None:
            clauses.append("r.emp_id=%s")
            params.append(int(emp_id))
        if department_id is not None:
            clauses.append("e.department_id=%s")
            params.append(int(department_id))
        if statuses is not None:
            values = [s.value for s in statuses]
            if not values:
                return []
            clauses.append(f"r.status IN ({','.join(['%s'] * len(values))})")
            params.extend(values)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY r.created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def transition(
        self,
        *,
        leave_id: int,
        expected_status: LeaveStatus,
        new_status: LeaveStatus,
        stage: ReviewStage,
        reviewer_id: int,
        comments: Optional[str],
        reviewed_at: datetime,
    ) -> bool:
        reviewer_col, comments_col, date_col = review_columns(stage)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_requests
                SET status=%s, {reviewer_col}=%s, {comments_col}=%s, {date_col}=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    new_status.value,
                    int(reviewer_id),
                    comments,
                    reviewed_at,
                    int(leave_id),
                    expected_status.value,
                ),
            )
            return cur.rowcount > 0

    def has_overlap(self, *, emp_id: int, start_date: date, end_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS hit FROM leave_requests
                WHERE emp_id=%s AND start_date<=%s AND end_date>=%s
                  AND status NOT IN (%s,%s)
                LIMIT 1
                """,
                (
                    int(emp_id),
                    end_date,
                    start_date,
                    LeaveStatus.REJECTED.value,
                    LeaveStatus.DEPT_REJECTED.value,
                ),
            )
            return fetchone(cur) is not None

    def list_intervals(
        self,
        *,
        emp_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Sequence[LeaveInterval]:
        values = [s.value for s in statuses]
        if not values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT start_date, end_date FROM leave_requests
                WHERE emp_id=%s AND start_date<=%s AND end_date>=%s
                  AND status IN ({','.join(['%s'] * len(values))})
                ORDER BY start_date
                """,
                tuple([int(emp_id), end_date, start_date] + values),
            )
            return [LeaveInterval(start_date=r["start_date"], end_date=r["end_date"]) for r in fetchall(cur)]
