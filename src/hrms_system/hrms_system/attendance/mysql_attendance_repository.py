from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, Holiday
from .repository import AttendanceRepository, HolidayRepository

_ATTENDANCE_COLUMNS = "attendance_id, emp_id, work_date, clock_in, clock_out, status, notes"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        emp_id=int(r["emp_id"]),
        work_date=r["work_date"],
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, emp_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ATTENDANCE_COLUMNS} FROM attendance WHERE emp_id=%s AND work_date=%s",
                (int(emp_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_employee(self, emp_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ATTENDANCE_COLUMNS}
                FROM attendance
                WHERE emp_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(emp_id), start_date, end_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ATTENDANCE_COLUMNS} FROM attendance WHERE work_date=%s", (work_date,))
            return [_row_to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        emp_id: int,
        work_date: date,
        clock_in: Optional[datetime],
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(emp_id, work_date, clock_in, status, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(emp_id), work_date, clock_in, status.value, notes),
            )
            return int(cur.lastrowid)

    def set_clock_in(self, *, attendance_id: int, clock_in: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_in=%s, status=%s
                WHERE attendance_id=%s AND clock_in IS NULL
                """,
                (clock_in, AttendanceStatus.PRESENT.value, int(attendance_id)),
            )
            return cur.rowcount == 1

    def set_clock_out(self, *, attendance_id: int, clock_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, status=%s
                WHERE attendance_id=%s AND clock_in IS NOT NULL AND clock_out IS NULL
                """,
                (clock_out, AttendanceStatus.CLOCKED_OUT.value, int(attendance_id)),
            )
            return cur.rowcount == 1

    def mark_absent(self, *, attendance_id: int, notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET status=%s, notes=%s
                WHERE attendance_id=%s AND clock_in IS NULL
                """,
                (AttendanceStatus.ABSENT.value, notes, int(attendance_id)),
            )
            return cur.rowcount == 1


def _row_to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        holiday_date=r["holiday_date"],
        reason=r["reason"],
        created_by=r.get("created_by"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(self, *, start_date: date, end_date: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, holiday_date, reason, created_by
                FROM holidays
                WHERE holiday_date BETWEEN %s AND %s
                ORDER BY holiday_date
                """,
                (start_date, end_date),
            )
            return [_row_to_holiday(r) for r in fetchall(cur)]

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_id, holiday_date, reason, created_by FROM holidays WHERE holiday_date=%s",
                (holiday_date,),
            )
            r = fetchone(cur)
            return _row_to_holiday(r) if r else None

    def create(self, *, holiday_date: date, reason: str, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(holiday_date, reason, created_by) VALUES(%s,%s,%s)",
                (holiday_date, reason, int(created_by)),
            )
            return int(cur.lastrowid)

    def delete(self, *, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount == 1
