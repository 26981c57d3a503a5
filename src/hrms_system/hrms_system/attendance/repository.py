from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, Holiday


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, emp_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, emp_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        emp_id: int,
        work_date: date,
        clock_in: Optional[datetime],
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def set_clock_in(self, *, attendance_id: int, clock_in: datetime) -> bool:
        """Only fills an empty clock-in."""

        raise NotImplementedError

    def set_clock_out(self, *, attendance_id: int, clock_out: datetime) -> bool:
        """Only fills an empty clock-out on a clocked-in row."""

        raise NotImplementedError

    def mark_absent(self, *, attendance_id: int, notes: Optional[str] = None) -> bool:
        raise NotImplementedError


class HolidayRepository(Protocol):
    def list_between(self, *, start_date: date, end_date: date) -> Sequence[Holiday]:
        raise NotImplementedError

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def create(self, *, holiday_date: date, reason: str, created_by: int) -> int:
        raise NotImplementedError

    def delete(self, *, holiday_id: int) -> bool:
        raise NotImplementedError
