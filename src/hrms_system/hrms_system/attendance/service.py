from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import format_duration, month_bounds, now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import AttendanceStatus, RoleName
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.department_repository import DepartmentRepository
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import can_view_employee, require_actor, require_hr, visible_employees
from ..leave.service import LeaveService
from .classification import month_calendar
from .model import AttendanceRecord, BoardRow, CalendarDay, Holiday
from .repository import AttendanceRepository, HolidayRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodayStatus:
    record: Optional[AttendanceRecord]
    worked: Optional[str]

    def to_dict(self) -> dict:
        return {
            "record": self.record.to_dict() if self.record else None,
            "worked": self.worked,
        }


@dataclass(frozen=True)
class MonthCalendar:
    emp_id: int
    year: int
    month: int
    days: list[CalendarDay]
    summary: dict[str, int]

    def to_dict(self) -> dict:
        return {
            "emp_id": self.emp_id,
            "year": self.year,
            "month": self.month,
            "days": [d.to_dict() for d in self.days],
            "summary": dict(self.summary),
        }


def _board_row(employee: Employee, record: Optional[AttendanceRecord], department_name: Optional[str]) -> BoardRow:
    status, total = AttendanceStatus.ABSENT, "--"
    if record and record.clock_in:
        if record.clock_out:
            status, total = AttendanceStatus.CLOCKED_OUT, format_duration(record.clock_in, record.clock_out)
        else:
            status, total = AttendanceStatus.PRESENT, "In Progress"
    return BoardRow(
        emp_id=employee.emp_id,
        employee_name=employee.full_name,
        department_name=department_name,
        clock_in=record.clock_in if record else None,
        clock_out=record.clock_out if record else None,
        status=status,
        total_hours=total,
    )


class AttendanceService:
    """Use case: clock-in/clock-out, absences, holidays and the monthly calendar."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        holidays: HolidayRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        leave_service: LeaveService,
        *,
        clock=now_local,
    ):
        self._attendance = attendance
        self._holidays = holidays
        self._employees = employees
        self._departments = departments
        self._leave_service = leave_service
        self._clock = clock

    def clock_in(self, *, emp_id: int, now: Optional[datetime] = None) -> AttendanceRecord:
        employee = require_actor(self._employees, emp_id)
        now = now or self._clock()
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(employee.emp_id, today)
        if existing is None:
            self._attendance.create(
                emp_id=employee.emp_id,
                work_date=today,
                clock_in=now,
                status=AttendanceStatus.PRESENT,
            )
        elif existing.clock_in is not None:
            raise ValidationError("You have already clocked in today")
        elif not self._attendance.set_clock_in(attendance_id=existing.attendance_id, clock_in=now):
            raise ConflictError("Attendance changed while clocking in, please retry")

        logger.info("Employee %s clocked in at %s", employee.emp_id, now.strftime("%H:%M:%S"))
        return self._attendance.get_for_employee_and_date(employee.emp_id, today)

    def clock_out(self, *, emp_id: int, now: Optional[datetime] = None) -> AttendanceRecord:
        employee = require_actor(self._employees, emp_id)
        now = now or self._clock()
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(employee.emp_id, today)
        if existing is None or existing.clock_in is None:
            raise ValidationError("You have not clocked in today")
        if existing.clock_out is not None:
            raise ValidationError("You have already clocked out today")
        if now < existing.clock_in:
            raise ValidationError("Clock-out time cannot be before clock-in time")

        if not self._attendance.set_clock_out(attendance_id=existing.attendance_id, clock_out=now):
            raise ConflictError("Attendance changed while clocking out, please retry")

        logger.info(
            "Employee %s clocked out after %s", employee.emp_id, format_duration(existing.clock_in, now)
        )
        return self._attendance.get_for_employee_and_date(employee.emp_id, today)

    def today(self, *, emp_id: int) -> TodayStatus:
        employee = require_actor(self._employees, emp_id)
        now = self._clock()
        record = self._attendance.get_for_employee_and_date(employee.emp_id, now.date())
        worked = None
        if record and record.clock_in:
            worked = format_duration(record.clock_in, record.clock_out or now)
        return TodayStatus(record=record, worked=worked)

    def mark_absent(self, *, actor_id: int, emp_id: int, day: date, notes: Optional[str] = None) -> None:
        actor = require_actor(self._employees, actor_id)
        require_hr(actor)

        target = self._employees.get_by_id(int(emp_id))
        if not target:
            raise NotFoundError("Employee not found")

        existing = self._attendance.get_for_employee_and_date(target.emp_id, day)
        if existing is None:
            self._attendance.create(
                emp_id=target.emp_id,
                work_date=day,
                clock_in=None,
                status=AttendanceStatus.ABSENT,
                notes=optional_text(notes, "Notes"),
            )
        elif existing.clock_in is not None:
            raise ValidationError("Employee has already clocked in on that day")
        else:
            self._attendance.mark_absent(attendance_id=existing.attendance_id, notes=optional_text(notes, "Notes"))

        logger.info("Employee %s marked absent on %s by %s", target.emp_id, day.isoformat(), actor.emp_id)

    def calendar(self, *, actor_id: int, emp_id: Optional[int], year: int, month: int) -> MonthCalendar:
        actor = require_actor(self._employees, actor_id)
        target = actor if emp_id is None else self._employees.get_by_id(int(emp_id))
        if not target:
            raise NotFoundError("Employee not found")
        if not can_view_employee(self._departments, actor, target):
            raise AuthorizationError("You are not allowed to view this employee's attendance")

        start, end = month_bounds(year, month)
        holidays = {h.holiday_date for h in self._holidays.list_between(start_date=start, end_date=end)}
        intervals = self._leave_service.leave_intervals(emp_id=target.emp_id, start_date=start, end_date=end)
        records = {
            r.work_date: r
            for r in self._attendance.list_for_employee(target.emp_id, start_date=start, end_date=end)
        }

        days, summary = month_calendar(
            int(year),
            int(month),
            holidays=holidays,
            leave_intervals=intervals,
            records=records,
        )
        return MonthCalendar(emp_id=target.emp_id, year=int(year), month=int(month), days=days, summary=summary)

    def daily_board(self, *, actor_id: int, day: Optional[date] = None) -> list[BoardRow]:
        """Every active employee the actor oversees with that day's clock times."""
        actor = require_actor(self._employees, actor_id)
        if not (actor.role.is_hr_reviewer or actor.role in (RoleName.DEPARTMENT_HEAD, RoleName.TEAM_LEAD)):
            raise AuthorizationError("You are not allowed to view the attendance board")

        day = day or self._clock().date()
        staff = [e for e in visible_employees(self._employees, self._departments, actor) if e.is_active]
        records = {r.emp_id: r for r in self._attendance.list_for_date(day)}
        dept_names = {d.dept_id: d.dept_name for d in self._departments.list_all()}

        rows = []
        for employee in sorted(staff, key=lambda e: (e.first_name, e.last_name)):
            record = records.get(employee.emp_id)
            rows.append(_board_row(employee, record, dept_names.get(employee.department_id)))
        return rows

    # Holidays

    def add_holiday(self, *, actor_id: int, day: date, reason: str) -> int:
        actor = require_actor(self._employees, actor_id)
        require_hr(actor)
        reason = require_non_empty(reason, "Reason")
        if self._holidays.get_by_date(day):
            raise ConflictError("A holiday already exists on that date")

        holiday_id = self._holidays.create(holiday_date=day, reason=reason, created_by=actor.emp_id)
        logger.info("Holiday %s added on %s by %s", holiday_id, day.isoformat(), actor.emp_id)
        return holiday_id

    def list_holidays(self, *, start_date: date, end_date: date) -> Sequence[Holiday]:
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date")
        return self._holidays.list_between(start_date=start_date, end_date=end_date)

    def delete_holiday(self, *, actor_id: int, holiday_id: int) -> None:
        require_hr(require_actor(self._employees, actor_id))
        if not self._holidays.delete(holiday_id=int(holiday_id)):
            raise NotFoundError("Holiday not found")
