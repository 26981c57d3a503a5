from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, DayStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's clock record for one day."""

    attendance_id: int
    emp_id: int
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "emp_id": self.emp_id,
            "date": self.work_date.isoformat(),
            "clock_in": self.clock_in.strftime("%H:%M:%S") if self.clock_in else None,
            "clock_out": self.clock_out.strftime("%H:%M:%S") if self.clock_out else None,
            "status": self.status.value,
            "notes": self.notes or "",
        }


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    holiday_date: date
    reason: str
    created_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "holiday_id": self.holiday_id,
            "date": self.holiday_date.isoformat(),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class CalendarDay:
    """Read-model: classified day on the attendance calendar."""

    day: date
    status: DayStatus

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), "status": self.status.value}


@dataclass(frozen=True)
class BoardRow:
    """Read-model: one employee's line on the daily attendance board."""

    emp_id: int
    employee_name: str
    department_name: Optional[str]
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    status: AttendanceStatus
    total_hours: str

    def to_dict(self) -> dict:
        return {
            "emp_id": self.emp_id,
            "employee_name": self.employee_name,
            "department": self.department_name or "No department",
            "clock_in": self.clock_in.strftime("%H:%M") if self.clock_in else None,
            "clock_out": self.clock_out.strftime("%H:%M") if self.clock_out else None,
            "status": self.status.value,
            "total_hours": self.total_hours,
        }
