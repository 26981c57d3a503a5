from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType, RoleName


@dataclass(frozen=True)
class LeaveRequest:
    """One employee's request for time off, joined with the requester's org data."""

    leave_id: int
    emp_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    created_at: datetime
    requester_role: RoleName = RoleName.EMPLOYEE
    requester_department_id: Optional[int] = None
    requester_name: str = ""
    reviewed_by_dept_head: Optional[int] = None
    dept_head_comments: Optional[str] = None
    dept_review_date: Optional[datetime] = None
    reviewed_by_hr: Optional[int] = None
    hr_comments: Optional[str] = None
    hr_review_date: Optional[datetime] = None

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start

    def to_dict(self) -> dict:
        return {
            "leave_id": self.leave_id,
            "emp_id": self.emp_id,
            "requester_name": self.requester_name,
            "requester_role": self.requester_role.value,
            "department_id": self.requester_department_id,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_days": self.total_days,
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "dept_head_comments": self.dept_head_comments or "",
            "hr_comments": self.hr_comments or "",
        }


@dataclass(frozen=True)
class LeaveInterval:
    """Date span of an accepted leave, used by the attendance calendar."""

    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
