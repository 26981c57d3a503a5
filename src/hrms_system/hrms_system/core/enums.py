from __future__ import annotations

from enum import Enum


class RoleName(str, Enum):
    """Organisation roles used for permission checks."""

    EMPLOYEE = "Employee"
    TEAM_LEAD = "Team Lead"
    DEPARTMENT_HEAD = "Department Head"
    HR_MANAGER = "HR Manager"
    CXO = "CXO"

    @property
    def is_senior(self) -> bool:
        return self in SENIOR_ROLES

    @property
    def is_hr_reviewer(self) -> bool:
        return self in HR_REVIEWER_ROLES


SENIOR_ROLES = frozenset({RoleName.DEPARTMENT_HEAD, RoleName.HR_MANAGER, RoleName.CXO})
HR_REVIEWER_ROLES = frozenset({RoleName.HR_MANAGER, RoleName.CXO})


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class LeaveType(str, Enum):
    SICK = "sick"
    VACATION = "vacation"
    PERSONAL = "personal"
    EMERGENCY = "emergency"


class LeaveStatus(str, Enum):
    """Leave request lifecycle tags."""

    PENDING = "pending"
    DEPT_APPROVED = "dept_approved"
    APPROVED = "approved"
    REJECTED = "rejected"
    DEPT_REJECTED = "dept_rejected"

    @property
    def is_terminal(self) -> bool:
        return self in {LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.DEPT_REJECTED}


class ReviewStage(str, Enum):
    DEPARTMENT = "department"
    HR = "hr"


class ReviewDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class AttendanceStatus(str, Enum):
    """Status column stored on attendance rows."""

    PRESENT = "present"
    CLOCKED_OUT = "clocked_out"
    ABSENT = "absent"


class DayStatus(str, Enum):
    """Derived classification of one calendar day."""

    HOLIDAY = "Holiday"
    ON_LEAVE = "On Leave"
    PRESENT = "Present"
    ABSENT = "Absent"
    NO_RECORD = "No Record"
