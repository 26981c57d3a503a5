"""Leave approval rules.

Everything in this module is pure: the status transition table, the
inclusive day count and the reviewer permission check. The service layer
calls into it and never decides transitions on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import LeaveStatus, ReviewDecision, ReviewStage, RoleName
from ..core.exceptions import InvalidTransitionError, ValidationError
from .model import LeaveRequest

# (current status, stage) -> {decision: next status}
TRANSITIONS: dict[tuple[LeaveStatus, ReviewStage], dict[ReviewDecision, LeaveStatus]] = {
    (LeaveStatus.PENDING, ReviewStage.DEPARTMENT): {
        ReviewDecision.APPROVE: LeaveStatus.DEPT_APPROVED,
        ReviewDecision.REJECT: LeaveStatus.DEPT_REJECTED,
    },
    (LeaveStatus.DEPT_APPROVED, ReviewStage.HR): {
        ReviewDecision.APPROVE: LeaveStatus.APPROVED,
        ReviewDecision.REJECT: LeaveStatus.REJECTED,
    },
    # Senior requesters have no department-level reviewer; HR decides directly.
    (LeaveStatus.PENDING, ReviewStage.HR): {
        ReviewDecision.APPROVE: LeaveStatus.APPROVED,
        ReviewDecision.REJECT: LeaveStatus.REJECTED,
    },
}


@dataclass(frozen=True)
class ReviewerScope:
    """Who is acting, as loaded from the store (never from the client)."""

    emp_id: int
    role: RoleName
    department_id: Optional[int] = None
    headed_department_id: Optional[int] = None


def total_days(start: date, end: date) -> int:
    """Inclusive number of calendar days between ``start`` and ``end``."""
    if end < start:
        raise ValidationError("End date must not be before start date")
    return (end - start).days + 1


def initial_status(requester_role: RoleName, *, senior_bypass: bool = True) -> LeaveStatus:
    if senior_bypass and requester_role.is_senior:
        return LeaveStatus.DEPT_APPROVED
    return LeaveStatus.PENDING


def stage_for(
    status: LeaveStatus, requester_role: RoleName, *, senior_bypass: bool = True
) -> Optional[ReviewStage]:
    """Which review stage a request in ``status`` is waiting on, if any.

    With ``senior_bypass`` on, seniority was already applied when the request
    was created, so a pending request always waits on the department head even
    if the requester has since been promoted.
    """
    if status == LeaveStatus.DEPT_APPROVED:
        return ReviewStage.HR
    if status == LeaveStatus.PENDING:
        if not senior_bypass and requester_role.is_senior:
            return ReviewStage.HR
        return ReviewStage.DEPARTMENT
    return None


def next_status(current: LeaveStatus, stage: ReviewStage, decision: ReviewDecision) -> LeaveStatus:
    if current.is_terminal:
        raise InvalidTransitionError(f"Leave request is already {current.value}")
    options = TRANSITIONS.get((current, stage))
    if not options:
        raise InvalidTransitionError(f"A {stage.value} review cannot act on a {current.value} request")
    return options[decision]


def can_review(scope: ReviewerScope, request: LeaveRequest, *, senior_bypass: bool = True) -> bool:
    if scope.emp_id == request.emp_id:
        return False

    stage = stage_for(request.status, request.requester_role, senior_bypass=senior_bypass)
    if stage == ReviewStage.DEPARTMENT:
        return (
            scope.role == RoleName.DEPARTMENT_HEAD
            and scope.headed_department_id is not None
            and scope.headed_department_id == request.requester_department_id
        )
    if stage == ReviewStage.HR:
        return scope.role.is_hr_reviewer
    return False


def review_columns(stage: ReviewStage) -> tuple[str, str, str]:
    """Reviewer id, comments and timestamp columns written by ``stage``."""
    if stage == ReviewStage.DEPARTMENT:
        return "reviewed_by_dept_head", "dept_head_comments", "dept_review_date"
    return "reviewed_by_hr", "hr_comments", "hr_review_date"
