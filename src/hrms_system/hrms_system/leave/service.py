from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, ON_LEAVE_STATUSES, REVIEW_QUEUE_LIMIT
from ..core.enums import LeaveStatus, LeaveType, ReviewDecision, RoleName
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..employees.department_repository import DepartmentRepository
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import headed_department_id, require_actor
from . import workflow
from .model import LeaveInterval, LeaveRequest
from .repository import LeaveRepository
from .workflow import ReviewerScope

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave application and the two-stage review.

    Every permission check happens here against the employee row loaded from
    the store, so a client cannot promote itself by sending a different role.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        *,
        senior_bypass: bool = True,
        clock=now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._departments = departments
        self._senior_bypass = bool(senior_bypass)
        self._clock = clock

    def _scope(self, actor: Employee) -> ReviewerScope:
        return ReviewerScope(
            emp_id=actor.emp_id,
            role=actor.role,
            department_id=actor.department_id,
            headed_department_id=headed_department_id(self._departments, actor),
        )

    @staticmethod
    def _parse_leave_type(value: Any) -> LeaveType:
        if not value:
            raise ValidationError("Leave type is required")
        try:
            return LeaveType(value)
        except ValueError:
            raise ValidationError("Unknown leave type")

    def apply(
        self,
        *,
        actor_id: int,
        leave_type: Any,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str,
    ) -> int:
        actor = require_actor(self._employees, actor_id)

        leave_type = self._parse_leave_type(leave_type)
        if start_date is None or end_date is None:
            raise ValidationError("Start date and end date are required")
        reason = require_non_empty(reason, "Reason")
        days = workflow.total_days(start_date, end_date)

        if self._leaves.has_overlap(emp_id=actor.emp_id, start_date=start_date, end_date=end_date):
            raise ValidationError("You already have a leave request covering those dates")

        status = workflow.initial_status(actor.role, senior_bypass=self._senior_bypass)
        leave_id = self._leaves.create(
            emp_id=actor.emp_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=days,
            reason=reason,
            status=status,
        )
        logger.info("Leave %s submitted by %s (%d day(s), status=%s)", leave_id, actor.emp_id, days, status.value)
        return leave_id

    def review(
        self,
        *,
        actor_id: int,
        leave_id: int,
        decision: ReviewDecision,
        comments: str = "",
    ) -> LeaveStatus:
        actor = require_actor(self._employees, actor_id)
        comments = optional_text(comments, "Comments")
        request = self._leaves.get(leave_id=int(leave_id))
        if not request:
            raise NotFoundError("Leave request not found")

        stage = workflow.stage_for(request.status, request.requester_role, senior_bypass=self._senior_bypass)
        if stage is None:
            raise InvalidTransitionError(f"Leave request is already {request.status.value}")

        scope = self._scope(actor)
        if not workflow.can_review(scope, request, senior_bypass=self._senior_bypass):
            logger.warning(
                "Denied %s review of leave %s by emp_id=%s role=%s",
                stage.value,
                request.leave_id,
                actor.emp_id,
                actor.role.value,
            )
            raise AuthorizationError("You are not allowed to review this leave request")

        new_status = workflow.next_status(request.status, stage, decision)
        moved = self._leaves.transition(
            leave_id=request.leave_id,
            expected_status=request.status,
            new_status=new_status,
            stage=stage,
            reviewer_id=actor.emp_id,
            comments=comments,
            reviewed_at=self._clock(),
        )
        if not moved:
            logger.warning("Leave %s changed while %s was reviewing it", request.leave_id, actor.emp_id)
            raise ConflictError("This leave request was already reviewed by someone else")

        logger.info(
            "Leave %s %s -> %s by %s (%s stage)",
            request.leave_id,
            request.status.value,
            new_status.value,
            actor.emp_id,
            stage.value,
        )
        return new_status

    def approve(self, *, actor_id: int, leave_id: int, comments: str = "") -> LeaveStatus:
        return self.review(actor_id=actor_id, leave_id=leave_id, decision=ReviewDecision.APPROVE, comments=comments)

    def reject(self, *, actor_id: int, leave_id: int, comments: str = "") -> LeaveStatus:
        return self.review(actor_id=actor_id, leave_id=leave_id, decision=ReviewDecision.REJECT, comments=comments)

    def list_mine(self, *, actor_id: int) -> Sequence[LeaveRequest]:
        actor = require_actor(self._employees, actor_id)
        return self._leaves.list_requests(emp_id=actor.emp_id, limit=DEFAULT_LIST_LIMIT)

    def list_for(self, *, actor_id: int) -> Sequence[LeaveRequest]:
        """Requests the actor should see: a review queue for reviewers, own history otherwise."""
        actor = require_actor(self._employees, actor_id)
        scope = self._scope(actor)

        if scope.role.is_hr_reviewer:
            rows = self._leaves.list_requests(
                statuses=(LeaveStatus.DEPT_APPROVED, LeaveStatus.PENDING),
                limit=REVIEW_QUEUE_LIMIT,
            )
            return [r for r in rows if workflow.can_review(scope, r, senior_bypass=self._senior_bypass)]

        if scope.role == RoleName.DEPARTMENT_HEAD:
            if scope.headed_department_id is None:
                return []
            rows = self._leaves.list_requests(
                department_id=scope.headed_department_id,
                statuses=(LeaveStatus.PENDING,),
                limit=REVIEW_QUEUE_LIMIT,
            )
            return [r for r in rows if workflow.can_review(scope, r, senior_bypass=self._senior_bypass)]

        return self._leaves.list_requests(emp_id=actor.emp_id, limit=DEFAULT_LIST_LIMIT)

    def get(self, *, actor_id: int, leave_id: int) -> LeaveRequest:
        actor = require_actor(self._employees, actor_id)
        request = self._leaves.get(leave_id=int(leave_id))
        if not request:
            raise NotFoundError("Leave request not found")

        scope = self._scope(actor)
        visible = (
            request.emp_id == actor.emp_id
            or actor.emp_id in (request.reviewed_by_dept_head, request.reviewed_by_hr)
            or scope.role.is_hr_reviewer
            or (
                scope.headed_department_id is not None
                and scope.headed_department_id == request.requester_department_id
            )
        )
        if not visible:
            raise AuthorizationError("You are not allowed to view this leave request")
        return request

    def leave_intervals(self, *, emp_id: int, start_date: date, end_date: date) -> Sequence[LeaveInterval]:
        return self._leaves.list_intervals(
            emp_id=int(emp_id),
            start_date=start_date,
            end_date=end_date,
            statuses=ON_LEAVE_STATUSES,
        )
