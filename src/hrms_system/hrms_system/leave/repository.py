from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType, ReviewStage
from .model import LeaveInterval, LeaveRequest


class LeaveRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        emp_id: Optional[int] = None,
        department_id: Optional[int] = None,
        statuses: Optional[Iterable[LeaveStatus]] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        """Rows joined with the requester; every filter is optional and ANDed."""

        raise NotImplementedError

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
        """Guarded update: only applies while the row is still in ``expected_status``.

        Returns False when no row matched (someone else moved it first).
        """

        raise NotImplementedError

    def has_overlap(self, *, emp_id: int, start_date: date, end_date: date) -> bool:
        raise NotImplementedError

    def list_intervals(
        self,
        *,
        emp_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Sequence[LeaveInterval]:
        raise NotImplementedError
