from __future__ import annotations

from datetime import date

import pytest

from src.hrms_system.hrms_system.core.enums import LeaveStatus, ReviewDecision, ReviewStage, RoleName
from src.hrms_system.hrms_system.core.exceptions import InvalidTransitionError, ValidationError
from src.hrms_system.hrms_system.leave import workflow
from src.hrms_system.hrms_system.leave.model import LeaveRequest
from src.hrms_system.hrms_system.leave.workflow import ReviewerScope


def _request(*, status=LeaveStatus.PENDING, role=RoleName.EMPLOYEE, emp_id=5, dept_id=1) -> LeaveRequest:
    return LeaveRequest(
        leave_id=1,
        emp_id=emp_id,
        leave_type="vacation",
        start_date=date(2024, 1, 10),
        end_date=date(2024, 1, 12),
        total_days=3,
        reason="trip",
        status=status,
        created_at=None,
        requester_role=role,
        requester_department_id=dept_id,
    )


def test_total_days_is_inclusive():
    assert workflow.total_days(date(2024, 1, 10), date(2024, 1, 12)) == 3
    assert workflow.total_days(date(2024, 1, 10), date(2024, 1, 10)) == 1
    assert workflow.total_days(date(2024, 2, 28), date(2024, 3, 1)) == 3


def test_total_days_rejects_reversed_range():
    with pytest.raises(ValidationError):
        workflow.total_days(date(2024, 1, 12), date(2024, 1, 10))


@pytest.mark.parametrize(
    "role, expected",
    [
        (RoleName.EMPLOYEE, LeaveStatus.PENDING),
        (RoleName.TEAM_LEAD, LeaveStatus.PENDING),
        (RoleName.DEPARTMENT_HEAD, LeaveStatus.DEPT_APPROVED),
        (RoleName.HR_MANAGER, LeaveStatus.DEPT_APPROVED),
        (RoleName.CXO, LeaveStatus.DEPT_APPROVED),
    ],
)
def test_initial_status_by_role(role, expected):
    assert workflow.initial_status(role) == expected


def test_initial_status_without_bypass_is_always_pending():
    assert workflow.initial_status(RoleName.CXO, senior_bypass=False) == LeaveStatus.PENDING


def test_transition_table():
    assert workflow.next_status(LeaveStatus.PENDING, ReviewStage.DEPARTMENT, ReviewDecision.APPROVE) == LeaveStatus.DEPT_APPROVED
    assert workflow.next_status(LeaveStatus.PENDING, ReviewStage.DEPARTMENT, ReviewDecision.REJECT) == LeaveStatus.DEPT_REJECTED
    assert workflow.next_status(LeaveStatus.DEPT_APPROVED, ReviewStage.HR, ReviewDecision.APPROVE) == LeaveStatus.APPROVED
    assert workflow.next_status(LeaveStatus.DEPT_APPROVED, ReviewStage.HR, ReviewDecision.REJECT) == LeaveStatus.REJECTED


@pytest.mark.parametrize("status", [LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.DEPT_REJECTED])
@pytest.mark.parametrize("stage", list(ReviewStage))
def test_terminal_states_have_no_transition(status, stage):
    with pytest.raises(InvalidTransitionError):
        workflow.next_status(status, stage, ReviewDecision.APPROVE)


def test_department_stage_cannot_act_on_dept_approved():
    with pytest.raises(InvalidTransitionError):
        workflow.next_status(LeaveStatus.DEPT_APPROVED, ReviewStage.DEPARTMENT, ReviewDecision.APPROVE)


def test_stage_for():
    assert workflow.stage_for(LeaveStatus.PENDING, RoleName.EMPLOYEE) == ReviewStage.DEPARTMENT
    assert workflow.stage_for(LeaveStatus.PENDING, RoleName.DEPARTMENT_HEAD, senior_bypass=False) == ReviewStage.HR
    assert workflow.stage_for(LeaveStatus.DEPT_APPROVED, RoleName.EMPLOYEE) == ReviewStage.HR
    assert workflow.stage_for(LeaveStatus.APPROVED, RoleName.EMPLOYEE) is None


def test_pending_request_of_promoted_requester_stays_at_department_stage():
    # created pending as an Employee, requester later promoted
    request = _request(status=LeaveStatus.PENDING, role=RoleName.DEPARTMENT_HEAD)
    hr = ReviewerScope(emp_id=2, role=RoleName.HR_MANAGER, department_id=2)

    assert workflow.stage_for(LeaveStatus.PENDING, RoleName.DEPARTMENT_HEAD) == ReviewStage.DEPARTMENT
    assert not workflow.can_review(hr, request)
    assert workflow.can_review(hr, request, senior_bypass=False)


def test_department_head_reviews_only_own_department():
    request = _request(dept_id=1)
    own = ReviewerScope(emp_id=3, role=RoleName.DEPARTMENT_HEAD, department_id=1, headed_department_id=1)
    other = ReviewerScope(emp_id=9, role=RoleName.DEPARTMENT_HEAD, department_id=2, headed_department_id=2)
    not_heading = ReviewerScope(emp_id=10, role=RoleName.DEPARTMENT_HEAD, department_id=1)

    assert workflow.can_review(own, request)
    assert not workflow.can_review(other, request)
    assert not workflow.can_review(not_heading, request)


def test_hr_cannot_take_department_stage():
    hr = ReviewerScope(emp_id=2, role=RoleName.HR_MANAGER, department_id=2)
    assert not workflow.can_review(hr, _request(status=LeaveStatus.PENDING))
    assert workflow.can_review(hr, _request(status=LeaveStatus.DEPT_APPROVED))


def test_team_lead_and_employee_never_review():
    request = _request(status=LeaveStatus.DEPT_APPROVED)
    for role in (RoleName.EMPLOYEE, RoleName.TEAM_LEAD):
        assert not workflow.can_review(ReviewerScope(emp_id=99, role=role, department_id=1), request)


def test_nobody_reviews_their_own_request():
    cxo = ReviewerScope(emp_id=1, role=RoleName.CXO)
    assert not workflow.can_review(cxo, _request(status=LeaveStatus.DEPT_APPROVED, role=RoleName.CXO, emp_id=1))
