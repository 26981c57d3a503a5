from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hrms_system.hrms_system.core.enums import AttendanceStatus, DayStatus
from src.hrms_system.hrms_system.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_clock_in_then_out(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)

    record = service.clock_in(emp_id=org.employee.emp_id)
    assert record.clock_in == fixed_now
    assert record.status == AttendanceStatus.PRESENT

    later = datetime(2024, 1, 10, 17, 30)
    record = service.clock_out(emp_id=org.employee.emp_id, now=later)
    assert record.clock_out == later
    assert record.status == AttendanceStatus.CLOCKED_OUT


def test_double_clock_in_and_out_are_rejected(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    service.clock_in(emp_id=org.employee.emp_id)

    with pytest.raises(ValidationError):
        service.clock_in(emp_id=org.employee.emp_id)

    service.clock_out(emp_id=org.employee.emp_id)
    with pytest.raises(ValidationError):
        service.clock_out(emp_id=org.employee.emp_id)


def test_clock_out_requires_clock_in(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    with pytest.raises(ValidationError):
        service.clock_out(emp_id=org.employee.emp_id)


def test_clock_in_upgrades_absent_row(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    service.mark_absent(actor_id=org.hr.emp_id, emp_id=org.employee.emp_id, day=fixed_now.date())

    record = service.clock_in(emp_id=org.employee.emp_id)
    assert record.clock_in == fixed_now
    assert record.status == AttendanceStatus.PRESENT


def test_today_reports_worked_time(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    assert service.today(emp_id=org.employee.emp_id).record is None

    service.clock_in(emp_id=org.employee.emp_id, now=datetime(2024, 1, 10, 7, 45))
    assert service.today(emp_id=org.employee.emp_id).worked == "1h 15m"


def test_mark_absent_rules(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)

    with pytest.raises(AuthorizationError):
        service.mark_absent(actor_id=org.dhead.emp_id, emp_id=org.employee.emp_id, day=fixed_now.date())
    with pytest.raises(NotFoundError):
        service.mark_absent(actor_id=org.hr.emp_id, emp_id=999, day=fixed_now.date())

    service.clock_in(emp_id=org.employee.emp_id)
    with pytest.raises(ValidationError):
        service.mark_absent(actor_id=org.hr.emp_id, emp_id=org.employee.emp_id, day=fixed_now.date())


def test_calendar_combines_holidays_leave_and_records(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    leave = org.leave_service()

    service.add_holiday(actor_id=org.hr.emp_id, day=date(2024, 1, 1), reason="New Year")
    leave_id = leave.apply(
        actor_id=org.employee.emp_id,
        leave_type="vacation",
        start_date=date(2024, 1, 15),
        end_date=date(2024, 1, 16),
        reason="Trip",
    )
    leave.approve(actor_id=org.dhead.emp_id, leave_id=leave_id)
    service.clock_in(emp_id=org.employee.emp_id)
    service.mark_absent(actor_id=org.hr.emp_id, emp_id=org.employee.emp_id, day=date(2024, 1, 11))

    cal = service.calendar(actor_id=org.employee.emp_id, emp_id=None, year=2024, month=1)
    by_day = {d.day: d.status for d in cal.days}

    assert by_day[date(2024, 1, 1)] == DayStatus.HOLIDAY
    assert by_day[date(2024, 1, 10)] == DayStatus.PRESENT
    assert by_day[date(2024, 1, 11)] == DayStatus.ABSENT
    assert by_day[date(2024, 1, 15)] == DayStatus.ON_LEAVE
    assert by_day[date(2024, 1, 20)] == DayStatus.NO_RECORD
    assert cal.summary["On Leave"] == 2


def test_pending_leave_does_not_show_on_calendar(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    org.leave_service().apply(
        actor_id=org.employee.emp_id,
        leave_type="sick",
        start_date=date(2024, 1, 15),
        end_date=date(2024, 1, 15),
        reason="Flu",
    )

    cal = service.calendar(actor_id=org.employee.emp_id, emp_id=None, year=2024, month=1)
    assert cal.summary["On Leave"] == 0


def test_calendar_access_rules(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    target = org.employee.emp_id

    for viewer in (org.employee, org.tlead, org.dhead, org.hr, org.ceo):
        assert service.calendar(actor_id=viewer.emp_id, emp_id=target, year=2024, month=1).emp_id == target

    for viewer in (org.fin_employee, org.fhead):
        with pytest.raises(AuthorizationError):
            service.calendar(actor_id=viewer.emp_id, emp_id=target, year=2024, month=1)

    # a team lead sees direct reports only, not their own manager
    with pytest.raises(AuthorizationError):
        service.calendar(actor_id=org.tlead.emp_id, emp_id=org.dhead.emp_id, year=2024, month=1)


def test_calendar_rejects_bad_month(org):
    with pytest.raises(ValidationError):
        org.attendance_service().calendar(actor_id=org.employee.emp_id, emp_id=None, year=2024, month=13)


def test_holiday_management(org):
    service = org.attendance_service()

    holiday_id = service.add_holiday(actor_id=org.ceo.emp_id, day=date(2024, 5, 1), reason="Labour Day")
    with pytest.raises(ConflictError):
        service.add_holiday(actor_id=org.hr.emp_id, day=date(2024, 5, 1), reason="Duplicate")
    with pytest.raises(AuthorizationError):
        service.add_holiday(actor_id=org.employee.emp_id, day=date(2024, 5, 2), reason="Nope")
    with pytest.raises(ValidationError):
        service.add_holiday(actor_id=org.hr.emp_id, day=date(2024, 5, 3), reason=" ")

    listed = service.list_holidays(start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
    assert [h.holiday_id for h in listed] == [holiday_id]

    service.delete_holiday(actor_id=org.hr.emp_id, holiday_id=holiday_id)
    with pytest.raises(NotFoundError):
        service.delete_holiday(actor_id=org.hr.emp_id, holiday_id=holiday_id)


def test_calendar_rejects_year_out_of_range(org):
    with pytest.raises(ValidationError):
        org.attendance_service().calendar(actor_id=org.employee.emp_id, emp_id=None, year=10000, month=1)


def test_department_head_without_a_department_sees_only_themselves(org, fixed_now):
    org.departments.set_head(dept_id=org.engineering.dept_id, emp_id=None)
    service = org.attendance_service(clock=lambda: fixed_now)

    assert service.calendar(actor_id=org.dhead.emp_id, emp_id=None, year=2024, month=1).emp_id == org.dhead.emp_id
    with pytest.raises(AuthorizationError):
        service.calendar(actor_id=org.dhead.emp_id, emp_id=org.employee.emp_id, year=2024, month=1)


def test_daily_board_statuses(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    service.clock_in(emp_id=org.employee.emp_id)
    service.clock_in(emp_id=org.tlead.emp_id, now=datetime(2024, 1, 10, 8, 0))
    service.clock_out(emp_id=org.tlead.emp_id, now=datetime(2024, 1, 10, 16, 45))
    service.mark_absent(actor_id=org.hr.emp_id, emp_id=org.dhead.emp_id, day=date(2024, 1, 10))

    board = {row.emp_id: row for row in service.daily_board(actor_id=org.hr.emp_id)}

    assert set(board) == set(org.employees._rows)
    assert board[org.employee.emp_id].status == AttendanceStatus.PRESENT
    assert board[org.employee.emp_id].total_hours == "In Progress"
    assert board[org.tlead.emp_id].status == AttendanceStatus.CLOCKED_OUT
    assert board[org.tlead.emp_id].total_hours == "8h 45m"
    assert board[org.dhead.emp_id].status == AttendanceStatus.ABSENT
    assert board[org.ceo.emp_id].status == AttendanceStatus.ABSENT
    assert board[org.ceo.emp_id].total_hours == "--"
    assert board[org.employee.emp_id].department_name == "Engineering"


def test_daily_board_reach_per_role(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    org.employees.update(org.fin_employee.emp_id, status="inactive")

    def ids(actor):
        return {row.emp_id for row in service.daily_board(actor_id=actor.emp_id)}

    assert ids(org.dhead) == {org.dhead.emp_id, org.tlead.emp_id, org.employee.emp_id}
    assert ids(org.tlead) == {org.tlead.emp_id, org.employee.emp_id}
    assert ids(org.fhead) == {org.fhead.emp_id}
    with pytest.raises(AuthorizationError):
        service.daily_board(actor_id=org.employee.emp_id)


def test_daily_board_for_another_day(org, fixed_now):
    service = org.attendance_service(clock=lambda: fixed_now)
    service.clock_in(emp_id=org.employee.emp_id)

    board = service.daily_board(actor_id=org.hr.emp_id, day=date(2024, 1, 9))
    assert all(row.status == AttendanceStatus.ABSENT for row in board)
