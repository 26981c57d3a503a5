from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.hrms_system.hrms_system.core.exceptions import AuthorizationError, NotFoundError


def _service(org, day):
    return org.employee_service(clock=lambda: datetime(day.year, day.month, day.day, 10, 0))


def test_update_writes_a_history_period(org):
    service = _service(org, date(2024, 3, 1))
    service.update_employee(
        actor_id=org.hr.emp_id,
        emp_id=org.employee.emp_id,
        salary="50000",
        change_reason="Annual review",
    )

    [period] = org.history.list_history(emp_ids=[org.employee.emp_id])
    assert period.old_salary is None
    assert period.new_salary == Decimal("50000")
    assert period.old_dept_id == period.new_dept_id == org.engineering.dept_id
    assert period.start_date == date(2024, 3, 1)
    assert period.end_date is None
    assert period.change_types == ["Salary"]
    assert period.change_reason == "Annual review"


def test_next_change_closes_the_open_period(org):
    _service(org, date(2024, 3, 1)).update_employee(
        actor_id=org.hr.emp_id, emp_id=org.employee.emp_id, salary="50000"
    )
    _service(org, date(2024, 6, 1)).update_employee(
        actor_id=org.hr.emp_id, emp_id=org.employee.emp_id, department_id=org.finance.dept_id
    )

    newest, oldest = org.history.list_history(emp_ids=[org.employee.emp_id])
    assert oldest.end_date == date(2024, 6, 1)
    assert newest.end_date is None
    assert newest.change_types == ["Department"]
    assert newest.old_salary == newest.new_salary == Decimal("50000")


def test_changes_outside_tracked_fields_leave_no_history(org):
    service = _service(org, date(2024, 3, 1))
    service.update_employee(actor_id=org.hr.emp_id, emp_id=org.employee.emp_id, phone="555", role="Team Lead")
    service.update_employee(
        actor_id=org.hr.emp_id, emp_id=org.employee.emp_id, department_id=org.engineering.dept_id
    )

    assert org.history.list_history() == []


def test_hr_salary_change_on_own_profile_is_recorded(org):
    _service(org, date(2024, 3, 1)).update_profile(actor_id=org.hr.emp_id, salary="7000")

    [period] = org.history.list_history(emp_ids=[org.hr.emp_id])
    assert period.new_salary == Decimal("7000")
    assert period.change_reason is None


def test_history_visibility(org):
    service = _service(org, date(2024, 3, 1))
    for person in (org.employee, org.tlead, org.fin_employee):
        service.update_employee(actor_id=org.hr.emp_id, emp_id=person.emp_id, salary="1000")

    def owners(actor, **kwargs):
        return {h.emp_id for h in service.list_history(actor_id=actor.emp_id, **kwargs)}

    assert owners(org.hr) == {org.employee.emp_id, org.tlead.emp_id, org.fin_employee.emp_id}
    assert owners(org.dhead) == {org.employee.emp_id, org.tlead.emp_id}
    assert owners(org.tlead) == {org.employee.emp_id, org.tlead.emp_id}
    assert owners(org.employee) == {org.employee.emp_id}
    assert owners(org.fhead, emp_id=org.fin_employee.emp_id) == {org.fin_employee.emp_id}

    with pytest.raises(AuthorizationError):
        service.list_history(actor_id=org.fhead.emp_id, emp_id=org.employee.emp_id)
    with pytest.raises(AuthorizationError):
        service.list_history(actor_id=org.employee.emp_id, emp_id=org.tlead.emp_id)
    with pytest.raises(NotFoundError):
        service.list_history(actor_id=org.hr.emp_id, emp_id=999)
