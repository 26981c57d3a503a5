from __future__ import annotations

from datetime import timedelta
from typing import Any

from flask import Flask, request, session

from ..common.web import (
    current_emp_id,
    date_field,
    domain_error,
    int_field,
    login_required,
    ok,
    payload,
    unexpected_error,
)
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import DomainError

_TEXT_FIELDS = ("first_name", "last_name", "username", "email", "password", "phone", "address", "gender")
_ID_FIELDS = (
    ("department_id", "Department"),
    ("designation_id", "Designation"),
    ("reporting_manager_id", "Reporting manager"),
)
_DATE_FIELDS = (("dob", "Date of birth"), ("doj", "Date of joining"))


def _employee_fields(data: dict, *, partial: bool) -> dict[str, Any]:
    """Pick employee columns out of a request body.

    With ``partial`` only keys present in the body are returned.
    """
    fields: dict[str, Any] = {}
    for name in _TEXT_FIELDS:
        if name in data or not partial:
            fields[name] = data.get(name, "")
    for name, label in _ID_FIELDS:
        if name in data or not partial:
            fields[name] = int_field(data, name, label)
    for name, label in _DATE_FIELDS:
        if name in data or not partial:
            fields[name] = date_field(data, name, label)
    for name in ("salary", "role", "status", "change_reason"):
        if name in data:
            fields[name] = data[name]
    return fields


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        try:
            s_emp = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

            session.clear()
            session.permanent = bool(data.get("remember_me"))
            app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
            session["emp_id"] = s_emp.emp_id

            return ok(
                message="Signed in",
                employee={
                    "emp_id": s_emp.emp_id,
                    "full_name": s_emp.full_name,
                    "role": s_emp.role.value,
                    "department_id": s_emp.department_id,
                },
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("signing in")

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Signed out")

    @app.route("/lookup-username", methods=["POST"], endpoint="lookup_username")
    def lookup_username():
        data = payload()
        try:
            email = container.auth_service.lookup_email(data.get("username", ""))
            return ok(email=email)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("looking up the username")

    @app.route("/setup", methods=["POST"], endpoint="bootstrap_executive")
    def bootstrap_executive():
        data = payload()
        try:
            emp_id = employees.bootstrap_executive(
                first_name=data.get("first_name", ""),
                last_name=data.get("last_name", ""),
                username=data.get("username", ""),
                email=data.get("email", ""),
                password=data.get("password", ""),
            )
            return ok(201, message="Executive account created", emp_id=emp_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("creating the executive account")

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            actor = employees.profile(actor_id=current_emp_id())
            return ok(employee=actor.to_dict(include_salary=True))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading your profile")

    @app.route("/me", methods=["POST"], endpoint="update_profile")
    @login_required
    def update_profile():
        data = payload()
        try:
            employees.update_profile(
                actor_id=current_emp_id(),
                first_name=data.get("first_name"),
                last_name=data.get("last_name"),
                email=data.get("email"),
                phone=data.get("phone"),
                address=data.get("address"),
                salary=data.get("salary"),
            )
            return ok(message="Profile updated")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("updating your profile")

    @app.route("/employees", methods=["GET"], endpoint="list_employees")
    @login_required
    def list_employees():
        try:
            actor = employees.profile(actor_id=current_emp_id())
            rows = employees.list_visible(actor_id=actor.emp_id)
            show_salary = actor.role.is_hr_reviewer
            return ok(employees=[e.to_dict(include_salary=show_salary) for e in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading employees")

    @app.route("/employees", methods=["POST"], endpoint="create_employee")
    @login_required
    def create_employee():
        data = payload()
        try:
            fields = _employee_fields(data, partial=False)
            fields.pop("status", None)
            fields.pop("change_reason", None)
            emp_id = employees.create_employee(actor_id=current_emp_id(), **fields)
            return ok(201, message="Employee created", emp_id=emp_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("creating the employee")

    @app.route("/employees/<int:emp_id>", methods=["POST"], endpoint="update_employee")
    @login_required
    def update_employee(emp_id: int):
        data = payload()
        try:
            changes = _employee_fields(data, partial=True)
            changes.pop("password", None)
            employees.update_employee(actor_id=current_emp_id(), emp_id=emp_id, **changes)
            return ok(message="Employee updated")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("updating the employee")

    @app.route("/employees/history", methods=["GET"], endpoint="employee_history")
    @login_required
    def employee_history():
        args = request.args.to_dict()
        try:
            actor = employees.profile(actor_id=current_emp_id())
            rows = employees.list_history(actor_id=actor.emp_id, emp_id=int_field(args, "emp_id", "Employee"))
            show_salary = actor.role.is_hr_reviewer
            return ok(history=[h.to_dict(include_salary=show_salary) for h in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading employee history")

    @app.route("/departments", methods=["GET"], endpoint="list_departments")
    @login_required
    def list_departments():
        try:
            rows = container.department_service.list_departments()
            return ok(departments=[d.to_dict() for d in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading departments")

    @app.route("/departments", methods=["POST"], endpoint="create_department")
    @login_required
    def create_department():
        data = payload()
        try:
            dept_id = container.department_service.create(
                actor_id=current_emp_id(), dept_name=data.get("dept_name", "")
            )
            return ok(201, message="Department created", dept_id=dept_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("creating the department")

    @app.route("/departments/<int:dept_id>", methods=["POST"], endpoint="rename_department")
    @login_required
    def rename_department(dept_id: int):
        data = payload()
        try:
            container.department_service.rename(
                actor_id=current_emp_id(), dept_id=dept_id, dept_name=data.get("dept_name", "")
            )
            return ok(message="Department renamed")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("renaming the department")

    @app.route("/departments/<int:dept_id>/delete", methods=["POST"], endpoint="delete_department")
    @login_required
    def delete_department(dept_id: int):
        try:
            container.department_service.delete(actor_id=current_emp_id(), dept_id=dept_id)
            return ok(message="Department deleted")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("deleting the department")

    @app.route("/departments/<int:dept_id>/head", methods=["POST"], endpoint="assign_department_head")
    @login_required
    def assign_department_head(dept_id: int):
        data = payload()
        try:
            head_id = int_field(data, "emp_id", "Employee")
            container.department_service.assign_head(
                actor_id=current_emp_id(), dept_id=dept_id, emp_id=head_id or 0
            )
            return ok(message="Department head assigned")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("assigning the department head")

    @app.route("/designations", methods=["GET"], endpoint="list_designations")
    @login_required
    def list_designations():
        try:
            rows = container.designation_service.list_designations()
            return ok(designations=[d.to_dict() for d in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading designations")

    @app.route("/designations", methods=["POST"], endpoint="create_designation")
    @login_required
    def create_designation():
        data = payload()
        try:
            designation_id = container.designation_service.create(
                actor_id=current_emp_id(),
                designation_name=data.get("designation_name", ""),
                level=int_field(data, "level", "Level"),
            )
            return ok(201, message="Designation created", designation_id=designation_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("creating the designation")
