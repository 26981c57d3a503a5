from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
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
from ..core.exceptions import DomainError, ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        try:
            record = service.clock_in(emp_id=current_emp_id())
            return ok(message="Clocked in", record=record.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("clocking in")

    @app.route("/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        try:
            record = service.clock_out(emp_id=current_emp_id())
            return ok(message="Clocked out", record=record.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("clocking out")

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        try:
            return ok(**service.today(emp_id=current_emp_id()).to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading today's attendance")

    @app.route("/attendance/calendar", methods=["GET"], endpoint="attendance_calendar")
    @login_required
    def attendance_calendar():
        args = request.args.to_dict()
        try:
            today = now_local().date()
            year = int_field(args, "year", "Year") or today.year
            month = int_field(args, "month", "Month") or today.month
            cal = service.calendar(
                actor_id=current_emp_id(),
                emp_id=int_field(args, "emp_id", "Employee"),
                year=year,
                month=month,
            )
            return ok(**cal.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading the attendance calendar")

    @app.route("/attendance/board", methods=["GET"], endpoint="attendance_board")
    @login_required
    def attendance_board():
        args = request.args.to_dict()
        try:
            day = date_field(args, "date", "Date")
            rows = service.daily_board(actor_id=current_emp_id(), day=day)
            return ok(employees=[r.to_dict() for r in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading the attendance board")

    @app.route("/attendance/absent", methods=["POST"], endpoint="mark_absent")
    @login_required
    def mark_absent():
        data = payload()
        try:
            emp_id = int_field(data, "emp_id", "Employee")
            day = date_field(data, "date", "Date")
            if emp_id is None or day is None:
                raise ValidationError("Employee and date are required")
            service.mark_absent(actor_id=current_emp_id(), emp_id=emp_id, day=day, notes=data.get("notes"))
            return ok(message="Employee marked absent")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("marking the employee absent")

    @app.route("/holidays", methods=["GET"], endpoint="list_holidays")
    @login_required
    def list_holidays():
        args = request.args.to_dict()
        try:
            today = now_local().date()
            start = date_field(args, "start", "Start date") or today.replace(month=1, day=1)
            end = date_field(args, "end", "End date") or today.replace(month=12, day=31)
            rows = service.list_holidays(start_date=start, end_date=end)
            return ok(holidays=[h.to_dict() for h in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading holidays")

    @app.route("/holidays", methods=["POST"], endpoint="add_holiday")
    @login_required
    def add_holiday():
        data = payload()
        try:
            day = date_field(data, "date", "Date")
            if day is None:
                raise ValidationError("Date is required")
            holiday_id = service.add_holiday(actor_id=current_emp_id(), day=day, reason=data.get("reason", ""))
            return ok(201, message="Holiday added", holiday_id=holiday_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("adding the holiday")

    @app.route("/holidays/<int:holiday_id>/delete", methods=["POST"], endpoint="delete_holiday")
    @login_required
    def delete_holiday(holiday_id: int):
        try:
            service.delete_holiday(actor_id=current_emp_id(), holiday_id=holiday_id)
            return ok(message="Holiday deleted")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("deleting the holiday")
