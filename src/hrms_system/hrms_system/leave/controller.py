from __future__ import annotations

from flask import Flask

from ..common.web import (
    current_emp_id,
    date_field,
    domain_error,
    login_required,
    ok,
    payload,
    unexpected_error,
)
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/leave", methods=["GET"], endpoint="my_leave")
    @login_required
    def my_leave():
        try:
            rows = service.list_mine(actor_id=current_emp_id())
            return ok(leaves=[r.to_dict() for r in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading your leave requests")

    @app.route("/leave", methods=["POST"], endpoint="apply_leave")
    @login_required
    def apply_leave():
        data = payload()
        try:
            leave_id = service.apply(
                actor_id=current_emp_id(),
                leave_type=data.get("leave_type"),
                start_date=date_field(data, "start_date", "Start date"),
                end_date=date_field(data, "end_date", "End date"),
                reason=data.get("reason", ""),
            )
            request_row = service.get(actor_id=current_emp_id(), leave_id=leave_id)
            return ok(201, message="Leave request submitted", leave=request_row.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("submitting the leave request")

    @app.route("/leave/queue", methods=["GET"], endpoint="leave_queue")
    @login_required
    def leave_queue():
        try:
            rows = service.list_for(actor_id=current_emp_id())
            return ok(leaves=[r.to_dict() for r in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading the leave queue")

    @app.route("/leave/<int:leave_id>", methods=["GET"], endpoint="leave_detail")
    @login_required
    def leave_detail(leave_id: int):
        try:
            row = service.get(actor_id=current_emp_id(), leave_id=leave_id)
            return ok(leave=row.to_dict())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading the leave request")

    @app.route("/leave/<int:leave_id>/approve", methods=["POST"], endpoint="approve_leave")
    @login_required
    def approve_leave(leave_id: int):
        data = payload()
        try:
            status = service.approve(
                actor_id=current_emp_id(),
                leave_id=leave_id,
                comments=data.get("comments", ""),
            )
            return ok(message="Leave request approved", status=status.value)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("approving the leave request")

    @app.route("/leave/<int:leave_id>/reject", methods=["POST"], endpoint="reject_leave")
    @login_required
    def reject_leave(leave_id: int):
        data = payload()
        try:
            status = service.reject(
                actor_id=current_emp_id(),
                leave_id=leave_id,
                comments=data.get("comments", ""),
            )
            return ok(message="Leave request rejected", status=status.value)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("rejecting the leave request")
