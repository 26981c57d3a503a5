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
    service = container.policy_service

    @app.route("/policies", methods=["GET"], endpoint="list_policies")
    @login_required
    def list_policies():
        try:
            return ok(policies=[p.to_dict() for p in service.list_policies()])
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("loading policies")

    @app.route("/policies", methods=["POST"], endpoint="publish_policy")
    @login_required
    def publish_policy():
        data = payload()
        try:
            policy_id = service.publish(
                actor_id=current_emp_id(),
                policy_name=data.get("policy_name", ""),
                description=data.get("description", ""),
                effective_date=date_field(data, "effective_date", "Effective date"),
            )
            return ok(201, message="Policy published", policy_id=policy_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("publishing the policy")

    @app.route("/policies/<int:policy_id>/delete", methods=["POST"], endpoint="delete_policy")
    @login_required
    def delete_policy(policy_id: int):
        try:
            service.delete(actor_id=current_emp_id(), policy_id=policy_id)
            return ok(message="Policy deleted")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return unexpected_error("deleting the policy")
