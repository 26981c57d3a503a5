from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

# Order matters: subclasses before their bases.
_STATUS_CODES = (
    (InvalidTransitionError, 409),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreError, 503),
)


def status_for(exc: DomainError) -> int:
    for exc_type, code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 400


def ok(http_status: int = 200, /, **body: Any):
    return jsonify({"success": True, **body}), http_status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def domain_error(exc: DomainError):
    if isinstance(exc, AuthenticationError):
        session.clear()
    return fail(str(exc), status_for(exc))


def unexpected_error(action: str):
    logger.exception("Unexpected error while %s", action)
    return fail(f"System error while {action}", 500)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "emp_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def current_emp_id() -> int:
    return int(session["emp_id"])


def payload() -> dict:
    """JSON body, or form fields for plain HTML form posts."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def date_field(data: dict, key: str, field_name: str) -> Optional[date]:
    value = data.get(key)
    if value in (None, ""):
        return None
    return parse_iso_date(str(value), field_name)


def int_field(data: dict, key: str, field_name: str) -> Optional[int]:
    value = data.get(key)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
