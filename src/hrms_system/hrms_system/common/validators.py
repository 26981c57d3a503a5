from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def _text(value: Any, field_name: str) -> str:
    """None as empty text; anything that is not a string is rejected."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def require_non_empty(value: Optional[str], field_name: str) -> str:
    value = _text(value, field_name).strip()
    if not value:
        raise ValidationError(f"{field_name} is required")
    return value


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    value = _text(value, field_name)
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: Optional[str], field_name: str = "Text") -> Optional[str]:
    """Strip a free-text field, mapping blanks to None."""
    return _text(value, field_name).strip() or None


def require_email(value: Optional[str], field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name)
    local, _, domain = value.partition("@")
    if not local or "." not in domain:
        raise ValidationError(f"{field_name} is not a valid address")
    return value.lower()
