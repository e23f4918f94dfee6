"""Input checks shared by the core operations."""

from __future__ import annotations

from typing import Any

from .exceptions import MissingFieldError, ValidationException


def require_text(value: Any, field: str) -> str:
    """Return ``value`` stripped of surrounding whitespace, or raise if it is empty."""
    if value is None:
        raise MissingFieldError(field)
    if not isinstance(value, str):
        raise ValidationException(f"{field} must be a string", field=field, value=value)
    value = value.strip()
    if not value:
        raise MissingFieldError(field)
    return value


def require_bool(value: Any, field: str) -> bool:
    if value is None:
        raise MissingFieldError(field)
    if not isinstance(value, bool):
        raise ValidationException(f"{field} must be a boolean", field=field, value=value)
    return value
