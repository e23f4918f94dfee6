# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Custom exception hierarchy for the debate arena.

Every failure raised by the core falls into one of a small number of
categories, which the HTTP layer maps onto status codes:

- ValidationException -> 400
- ForbiddenError      -> 403
- NotFoundError       -> 404
- ConflictError       -> 409
- DependencyFailure   -> 503
"""

from __future__ import annotations

from typing import Any


class ArenaException(Exception):  # noqa: N818
    """Base exception for all arena errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ArenaException):
    """Raised when a required field is missing or a value is unacceptable.

    No state is changed when this is raised.
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class MissingFieldError(ValidationException):
    """Raised when a required field is absent or empty."""

    def __init__(self, field: str):
        super().__init__(f"{field} is required", field=field)


class NotFoundError(ArenaException):
    """Raised when a referenced user, invitation, debate or claim is absent."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} not found: {resource_id}"
        details = {
            "resource_type": resource_type,
            "resource_id": resource_id,
        }
        super().__init__(message, details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(ArenaException):
    """Raised for actions against a terminal or banned entity.

    Raised when:
    - A message is posted to an ended debate
    - A non-participant posts to or finishes a debate
    - A banned user tries to act
    """

    def __init__(self, message: str, reason: str | None = None):
        details = {}
        if reason:
            details["reason"] = reason
        super().__init__(message, details)
        self.reason = reason


class ConflictError(ArenaException):
    """Raised when creating a resource that already exists."""

    def __init__(self, message: str, existing_id: str | None = None):
        details = {}
        if existing_id:
            details["existing_id"] = existing_id
        super().__init__(message, details)
        self.existing_id = existing_id


class DependencyFailure(ArenaException):
    """Raised when the backing store is unreachable or a command fails.

    Multi-step operations are not rolled back: anything committed before the
    failure stays committed.
    """

    def __init__(self, message: str, backend: str | None = None):
        details = {}
        if backend:
            details["backend"] = backend
        super().__init__(message, details)
        self.backend = backend


class ConfigException(ArenaException):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []
