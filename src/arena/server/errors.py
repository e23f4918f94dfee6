# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Standardized REST error responses for the arena API.

All REST endpoints use these helpers for a consistent error format:
{
    "success": false,
    "error": {
        "code": "ERROR_CODE",
        "message": "Human readable message"
    }
}

Error codes follow the pattern: CATEGORY_SPECIFIC_ERROR
Examples: VALIDATION_MISSING_FIELD, NOT_FOUND_DEBATE, FORBIDDEN_DEBATE_ENDED
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
import uuid

from starlette.responses import JSONResponse

from ..core.exceptions import (
    ArenaException,
    ConflictError,
    DependencyFailure,
    ForbiddenError,
    MissingFieldError,
    NotFoundError,
    ValidationException,
)

logger = logging.getLogger(__name__)

# Debug mode: include exception details in 500 responses.
_DEBUG = os.environ.get("ARENA_DEBUG", "0") == "1"

# =============================================================================
# STANDARD ERROR CODES
# =============================================================================

# Validation errors (400)
VALIDATION_MISSING_FIELD = "VALIDATION_MISSING_FIELD"
VALIDATION_INVALID_VALUE = "VALIDATION_INVALID_VALUE"
VALIDATION_INVALID_JSON = "VALIDATION_INVALID_JSON"

# Authentication errors (401)
AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
AUTH_MISSING_TOKEN = "AUTH_MISSING_TOKEN"

# Authorization errors (403)
FORBIDDEN_INSUFFICIENT_PERMISSION = "FORBIDDEN_INSUFFICIENT_PERMISSION"
FORBIDDEN_DEBATE_ENDED = "FORBIDDEN_DEBATE_ENDED"
FORBIDDEN_NOT_PARTICIPANT = "FORBIDDEN_NOT_PARTICIPANT"
FORBIDDEN_NOT_YOUR_TURN = "FORBIDDEN_NOT_YOUR_TURN"
FORBIDDEN_USER_BANNED = "FORBIDDEN_USER_BANNED"

# Not found errors (404)
NOT_FOUND_RESOURCE = "NOT_FOUND_RESOURCE"
NOT_FOUND_USER = "NOT_FOUND_USER"
NOT_FOUND_CLAIM = "NOT_FOUND_CLAIM"
NOT_FOUND_INVITATION = "NOT_FOUND_INVITATION"
NOT_FOUND_DEBATE = "NOT_FOUND_DEBATE"

# Conflict errors (409)
CONFLICT_ALREADY_EXISTS = "CONFLICT_ALREADY_EXISTS"

# Server errors (500)
INTERNAL_ERROR = "INTERNAL_ERROR"

# Service unavailable (503)
SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

_FORBIDDEN_CODES = {
    "debate_ended": FORBIDDEN_DEBATE_ENDED,
    "not_participant": FORBIDDEN_NOT_PARTICIPANT,
    "not_your_turn": FORBIDDEN_NOT_YOUR_TURN,
    "banned": FORBIDDEN_USER_BANNED,
}

_NOT_FOUND_CODES = {
    "User": NOT_FOUND_USER,
    "Claim": NOT_FOUND_CLAIM,
    "Invitation": NOT_FOUND_INVITATION,
    "Debate": NOT_FOUND_DEBATE,
}


# =============================================================================
# ERROR RESPONSE HELPERS
# =============================================================================


def error_response(
    code: str,
    message: str,
    status_code: int = 400,
) -> JSONResponse:
    """Create a standardized error response.

    Args:
        code: Error code (e.g., VALIDATION_MISSING_FIELD)
        message: Human-readable error message
        status_code: HTTP status code (default 400)
    """
    return JSONResponse(
        {
            "success": False,
            "error": {
                "code": code,
                "message": message,
            },
        },
        status_code=status_code,
    )


def validation_error(message: str, code: str = VALIDATION_INVALID_VALUE) -> JSONResponse:
    return error_response(code, message, status_code=400)


def missing_field_error(field_name: str) -> JSONResponse:
    return error_response(VALIDATION_MISSING_FIELD, f"{field_name} is required", status_code=400)


def invalid_json_error() -> JSONResponse:
    return error_response(VALIDATION_INVALID_JSON, "Invalid JSON body", status_code=400)


def auth_error(message: str = "Authentication failed", code: str = AUTH_INVALID_TOKEN) -> JSONResponse:
    return error_response(code, message, status_code=401)


def forbidden_error(message: str = "Permission denied", code: str = FORBIDDEN_INSUFFICIENT_PERMISSION) -> JSONResponse:
    return error_response(code, message, status_code=403)


def not_found_error(resource: str, code: str = NOT_FOUND_RESOURCE) -> JSONResponse:
    return error_response(code, f"{resource} not found", status_code=404)


def conflict_error(message: str, code: str = CONFLICT_ALREADY_EXISTS) -> JSONResponse:
    return error_response(code, message, status_code=409)


def service_unavailable_error(service: str, detail: str | None = None) -> JSONResponse:
    message = f"{service} unavailable"
    if detail:
        message = f"{message}: {detail}"
    return error_response(SERVICE_UNAVAILABLE, message, status_code=503)


def internal_error(
    message: str = "Internal server error",
    exc: BaseException | None = None,
) -> JSONResponse:
    """Create a 500 internal error response.

    Always includes a request_id for log correlation. In debug mode
    (ARENA_DEBUG=1) also includes the exception type and message.

    Args:
        message: Base error message.
        exc: Exception to describe. Defaults to the exception being handled.
    """
    request_id = uuid.uuid4().hex[:12]

    error_body: dict = {
        "code": INTERNAL_ERROR,
        "message": message,
        "request_id": request_id,
    }

    if exc is None:
        exc = sys.exc_info()[1]

    if exc is not None:
        logger.error("request_id=%s %s: %s", request_id, type(exc).__name__, exc)
        if _DEBUG:
            error_body["exception"] = type(exc).__name__
            error_body["detail"] = str(exc)
            error_body["traceback"] = traceback.format_exception_only(type(exc), exc)[0].strip()

    return JSONResponse(
        {"success": False, "error": error_body},
        status_code=500,
    )


def arena_error(exc: ArenaException) -> JSONResponse:
    """Map a core exception onto its standard error response."""
    if isinstance(exc, MissingFieldError):
        return missing_field_error(exc.field or "field")
    if isinstance(exc, ValidationException):
        return validation_error(exc.message)
    if isinstance(exc, NotFoundError):
        return not_found_error(exc.resource_type, code=_NOT_FOUND_CODES.get(exc.resource_type, NOT_FOUND_RESOURCE))
    if isinstance(exc, ForbiddenError):
        return forbidden_error(exc.message, code=_FORBIDDEN_CODES.get(exc.reason or "", FORBIDDEN_INSUFFICIENT_PERMISSION))
    if isinstance(exc, ConflictError):
        return conflict_error(exc.message)
    if isinstance(exc, DependencyFailure):
        logger.error("Dependency failure: %s", exc.message)
        return service_unavailable_error("Store", exc.message)
    return internal_error(exc=exc)
