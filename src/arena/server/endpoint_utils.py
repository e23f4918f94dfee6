# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Shared helpers for REST endpoint parameter parsing and responses."""

from __future__ import annotations

import json
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from .errors import invalid_json_error


def _parse_int(value: str | None, default: int, maximum: int = 100) -> int:
    """Parse an integer query parameter with a max cap."""
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if parsed <= 0:
        return default
    return min(parsed, maximum)


async def read_json_object(request: Request) -> dict[str, Any] | JSONResponse:
    """Parse the request body as a JSON object.

    Returns the body, or a 400 response if it is not valid JSON or not an
    object. An empty body is treated as ``{}``.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return invalid_json_error()
    if not isinstance(body, dict):
        return invalid_json_error()
    return body


def success(data: dict[str, Any], status_code: int = 200) -> JSONResponse:
    """Wrap ``data`` in the standard success envelope."""
    return JSONResponse({"success": True, **data}, status_code=status_code)
