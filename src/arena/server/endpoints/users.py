# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""REST endpoints for user profiles and the per-user context document.

Routes:
    POST   /api/v1/users                 - create_user_endpoint
    GET    /api/v1/users/{user}          - get_user_endpoint
    PATCH  /api/v1/users/{user}          - update_user_endpoint
    GET    /api/v1/users/{user}/context  - user_context_endpoint
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ...core.context import get_user_context
from ...core.exceptions import ArenaException
from ...core.users import create_user, get_user, update_user
from ..endpoint_utils import read_json_object, success
from ..errors import arena_error, internal_error, validation_error

logger = logging.getLogger(__name__)


def _optional_str(body: dict, field: str) -> tuple[str | None, JSONResponse | None]:
    value = body.get(field)
    if value is not None and not isinstance(value, str):
        return None, validation_error(f"{field} must be a string")
    return value, None


async def create_user_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/users - Register a user.

    Request Body (JSON):
        {"name": "alice", "bio": "optional"}

    Returns:
        201: The new user
        400: Missing name
        409: A user with that name already exists
    """
    body = await read_json_object(request)
    if isinstance(body, JSONResponse):
        return body

    bio, err = _optional_str(body, "bio")
    if err:
        return err

    try:
        user = create_user(body.get("name"), bio)
        return success({"user": user.to_dict()}, status_code=201)
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error creating user: {e}")
        return internal_error()


async def get_user_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/users/{user} - Fetch a profile."""
    try:
        user = get_user(request.path_params["user"])
        return success({"user": user.to_dict()})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error fetching user: {e}")
        return internal_error()


async def update_user_endpoint(request: Request) -> JSONResponse:
    """PATCH /api/v1/users/{user} - Update status and/or bio.

    Request Body (JSON):
        {"status": "active" | "inactive", "bio": "..."}

    Returns:
        200: The updated user
        400: Invalid status
        403: The user is banned
        404: No such user
    """
    body = await read_json_object(request)
    if isinstance(body, JSONResponse):
        return body

    status, err = _optional_str(body, "status")
    if err:
        return err
    bio, err = _optional_str(body, "bio")
    if err:
        return err

    try:
        user = update_user(request.path_params["user"], status=status, bio=bio)
        return success({"user": user.to_dict()})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error updating user: {e}")
        return internal_error()


async def user_context_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/users/{user}/context - Everything about one user in one document."""
    try:
        return success({"context": get_user_context(request.path_params["user"])})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error building user context: {e}")
        return internal_error()
