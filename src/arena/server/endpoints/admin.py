# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Admin REST endpoints.

All routes require the shared admin secret.

Routes:
    GET    /api/v1/admin/users/inactive   - inactive_users_endpoint
    POST   /api/v1/admin/users/{id}/ban   - ban_user_endpoint
    DELETE /api/v1/admin/users/{id}       - purge_user_endpoint
    POST   /api/v1/admin/wipe             - wipe_endpoint
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ...core.admin import ban_user, list_inactive_users, purge_user, wipe_all
from ...core.exceptions import ArenaException
from ..auth import require_admin
from ..endpoint_utils import success
from ..errors import arena_error, internal_error

logger = logging.getLogger(__name__)


async def inactive_users_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/admin/users/inactive - Users awaiting activation."""
    if err := require_admin(request):
        return err

    try:
        users = list_inactive_users()
        return success({"users": users, "count": len(users)})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error listing inactive users: {e}")
        return internal_error()


async def ban_user_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/admin/users/{id}/ban - Ban a user.

    Returns:
        200: The banned user
        401: Missing or invalid admin secret
        404: No such user
        503: Admin secret not configured
    """
    if err := require_admin(request):
        return err

    try:
        user = ban_user(request.path_params["id"])
        return success({"user": user.to_dict()})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error banning user: {e}")
        return internal_error()


async def purge_user_endpoint(request: Request) -> JSONResponse:
    """DELETE /api/v1/admin/users/{id} - Remove a user and everything attached to them."""
    if err := require_admin(request):
        return err

    user_id = request.path_params["id"]
    try:
        purge_user(user_id)
        return success({"userId": user_id, "purged": True})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error purging user: {e}")
        return internal_error()


async def wipe_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/admin/wipe - Delete all arena data."""
    if err := require_admin(request):
        return err

    try:
        deleted = wipe_all()
        return success({"deleted": deleted})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error wiping arena data: {e}")
        return internal_error()
