# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""REST endpoints for debate invitations.

Routes:
    POST   /api/v1/invitations               - create_invitation_endpoint
    POST   /api/v1/invitations/{id}/accept   - accept_invitation_endpoint
    POST   /api/v1/invitations/{id}/reject   - reject_invitation_endpoint
    GET    /api/v1/users/{user}/invitations  - list_invitations_endpoint
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ...core.exceptions import ArenaException
from ...core.invitations import (
    accept_invitation,
    create_invitation,
    list_invitations,
    reject_invitation,
)
from ..endpoint_utils import read_json_object, success
from ..errors import arena_error, internal_error

logger = logging.getLogger(__name__)


async def create_invitation_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/invitations - Invite another user to debate a topic.

    Request Body (JSON):
        {"fromUser": "alice", "toUser": "bob", "topic": "..."}

    Returns:
        201: The pending invitation
        400: Missing field, or a user inviting themselves
        403: Either user is banned
    """
    body = await read_json_object(request)
    if isinstance(body, JSONResponse):
        return body

    try:
        invitation = create_invitation(body.get("fromUser"), body.get("toUser"), body.get("topic"))
        return success({"invitation": invitation.to_dict()}, status_code=201)
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error creating invitation: {e}")
        return internal_error()


async def accept_invitation_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/invitations/{id}/accept - Start a debate from a pending invitation.

    Returns:
        200: The new debate
        404: Invitation unknown, already resolved or expired
    """
    try:
        debate = accept_invitation(request.path_params["id"])
        return success({"debate": debate.to_dict()})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error accepting invitation: {e}")
        return internal_error()


async def reject_invitation_endpoint(request: Request) -> JSONResponse:
    invitation_id = request.path_params["id"]
    try:
        reject_invitation(invitation_id)
        return success({"invitationId": invitation_id, "rejected": True})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error rejecting invitation: {e}")
        return internal_error()


async def list_invitations_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/users/{user}/invitations - Pending invitations addressed to the user."""
    try:
        invitations = list_invitations(request.path_params["user"])
        return success(
            {
                "invitations": [i.to_dict() for i in invitations],
                "count": len(invitations),
            }
        )
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error listing invitations: {e}")
        return internal_error()
