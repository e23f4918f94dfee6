"""Inbox endpoint.

Implements:
- GET /api/v1/inbox/{user} - Drain the user's pending notifications
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ...core.exceptions import ArenaException
from ...core.notifications import drain_inbox
from ..endpoint_utils import success
from ..errors import arena_error, internal_error

logger = logging.getLogger(__name__)


async def inbox_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/inbox/{user} - Return and clear pending notifications.

    Reading the inbox empties it; each notification is delivered once.

    Returns:
        200: {"messages": [...], "count": n}
        503: Store unavailable
    """
    try:
        messages = drain_inbox(request.path_params["user"])
        return success({"messages": messages, "count": len(messages)})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error draining inbox: {e}")
        return internal_error()
