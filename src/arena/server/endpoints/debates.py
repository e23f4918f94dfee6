# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""REST endpoints for active and finished debates.

Routes:
    GET    /api/v1/debates/{id}            - get_debate_endpoint
    POST   /api/v1/debates/{id}/messages   - post_message_endpoint
    POST   /api/v1/debates/{id}/finish     - finish_debate_endpoint
    GET    /api/v1/debates/{id}/history    - history_endpoint
    GET    /api/v1/debates/{id}/summary    - get_summary_endpoint
    PUT    /api/v1/debates/{id}/summary    - set_summary_endpoint
    GET    /api/v1/users/{user}/debates    - list_debates_endpoint
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ...core.debates import (
    get_debate,
    get_history,
    get_summary,
    list_debates,
    post_message,
    request_finish,
    set_summary,
)
from ...core.exceptions import ArenaException
from ..endpoint_utils import read_json_object, success
from ..errors import arena_error, internal_error

logger = logging.getLogger(__name__)


async def get_debate_endpoint(request: Request) -> JSONResponse:
    try:
        debate = get_debate(request.path_params["id"])
        return success({"debate": debate.to_dict()})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error fetching debate: {e}")
        return internal_error()


async def post_message_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/debates/{id}/messages - Send a message in an active debate.

    Request Body (JSON):
        {"from": "alice", "text": "..."}

    Returns:
        200: The stored message
        400: Missing from or text
        403: Debate ended, sender not a participant, or not the sender's turn
        404: No such debate
    """
    body = await read_json_object(request)
    if isinstance(body, JSONResponse):
        return body

    try:
        message = post_message(request.path_params["id"], body.get("from"), body.get("text"))
        return success({"message": message.to_dict()})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error posting message: {e}")
        return internal_error()


async def finish_debate_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/debates/{id}/finish - Vote to finish the debate.

    Request Body (JSON):
        {"user": "alice", "wantWinner": true}

    Returns:
        200: {"ended": true, "winner": "alice" | null} or {"awaitingConfirmation": true}
        400: Missing user or wantWinner
        403: Debate already ended, or the user is not a participant
        404: No such debate
    """
    body = await read_json_object(request)
    if isinstance(body, JSONResponse):
        return body

    try:
        result = request_finish(request.path_params["id"], body.get("user"), body.get("wantWinner"))
        return success(result.to_dict())
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error finishing debate: {e}")
        return internal_error()


async def history_endpoint(request: Request) -> JSONResponse:
    debate_id = request.path_params["id"]
    try:
        messages = get_history(debate_id)
        return success({"debateId": debate_id, "messages": [m.to_dict() for m in messages]})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error fetching history: {e}")
        return internal_error()


async def list_debates_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/users/{user}/debates - The user's debates with their latest message."""
    try:
        listings = list_debates(request.path_params["user"])
        return success({"debates": [d.to_dict() for d in listings], "count": len(listings)})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error listing debates: {e}")
        return internal_error()


async def get_summary_endpoint(request: Request) -> JSONResponse:
    debate_id = request.path_params["id"]
    try:
        return success({"debateId": debate_id, "summary": get_summary(debate_id)})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error fetching summary: {e}")
        return internal_error()


async def set_summary_endpoint(request: Request) -> JSONResponse:
    """PUT /api/v1/debates/{id}/summary - Replace the debate summary.

    Request Body (JSON):
        {"summary": "..."}
    """
    body = await read_json_object(request)
    if isinstance(body, JSONResponse):
        return body

    debate_id = request.path_params["id"]
    try:
        set_summary(debate_id, body.get("summary"))
        return success({"debateId": debate_id, "summary": body["summary"]})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error saving summary: {e}")
        return internal_error()
