# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""REST endpoints for claim logs and contradiction matching.

Routes:
    POST   /api/v1/users/{user}/claims            - add_claim_endpoint
    GET    /api/v1/users/{user}/claims            - list_claims_endpoint
    DELETE /api/v1/users/{user}/claims/{claim_id} - delete_claim_endpoint
    GET    /api/v1/match/{user}                   - match_endpoint
    GET    /api/v1/users/{user}/contradictions    - contradictions_endpoint
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ...core.claims import add_claim, delete_claim, list_claims
from ...core.exceptions import ArenaException
from ...core.matching import find_contradictions, find_opponents
from ..endpoint_utils import read_json_object, success
from ..errors import arena_error, internal_error

logger = logging.getLogger(__name__)


async def add_claim_endpoint(request: Request) -> JSONResponse:
    """POST /api/v1/users/{user}/claims - Append a claim to the user's log.

    Request Body (JSON):
        {"text": "the earth is round"}
    """
    body = await read_json_object(request)
    if isinstance(body, JSONResponse):
        return body

    try:
        claim = add_claim(request.path_params["user"], body.get("text"))
        return success({"claim": claim.to_dict()}, status_code=201)
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error adding claim: {e}")
        return internal_error()


async def list_claims_endpoint(request: Request) -> JSONResponse:
    try:
        claims = list_claims(request.path_params["user"])
        return success({"claims": [c.to_dict() for c in claims], "count": len(claims)})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error listing claims: {e}")
        return internal_error()


async def delete_claim_endpoint(request: Request) -> JSONResponse:
    claim_id = request.path_params["claim_id"]
    try:
        delete_claim(request.path_params["user"], claim_id)
        return success({"claimId": claim_id, "deleted": True})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error deleting claim: {e}")
        return internal_error()


async def match_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/match/{user} - Contradiction candidates, one entry per opposing claim.

    Returns:
        200: {"opponents": [{"opponent", "claimId", "text"}, ...]}
        503: The claim store could not be read
    """
    user_id = request.path_params["user"]
    try:
        opponents = find_opponents(user_id)
        return success({"user": user_id, "opponents": [o.to_dict() for o in opponents]})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error matching opponents: {e}")
        return internal_error()


async def contradictions_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/users/{user}/contradictions - Other users' claims grouped by author."""
    user_id = request.path_params["user"]
    try:
        contradictions = find_contradictions(user_id)
        return success(
            {
                "user": user_id,
                "contradictions": {owner: [c.to_dict() for c in claims] for owner, claims in contradictions.items()},
            }
        )
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error finding contradictions: {e}")
        return internal_error()
