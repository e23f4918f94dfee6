"""REST endpoints for stats and the leaderboard.

Routes:
    GET    /api/v1/leaderboard      - leaderboard_endpoint
    GET    /api/v1/stats/{user}     - stats_endpoint
"""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from ...core.exceptions import ArenaException
from ...core.scoring import get_leaderboard, get_stats
from ..endpoint_utils import _parse_int, success
from ..errors import arena_error, internal_error

logger = logging.getLogger(__name__)


async def leaderboard_endpoint(request: Request) -> JSONResponse:
    """GET /api/v1/leaderboard - Top users by wins minus losses.

    Query Parameters:
        limit: Number of entries (default from ARENA_LEADERBOARD_SIZE, max 100)
    """
    raw_limit = request.query_params.get("limit")
    limit = _parse_int(raw_limit, default=0) or None

    try:
        entries = get_leaderboard(limit)
        return success({"leaderboard": [e.to_dict() for e in entries]})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error fetching leaderboard: {e}")
        return internal_error()


async def stats_endpoint(request: Request) -> JSONResponse:
    user_id = request.path_params["user"]
    try:
        stats = get_stats(user_id)
        return success({"user": user_id, "stats": stats.to_dict(), "score": stats.score})
    except ArenaException as e:
        return arena_error(e)
    except Exception as e:
        logger.exception(f"Error fetching stats: {e}")
        return internal_error()
