"""Admin authentication.

The admin endpoints are protected by a single shared secret
(``ARENA_ADMIN_SECRET``), sent either as ``Authorization: Bearer <secret>``
or as ``X-Admin-Secret: <secret>``. Everything else is unauthenticated.
"""

from __future__ import annotations

import hmac
import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from .config import get_settings
from .errors import AUTH_INVALID_TOKEN, AUTH_MISSING_TOKEN, auth_error, service_unavailable_error

logger = logging.getLogger(__name__)

ADMIN_HEADER = "X-Admin-Secret"


def _presented_secret(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return request.headers.get(ADMIN_HEADER) or None


def require_admin(request: Request) -> JSONResponse | None:
    """Check the admin secret. Returns an error response, or None if allowed.

    Usage in endpoints::

        if err := require_admin(request):
            return err
    """
    expected = get_settings().admin_secret
    if not expected:
        return service_unavailable_error("Admin interface", "ARENA_ADMIN_SECRET is not configured")

    presented = _presented_secret(request)
    if presented is None:
        return auth_error("Missing admin secret", code=AUTH_MISSING_TOKEN)

    if not hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected admin request to %s with an invalid secret", request.url.path)
        return auth_error("Invalid admin secret", code=AUTH_INVALID_TOKEN)
    return None
