# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Starlette ASGI application for the debate arena HTTP API."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..core.logging import configure_logging, correlation_context
from ..storage import get_store
from .config import get_settings
from .endpoints.admin import (
    ban_user_endpoint,
    inactive_users_endpoint,
    purge_user_endpoint,
    wipe_endpoint,
)
from .endpoints.claims import (
    add_claim_endpoint,
    contradictions_endpoint,
    delete_claim_endpoint,
    list_claims_endpoint,
    match_endpoint,
)
from .endpoints.debates import (
    finish_debate_endpoint,
    get_debate_endpoint,
    get_summary_endpoint,
    history_endpoint,
    list_debates_endpoint,
    post_message_endpoint,
    set_summary_endpoint,
)
from .endpoints.inbox import inbox_endpoint
from .endpoints.invitations import (
    accept_invitation_endpoint,
    create_invitation_endpoint,
    list_invitations_endpoint,
    reject_invitation_endpoint,
)
from .endpoints.scores import leaderboard_endpoint, stats_endpoint
from .endpoints.users import (
    create_user_endpoint,
    get_user_endpoint,
    update_user_endpoint,
    user_context_endpoint,
)
from .metrics import MetricsMiddleware, metrics_endpoint

logger = logging.getLogger(__name__)

# API version prefix for all REST endpoints
API_V1 = "/api/v1"

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Run each request inside a correlation-id scope and echo the id back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        with correlation_context(request.headers.get(REQUEST_ID_HEADER)) as cid:
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = cid
        return response


async def health_endpoint(request: Request) -> JSONResponse:
    """Health check endpoint."""
    settings = get_settings()
    store = get_store()

    health_data: dict[str, Any] = {
        "status": "healthy",
        "server": settings.server_name,
        "version": settings.server_version,
        "store": store.backend_name,
    }

    if not store.ping():
        health_data["status"] = "degraded"
        health_data["store"] = f"{store.backend_name}: unreachable"

    status_code = 200 if health_data["status"] == "healthy" else 503
    return JSONResponse(health_data, status_code=status_code)


async def ping_endpoint(request: Request) -> JSONResponse:
    """Liveness probe; never touches the store."""
    return JSONResponse({"ok": True, "timestamp": int(time.time() * 1000)})


async def info_endpoint(request: Request) -> JSONResponse:
    """Server info endpoint (no auth required)."""
    settings = get_settings()
    return JSONResponse(
        {
            "server": settings.server_name,
            "version": settings.server_version,
            "apiVersion": "v1",
            "store": settings.store_backend,
            "endpoints": {
                "health": f"{API_V1}/health",
                "info": "/",
                "openapi": f"{API_V1}/openapi.json",
                "match": f"{API_V1}/match/{{user}}",
                "invitations": f"{API_V1}/invitations",
                "leaderboard": f"{API_V1}/leaderboard",
                "metrics": "/metrics",
            },
            "admin": settings.admin_secret is not None,
        }
    )


# ============================================================================
# OpenAPI Endpoint
# ============================================================================

OPENAPI_PATH = Path(__file__).parent / "openapi.yaml"

_openapi_spec_cache: dict | None = None


def _load_openapi_spec() -> dict:
    """Load and cache the OpenAPI document."""
    global _openapi_spec_cache
    if _openapi_spec_cache is None:
        if OPENAPI_PATH.exists():
            with open(OPENAPI_PATH, encoding="utf-8") as f:
                _openapi_spec_cache = yaml.safe_load(f)
        else:
            _openapi_spec_cache = {
                "openapi": "3.0.3",
                "info": {"title": "Debate Arena API", "version": get_settings().server_version},
                "paths": {},
            }
    return _openapi_spec_cache


async def openapi_spec_endpoint(request: Request) -> JSONResponse:
    """Serve the OpenAPI document as JSON."""
    return JSONResponse(_load_openapi_spec())


@asynccontextmanager
async def lifespan(app: Starlette):
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging()
    store = get_store()
    logger.info(
        "Starting %s %s on %s:%s (store: %s)",
        settings.server_name,
        settings.server_version,
        settings.host,
        settings.port,
        store.backend_name,
    )
    if not store.ping():
        logger.warning("Arena store is not reachable; requests will fail until it recovers")

    yield

    logger.info("%s shutting down", settings.server_name)


def create_app() -> Starlette:
    """Create the Starlette ASGI application."""
    settings = get_settings()

    routes = [
        # Discovery and liveness (no version prefix)
        Route("/", info_endpoint, methods=["GET"]),
        Route("/ping", ping_endpoint, methods=["GET"]),
        Route(f"{API_V1}/health", health_endpoint, methods=["GET"]),
        Route(f"{API_V1}/openapi.json", openapi_spec_endpoint, methods=["GET"]),
        # Users
        Route(f"{API_V1}/users", create_user_endpoint, methods=["POST"]),
        Route(f"{API_V1}/users/{{user}}", get_user_endpoint, methods=["GET"]),
        Route(f"{API_V1}/users/{{user}}", update_user_endpoint, methods=["PATCH"]),
        Route(f"{API_V1}/users/{{user}}/context", user_context_endpoint, methods=["GET"]),
        # Claims and matching
        Route(f"{API_V1}/users/{{user}}/claims", add_claim_endpoint, methods=["POST"]),
        Route(f"{API_V1}/users/{{user}}/claims", list_claims_endpoint, methods=["GET"]),
        Route(
            f"{API_V1}/users/{{user}}/claims/{{claim_id}}",
            delete_claim_endpoint,
            methods=["DELETE"],
        ),
        Route(f"{API_V1}/match/{{user}}", match_endpoint, methods=["GET"]),
        Route(f"{API_V1}/users/{{user}}/contradictions", contradictions_endpoint, methods=["GET"]),
        # Invitations
        Route(f"{API_V1}/invitations", create_invitation_endpoint, methods=["POST"]),
        Route(f"{API_V1}/invitations/{{id}}/accept", accept_invitation_endpoint, methods=["POST"]),
        Route(f"{API_V1}/invitations/{{id}}/reject", reject_invitation_endpoint, methods=["POST"]),
        Route(f"{API_V1}/users/{{user}}/invitations", list_invitations_endpoint, methods=["GET"]),
        # Debates
        Route(f"{API_V1}/debates/{{id}}", get_debate_endpoint, methods=["GET"]),
        Route(f"{API_V1}/debates/{{id}}/messages", post_message_endpoint, methods=["POST"]),
        Route(f"{API_V1}/debates/{{id}}/finish", finish_debate_endpoint, methods=["POST"]),
        Route(f"{API_V1}/debates/{{id}}/history", history_endpoint, methods=["GET"]),
        Route(f"{API_V1}/debates/{{id}}/summary", get_summary_endpoint, methods=["GET"]),
        Route(f"{API_V1}/debates/{{id}}/summary", set_summary_endpoint, methods=["PUT"]),
        Route(f"{API_V1}/users/{{user}}/debates", list_debates_endpoint, methods=["GET"]),
        # Scores
        Route(f"{API_V1}/leaderboard", leaderboard_endpoint, methods=["GET"]),
        Route(f"{API_V1}/stats/{{user}}", stats_endpoint, methods=["GET"]),
        # Inbox
        Route(f"{API_V1}/inbox/{{user}}", inbox_endpoint, methods=["GET"]),
        # Admin
        Route(f"{API_V1}/admin/users/inactive", inactive_users_endpoint, methods=["GET"]),
        Route(f"{API_V1}/admin/users/{{id}}/ban", ban_user_endpoint, methods=["POST"]),
        Route(f"{API_V1}/admin/users/{{id}}", purge_user_endpoint, methods=["DELETE"]),
        Route(f"{API_V1}/admin/wipe", wipe_endpoint, methods=["POST"]),
        # Prometheus metrics
        Route("/metrics", metrics_endpoint, methods=["GET"]),
        Route(f"{API_V1}/metrics", metrics_endpoint, methods=["GET"]),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", "X-Admin-Secret", REQUEST_ID_HEADER],
            expose_headers=[REQUEST_ID_HEADER],
        ),
        Middleware(CorrelationIdMiddleware),
        Middleware(MetricsMiddleware),
    ]

    return Starlette(
        routes=routes,
        middleware=middleware,
        lifespan=lifespan,
    )


# Global app instance for uvicorn
app = create_app()


def run() -> None:
    """Run the server using uvicorn."""
    import uvicorn

    settings = get_settings()

    logger.info(f"Starting debate arena on {settings.host}:{settings.port}")

    uvicorn.run(
        "arena.server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
