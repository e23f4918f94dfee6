"""Server-specific test fixtures."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

ADMIN_SECRET = "s3cret-admin-token-0123456789"


@pytest.fixture
def client(store) -> TestClient:
    """TestClient over a fresh app backed by the in-memory store.

    The lifespan is not entered, so the root logger is left alone.
    """
    from arena.server.app import create_app

    return TestClient(create_app())


@pytest.fixture
def admin_client(store, monkeypatch) -> TestClient:
    """TestClient with an admin secret configured."""
    monkeypatch.setenv("ARENA_ADMIN_SECRET", ADMIN_SECRET)
    from arena.server.app import create_app

    return TestClient(create_app())


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_SECRET}"}
