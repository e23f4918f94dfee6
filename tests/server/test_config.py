"""Tests for server settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from arena.core.config import get_config
from arena.server.config import MIN_ADMIN_SECRET_LENGTH, ServerSettings, get_settings


class TestServerSettings:
    def test_defaults(self):
        settings = ServerSettings()
        assert settings.host == "127.0.0.1"
        assert settings.port == 3000
        assert settings.admin_secret is None
        assert settings.allowed_origins == ["*"]

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("ARENA_PORT", "8080")
        monkeypatch.setenv("ARENA_ENFORCE_TURNS", "true")
        settings = ServerSettings()
        assert settings.port == 8080
        assert settings.enforce_turns is True

    def test_short_secret_rejected_in_production(self, monkeypatch):
        monkeypatch.setenv("ARENA_HOST", "10.0.0.5")
        monkeypatch.setenv("ARENA_ADMIN_SECRET", "short")
        with pytest.raises(ValidationError):
            ServerSettings()

    def test_short_secret_allowed_locally(self, monkeypatch):
        monkeypatch.setenv("ARENA_ADMIN_SECRET", "short")
        assert ServerSettings().admin_secret == "short"

    def test_production_flag(self, monkeypatch):
        monkeypatch.setenv("ARENA_PRODUCTION", "1")
        monkeypatch.setenv("ARENA_ADMIN_SECRET", "x" * (MIN_ADMIN_SECRET_LENGTH - 1))
        with pytest.raises(ValidationError):
            ServerSettings()

    def test_invalid_backend(self, monkeypatch):
        monkeypatch.setenv("ARENA_STORE_BACKEND", "postgres")
        with pytest.raises(ValidationError):
            ServerSettings()


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_installs_core_config(self, monkeypatch):
        monkeypatch.setenv("ARENA_FINISH_VOTE_TTL_SECONDS", "60")
        settings = get_settings()
        assert get_config() is settings
        assert get_config().finish_vote_ttl_seconds == 60
