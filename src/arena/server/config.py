# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Debate Arena Contributors

"""Server configuration using pydantic-settings."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from ..core.config import CoreSettings, set_config

logger = logging.getLogger(__name__)

MIN_ADMIN_SECRET_LENGTH = 16


def get_package_version() -> str:
    """Get the package version from installed metadata, or a dev fallback."""
    try:
        return version("debate-arena")
    except PackageNotFoundError:
        return "0.0.0-dev"


class ServerSettings(CoreSettings):
    """Configuration for the arena HTTP server.

    Inherits core settings (store, debate lifecycle, logging) and adds
    HTTP and admin settings. Configure via environment variables with the
    ARENA_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARENA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Host to bind to")
    port: int = Field(default=3000, description="Port to bind to")

    # Shared secret for the admin endpoints; admin is disabled when unset
    admin_secret: str | None = Field(default=None, description="Shared admin secret")

    allowed_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )

    server_name: str = Field(default="debate-arena", description="Server name")
    server_version: str = Field(default_factory=get_package_version, description="Server version")

    production: bool = Field(
        default=False,
        description="Force production mode (stricter security requirements)",
    )

    @model_validator(mode="after")
    def validate_production_settings(self) -> ServerSettings:
        """Require a strong admin secret when running in production.

        Production is assumed when the host is not a loopback/wildcard
        address or ``production`` is set.
        """
        is_production = self.host not in ("localhost", "127.0.0.1", "0.0.0.0") or self.production  # nosec B104

        if is_production and self.admin_secret is not None and len(self.admin_secret) < MIN_ADMIN_SECRET_LENGTH:
            raise ValueError(
                f"ARENA_ADMIN_SECRET must be at least {MIN_ADMIN_SECRET_LENGTH} characters. "
                "Generate one with: python -c 'import secrets; print(secrets.token_hex(32))'"
            )
        if self.admin_secret is None:
            logger.warning("ARENA_ADMIN_SECRET not set - admin endpoints are disabled")
        return self


_settings: ServerSettings | None = None


def get_settings() -> ServerSettings:
    """Get the global settings instance.

    The server settings are also installed as the core config so both
    layers read the same values.
    """
    global _settings
    if _settings is None:
        _settings = ServerSettings()
        set_config(_settings)
    return _settings


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    global _settings
    _settings = None
