"""Core configuration - centralized config for the arena package.

All environment-based configuration should flow through this module.

Usage:
    from arena.core.config import get_config
    config = get_config()

    ttl = config.finish_vote_ttl_seconds
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Core configuration settings for the arena.

    Settings can be configured via environment variables with the ARENA_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARENA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # STORE SETTINGS
    # ==========================================================================

    store_backend: str = Field(
        default="memory",
        description="Store backend: 'memory' for a single process, 'redis' for shared state",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (used when store_backend=redis)",
    )
    redis_key_prefix: str = Field(
        default="arena",
        description="Prefix for every Redis key written by the arena",
    )
    lock_timeout_seconds: float = Field(
        default=5.0,
        description="Upper bound on how long a state transition may hold an entity lock",
    )

    # ==========================================================================
    # DEBATE LIFECYCLE SETTINGS
    # ==========================================================================

    finish_vote_ttl_seconds: int = Field(
        default=3600,
        description="Lifetime of an unanswered finish vote (default: 1 hour)",
    )
    invitation_ttl_seconds: int = Field(
        default=7 * 24 * 3600,
        description="Lifetime of a pending invitation (default: 7 days)",
    )
    enforce_turns: bool = Field(
        default=False,
        description="Reject messages from the participant who does not hold the turn",
    )
    leaderboard_size: int = Field(default=5, description="Entries returned by the leaderboard query")

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="",
        description="Log format: 'json' or 'text' (auto-detect if empty)",
    )
    log_file: str | None = Field(default=None, description="Optional log file path")

    @field_validator("store_backend")
    @classmethod
    def _normalize_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("memory", "redis"):
            raise ValueError(f"store_backend must be 'memory' or 'redis', got {value!r}")
        return value

    @field_validator("finish_vote_ttl_seconds", "invitation_ttl_seconds", "leaderboard_size")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def set_config(config: CoreSettings) -> None:
    """Install a configuration instance (the server injects its settings here)."""
    global _config
    _config = config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
