"""Arena store backends and the process-wide store factory.

Configure via environment variables:
    ARENA_STORE_BACKEND=memory|redis  (default: memory)
    ARENA_REDIS_URL=redis://localhost:6379/0
"""

from __future__ import annotations

import logging

from ..core.config import get_config
from ..core.exceptions import ConfigException
from .backend import ArenaStore
from .memory import MemoryArenaStore
from .redis_store import RedisArenaStore

logger = logging.getLogger(__name__)

_store_instance: ArenaStore | None = None


def get_store() -> ArenaStore:
    """Get or create the global arena store."""
    global _store_instance
    if _store_instance is not None:
        return _store_instance

    config = get_config()
    if config.store_backend == "redis":
        if not config.redis_url:
            raise ConfigException("ARENA_REDIS_URL is required for the redis store", missing_vars=["ARENA_REDIS_URL"])
        logger.info("Using Redis arena store at %s", config.redis_url)
        _store_instance = RedisArenaStore(
            config.redis_url,
            prefix=config.redis_key_prefix,
            lock_timeout=config.lock_timeout_seconds,
        )
    else:
        logger.info("Using in-memory arena store")
        _store_instance = MemoryArenaStore()
    return _store_instance


def set_store(store: ArenaStore) -> None:
    """Install a specific store instance (used by tests)."""
    global _store_instance
    _store_instance = store


def reset_store() -> None:
    """Reset the global store instance (for testing)."""
    global _store_instance
    _store_instance = None


__all__ = [
    "ArenaStore",
    "MemoryArenaStore",
    "RedisArenaStore",
    "get_store",
    "reset_store",
    "set_store",
]
