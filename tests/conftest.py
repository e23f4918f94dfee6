"""Global test fixtures for the arena test suite."""

from __future__ import annotations

import fnmatch
import os
from typing import Any
from unittest.mock import MagicMock

import pytest

from arena.core.config import clear_config_cache
from arena.server.config import clear_settings_cache
from arena.server.metrics import reset_metrics_collector
from arena.storage import MemoryArenaStore, reset_store, set_store

# ============================================================================
# Global isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch):
    """Drop ARENA_* environment variables and reset every lazily built singleton."""
    for name in list(os.environ):
        if name.startswith("ARENA_"):
            monkeypatch.delenv(name, raising=False)

    clear_config_cache()
    clear_settings_cache()
    reset_store()
    reset_metrics_collector()
    yield
    clear_config_cache()
    clear_settings_cache()
    reset_store()
    reset_metrics_collector()


# ============================================================================
# Memory store
# ============================================================================


class FakeClock:
    """Controllable replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> MemoryArenaStore:
    """A fresh in-memory store installed as the global store."""
    memory_store = MemoryArenaStore(clock=clock)
    set_store(memory_store)
    return memory_store


# ============================================================================
# Redis client double
# ============================================================================


class FakeLock:
    def __init__(self, acquired: bool = True):
        self.acquired = acquired
        self.released = False

    def acquire(self) -> bool:
        return self.acquired

    def release(self) -> None:
        self.released = True


class FakePipeline:
    """Queues commands and applies them to the fake client on execute()."""

    def __init__(self, client: FakeRedis):
        self._client = client
        self._commands: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        def queue(*args, **kwargs):
            self._commands.append((name, args, kwargs))
            return self

        return queue

    def execute(self) -> list[Any]:
        commands, self._commands = self._commands, []
        return [getattr(self._client, name)(*args, **kwargs) for name, args, kwargs in commands]


class FakeRedis:
    """Dict-backed stand-in for ``redis.Redis(decode_responses=True)``.

    Supports exactly the commands the arena store issues. TTLs are recorded
    in ``ttls`` but never enforced.
    """

    def __init__(self):
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}
        self.locks: list[str] = []

    def _drop_if_empty(self, key: str) -> None:
        if key in self.data and not self.data[key]:
            del self.data[key]
            self.ttls.pop(key, None)

    def ping(self) -> bool:
        return True

    def lock(self, name, timeout=None, blocking_timeout=None):
        self.locks.append(name)
        return FakeLock()

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    # keys
    def exists(self, *keys) -> int:
        return sum(1 for key in keys if key in self.data)

    def delete(self, *keys) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def expire(self, key, seconds) -> bool:
        if key not in self.data:
            return False
        self.ttls[key] = seconds
        return True

    def scan(self, cursor=0, match=None, count=None):
        keys = [key for key in self.data if match is None or fnmatch.fnmatchcase(key, match)]
        return 0, keys

    # strings
    def get(self, key):
        return self.data.get(key)

    def set(self, key, value) -> bool:
        self.data[key] = str(value)
        return True

    def setex(self, key, seconds, value) -> bool:
        self.data[key] = str(value)
        self.ttls[key] = seconds
        return True

    # hashes
    def hgetall(self, key) -> dict:
        return dict(self.data.get(key, {}))

    def hset(self, key, field=None, value=None, mapping=None) -> int:
        record = self.data.setdefault(key, {})
        before = len(record)
        if field is not None:
            record[field] = str(value)
        for name, item in (mapping or {}).items():
            record[name] = str(item)
        return len(record) - before

    def hmget(self, key, fields) -> list:
        record = self.data.get(key, {})
        return [record.get(name) for name in fields]

    def hincrby(self, key, field, amount=1) -> int:
        record = self.data.setdefault(key, {})
        record[field] = str(int(record.get(field, 0)) + amount)
        return int(record[field])

    # sets
    def sadd(self, key, *members) -> int:
        members_set = self.data.setdefault(key, set())
        before = len(members_set)
        members_set.update(members)
        return len(members_set) - before

    def srem(self, key, *members) -> int:
        members_set = self.data.get(key, set())
        removed = len(members_set & set(members))
        members_set.difference_update(members)
        self._drop_if_empty(key)
        return removed

    def smembers(self, key) -> set:
        return set(self.data.get(key, set()))

    # lists
    def rpush(self, key, *values) -> int:
        items = self.data.setdefault(key, [])
        items.extend(values)
        return len(items)

    def lrange(self, key, start, end) -> list:
        items = self.data.get(key, [])
        size = len(items)
        if start < 0:
            start = max(size + start, 0)
        if end < 0:
            end = size + end
        return list(items[start : end + 1])

    def lrem(self, key, count, value) -> int:
        items = self.data.get(key, [])
        kept = [item for item in items if item != value]
        removed = len(items) - len(kept)
        if key in self.data:
            self.data[key] = kept
            self._drop_if_empty(key)
        return removed

    # sorted sets
    def zadd(self, key, mapping) -> int:
        scores = self.data.setdefault(key, {})
        added = len(set(mapping) - set(scores))
        for member, score in mapping.items():
            scores[member] = float(score)
        return added

    def zscore(self, key, member):
        return self.data.get(key, {}).get(member)

    def zrevrange(self, key, start, end, withscores=False) -> list:
        ranked = sorted(self.data.get(key, {}).items(), key=lambda item: (item[1], item[0]), reverse=True)
        rows = ranked[start : end + 1] if end >= 0 else ranked[start:]
        if withscores:
            return rows
        return [member for member, _ in rows]

    def zrem(self, key, *members) -> int:
        scores = self.data.get(key, {})
        removed = 0
        for member in members:
            if scores.pop(member, None) is not None:
                removed += 1
        self._drop_if_empty(key)
        return removed


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def mock_redis_client(fake_redis) -> MagicMock:
    """A MagicMock wrapping ``fake_redis`` so calls can be asserted or made to fail."""
    return MagicMock(wraps=fake_redis)
