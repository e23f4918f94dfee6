"""Tests for arena.core.logging."""

from __future__ import annotations

import json
import logging

import pytest

from arena.core.logging import (
    JSONFormatter,
    StandardFormatter,
    configure_logging,
    correlation_context,
    get_correlation_id,
)


def _record(level: int = logging.INFO, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("arena.test", level, __file__, 10, msg, None, None)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCorrelation:
    def test_context_sets_and_resets(self):
        assert get_correlation_id() is None
        with correlation_context("abc") as cid:
            assert cid == "abc"
            assert get_correlation_id() == "abc"
        assert get_correlation_id() is None

    def test_generates_id(self):
        with correlation_context() as cid:
            assert cid
            assert get_correlation_id() == cid


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "arena.test"
        assert data["message"] == "hello"
        assert "source" not in data
        assert "store" not in data

    def test_includes_request_id(self):
        with correlation_context("req-1"):
            data = json.loads(JSONFormatter().format(_record()))
        assert data["request_id"] == "req-1"

    def test_tags_store_backend(self):
        data = json.loads(JSONFormatter(backend="redis").format(_record()))
        assert data["store"] == "redis"

    def test_entity_ids_from_extra(self):
        record = _record()
        record.debate_id = "d1"
        record.user_id = "alice"
        data = json.loads(JSONFormatter().format(record))
        assert data["debate_id"] == "d1"
        assert data["user_id"] == "alice"
        assert "invitation_id" not in data

    def test_warning_has_source(self):
        data = json.loads(JSONFormatter().format(_record(logging.WARNING)))
        assert data["source"] == "test_logging:10"


class TestStandardFormatter:
    def test_prefixes_short_correlation_id(self):
        formatter = StandardFormatter(use_colors=False)
        with correlation_context("0123456789abcdef"):
            line = formatter.format(_record())
        assert "[01234567] hello" in line

    def test_appends_entity_ids(self):
        record = _record(msg="vote from %s")
        record.args = ("bob",)
        record.debate_id = "d1"
        line = StandardFormatter(use_colors=False).format(record)
        assert line.endswith("arena.test: vote from bob debate_id=d1")


class TestConfigureLogging:
    def test_json_format_from_env(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("ARENA_LOG_FORMAT", "json")
        monkeypatch.setenv("ARENA_LOG_LEVEL", "debug")
        configure_logging()

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.handlers[0].formatter.backend == "memory"

    def test_text_format_and_file(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "arena.log"
        configure_logging(level="WARNING", json_format=False, log_file=str(log_file))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, StandardFormatter)
        assert isinstance(root.handlers[1], logging.FileHandler)
        root.handlers[1].close()
