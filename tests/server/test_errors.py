"""Tests for the standardized error responses."""

from __future__ import annotations

import json

import pytest

from arena.core.exceptions import (
    ArenaException,
    ConflictError,
    DependencyFailure,
    ForbiddenError,
    MissingFieldError,
    NotFoundError,
    ValidationException,
)
from arena.server.errors import (
    AUTH_MISSING_TOKEN,
    CONFLICT_ALREADY_EXISTS,
    FORBIDDEN_DEBATE_ENDED,
    FORBIDDEN_INSUFFICIENT_PERMISSION,
    FORBIDDEN_NOT_YOUR_TURN,
    INTERNAL_ERROR,
    NOT_FOUND_DEBATE,
    NOT_FOUND_RESOURCE,
    SERVICE_UNAVAILABLE,
    VALIDATION_INVALID_VALUE,
    VALIDATION_MISSING_FIELD,
    arena_error,
    auth_error,
    error_response,
    internal_error,
    service_unavailable_error,
)


def _body(response) -> dict:
    return json.loads(response.body)


class TestErrorResponse:
    def test_envelope(self):
        response = error_response("SOME_CODE", "Something happened", status_code=418)
        assert response.status_code == 418
        assert _body(response) == {
            "success": False,
            "error": {"code": "SOME_CODE", "message": "Something happened"},
        }

    def test_auth_error(self):
        response = auth_error("Missing admin secret", code=AUTH_MISSING_TOKEN)
        assert response.status_code == 401
        assert _body(response)["error"]["code"] == AUTH_MISSING_TOKEN

    def test_service_unavailable_detail(self):
        response = service_unavailable_error("Store", "connection refused")
        assert response.status_code == 503
        assert _body(response)["error"]["message"] == "Store unavailable: connection refused"


class TestInternalError:
    def test_includes_request_id(self):
        body = _body(internal_error())
        assert body["error"]["code"] == INTERNAL_ERROR
        assert len(body["error"]["request_id"]) == 12

    def test_hides_detail_outside_debug(self):
        body = _body(internal_error(exc=RuntimeError("secret detail")))
        assert "detail" not in body["error"]
        assert "secret detail" not in json.dumps(body)

    def test_debug_mode_includes_detail(self, monkeypatch):
        monkeypatch.setattr("arena.server.errors._DEBUG", True)
        body = _body(internal_error(exc=RuntimeError("boom")))
        assert body["error"]["exception"] == "RuntimeError"
        assert body["error"]["detail"] == "boom"


class TestArenaError:
    @pytest.mark.parametrize(
        ("exc", "status", "code"),
        [
            (MissingFieldError("topic"), 400, VALIDATION_MISSING_FIELD),
            (ValidationException("Invalid status", field="status"), 400, VALIDATION_INVALID_VALUE),
            (NotFoundError("Debate", "d1"), 404, NOT_FOUND_DEBATE),
            (NotFoundError("Widget", "w1"), 404, NOT_FOUND_RESOURCE),
            (ForbiddenError("over", reason="debate_ended"), 403, FORBIDDEN_DEBATE_ENDED),
            (ForbiddenError("wait", reason="not_your_turn"), 403, FORBIDDEN_NOT_YOUR_TURN),
            (ForbiddenError("no"), 403, FORBIDDEN_INSUFFICIENT_PERMISSION),
            (ConflictError("User already exists"), 409, CONFLICT_ALREADY_EXISTS),
            (DependencyFailure("timeout", backend="redis"), 503, SERVICE_UNAVAILABLE),
            (ArenaException("unexpected"), 500, INTERNAL_ERROR),
        ],
    )
    def test_mapping(self, exc, status, code):
        response = arena_error(exc)
        assert response.status_code == status
        assert _body(response)["error"]["code"] == code

    def test_missing_field_message(self):
        assert _body(arena_error(MissingFieldError("from")))["error"]["message"] == "from is required"
