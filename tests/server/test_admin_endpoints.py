"""Tests for the admin endpoints and their shared-secret guard."""

from __future__ import annotations

import pytest

from arena.server.auth import ADMIN_HEADER

API = "/api/v1"


class TestAdminGuard:
    def test_disabled_without_secret(self, client):
        response = client.get(f"{API}/admin/users/inactive", headers={"Authorization": "Bearer anything"})
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"

    def test_missing_secret(self, admin_client):
        response = admin_client.post(f"{API}/admin/wipe")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_MISSING_TOKEN"

    @pytest.mark.parametrize(
        "headers",
        [
            {"Authorization": "Bearer wrong-secret"},
            {ADMIN_HEADER: "wrong-secret"},
        ],
    )
    def test_invalid_secret(self, admin_client, headers):
        response = admin_client.post(f"{API}/admin/wipe", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    def test_header_form_is_accepted(self, admin_client, admin_headers):
        secret = admin_headers["Authorization"].removeprefix("Bearer ")
        response = admin_client.get(f"{API}/admin/users/inactive", headers={ADMIN_HEADER: secret})
        assert response.status_code == 200

    def test_rejected_request_changes_nothing(self, admin_client):
        admin_client.post(f"{API}/users", json={"name": "alice"})
        admin_client.post(f"{API}/admin/wipe", headers={"Authorization": "Bearer nope"})
        assert admin_client.get(f"{API}/users/alice").status_code == 200

    def test_info_reports_admin_enabled(self, admin_client):
        assert admin_client.get("/").json()["admin"] is True


class TestAdminOperations:
    def test_inactive_users(self, admin_client, admin_headers):
        admin_client.post(f"{API}/users", json={"name": "alice"})
        admin_client.post(f"{API}/users", json={"name": "bob"})
        admin_client.patch(f"{API}/users/bob", json={"status": "active"})

        response = admin_client.get(f"{API}/admin/users/inactive", headers=admin_headers)
        assert response.json() == {"success": True, "users": ["alice"], "count": 1}

    def test_ban_blocks_actions(self, admin_client, admin_headers):
        admin_client.post(f"{API}/users", json={"name": "mallory"})
        response = admin_client.post(f"{API}/admin/users/mallory/ban", headers=admin_headers)
        assert response.json()["user"]["status"] == "banned"

        claim = admin_client.post(f"{API}/users/mallory/claims", json={"text": "spam"})
        assert claim.status_code == 403
        assert claim.json()["error"]["code"] == "FORBIDDEN_USER_BANNED"

        update = admin_client.patch(f"{API}/users/mallory", json={"status": "active"})
        assert update.status_code == 403

    def test_ban_unknown_user(self, admin_client, admin_headers):
        response = admin_client.post(f"{API}/admin/users/ghost/ban", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND_USER"

    def test_purge(self, admin_client, admin_headers):
        admin_client.post(f"{API}/users", json={"name": "bob"})
        admin_client.post(f"{API}/users/bob/claims", json={"text": "not X"})

        response = admin_client.delete(f"{API}/admin/users/bob", headers=admin_headers)
        assert response.json() == {"success": True, "userId": "bob", "purged": True}
        assert admin_client.get(f"{API}/users/bob").status_code == 404
        assert admin_client.get(f"{API}/users/bob/claims").json()["claims"] == []

        again = admin_client.delete(f"{API}/admin/users/bob", headers=admin_headers)
        assert again.status_code == 200

    def test_wipe(self, admin_client, admin_headers):
        admin_client.post(f"{API}/users", json={"name": "alice"})
        admin_client.post(f"{API}/users/alice/claims", json={"text": "X"})

        response = admin_client.post(f"{API}/admin/wipe", headers=admin_headers)
        assert response.json()["deleted"] > 0
        assert admin_client.get(f"{API}/users/alice").status_code == 404
        assert admin_client.post(f"{API}/admin/wipe", headers=admin_headers).json()["deleted"] == 0
