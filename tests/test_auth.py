"""Tests for auth endpoints and the ``get_current_user`` dependency."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from tests.helpers import USER_ID, chainable_table_mock, dispatch_tables, not_found_error


def _auth_user(username: str | None = "reader") -> SimpleNamespace:
    return SimpleNamespace(
        id=USER_ID,
        email="reader@example.com",
        user_metadata={"username": username} if username else {},
    )


class TestRegister:

    def test_registers_with_username_metadata(
        self, anon_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.public.auth.sign_up.return_value = SimpleNamespace(
            user=_auth_user(), session=None
        )

        response = anon_client.post(
            "/api/auth/register",
            json={
                "email": "reader@example.com",
                "password": "password123",
                "username": "reader",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["data"]["user"] == {"id": USER_ID, "email": "reader@example.com"}
        credentials = mock_clients.public.auth.sign_up.call_args[0][0]
        assert credentials["options"]["data"] == {"username": "reader"}

    def test_provider_error_returns_400(
        self, anon_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.public.auth.sign_up.side_effect = RuntimeError(
            "User already registered"
        )

        response = anon_client.post(
            "/api/auth/register",
            json={
                "email": "reader@example.com",
                "password": "password123",
                "username": "reader",
            },
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "User already registered"

    def test_validation(self, anon_client: TestClient) -> None:
        response = anon_client.post(
            "/api/auth/register",
            json={"email": "nope", "password": "short", "username": "ab"},
        )

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["error"]["errors"]}
        assert fields == {"email", "password", "username"}


class TestLogin:

    def test_returns_session_and_sets_cookie(
        self, anon_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.public.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=_auth_user(),
            session=SimpleNamespace(
                access_token="access", refresh_token="refresh", expires_at=1714557600
            ),
        )

        response = anon_client.post(
            "/api/auth/login",
            json={"email": "reader@example.com", "password": "password123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["session"] == {
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_at": 1714557600,
        }
        assert response.cookies.get("access_token") == "access"

    def test_bad_credentials_return_401(
        self, anon_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.public.auth.sign_in_with_password.side_effect = RuntimeError(
            "Invalid login credentials"
        )

        response = anon_client.post(
            "/api/auth/login",
            json={"email": "reader@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid credentials"


class TestCurrentUser:

    def test_bearer_token_resolves_user(
        self, anon_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.public.auth.get_user.return_value = SimpleNamespace(
            user=_auth_user()
        )
        profile = chainable_table_mock(
            data={
                "id": USER_ID,
                "username": "stored_name",
                "created_at": "2024-05-01T10:00:00+00:00",
                "updated_at": None,
            }
        )
        dispatch_tables(mock_clients.admin, {"profiles": profile})

        response = anon_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer good-token"}
        )

        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["id"] == USER_ID
        assert user["username"] == "stored_name"
        mock_clients.public.auth.get_user.assert_called_once_with("good-token")

    def test_cookie_token_is_accepted(
        self, anon_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.public.auth.get_user.return_value = SimpleNamespace(
            user=_auth_user()
        )
        missing = chainable_table_mock()
        missing.execute.side_effect = not_found_error()
        dispatch_tables(mock_clients.admin, {"profiles": missing})

        anon_client.cookies.set("access_token", "cookie-token")
        response = anon_client.get("/api/auth/me")

        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["username"] == "reader"
        assert user["created_at"] is None
        mock_clients.public.auth.get_user.assert_called_once_with("cookie-token")

    def test_missing_token_returns_401(self, anon_client: TestClient) -> None:
        response = anon_client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_rejected_token_returns_401(
        self, anon_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.public.auth.get_user.side_effect = RuntimeError("jwt expired")

        response = anon_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer stale"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid or expired token."

    def test_non_bearer_scheme_is_ignored(self, anon_client: TestClient) -> None:
        response = anon_client.get(
            "/api/auth/me", headers={"Authorization": "Basic abc"}
        )

        assert response.status_code == 401


class TestLogout:

    def test_revokes_session_and_clears_cookie(
        self, test_client: TestClient, mock_clients: MagicMock
    ) -> None:
        response = test_client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"
        mock_clients.admin.auth.admin.sign_out.assert_called_once_with("token-123")
        assert "access_token=" in response.headers["set-cookie"]

    def test_provider_failure_returns_500(
        self, test_client: TestClient, mock_clients: MagicMock
    ) -> None:
        mock_clients.admin.auth.admin.sign_out.side_effect = RuntimeError("down")

        response = test_client.post("/api/auth/logout")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Logout failed"
