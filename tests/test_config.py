"""Unit tests for configuration, Supabase clients, error envelopes,
the /health endpoint and logging setup.
"""

from unittest.mock import MagicMock, patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.helpers import not_found_error


class TestSettings:
    """Settings loading via pydantic-settings."""

    def test_settings_loads_required_fields(self) -> None:
        env_overrides = {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
            "SUPABASE_SERVICE_ROLE_KEY": "service",
        }
        with patch.dict("os.environ", env_overrides, clear=False):
            from app.core.config import Settings

            s = Settings()  # type: ignore[call-arg]
            assert s.SUPABASE_URL == "https://test.supabase.co"
            assert s.SUPABASE_ANON_KEY == "anon"
            assert s.admin_key == "service"

    def test_settings_defaults(self) -> None:
        env_overrides = {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
        }
        with patch.dict("os.environ", env_overrides, clear=False):
            from app.core.config import Settings

            s = Settings(SUPABASE_SERVICE_ROLE_KEY="", _env_file=None)  # type: ignore[call-arg]
            assert s.ENVIRONMENT == "development"
            assert s.is_development is True
            assert s.PORT == 5000
            assert s.CLIENT_URL == "http://localhost:3000"
            assert s.AVATAR_BUCKET == "profile-images"
            assert s.AVATAR_MAX_BYTES == 5 * 1024 * 1024
            assert s.LOG_LEVEL == "INFO"
            # Without a service-role key the admin client uses the anon key
            assert s.admin_key == "anon"


class TestSupabaseClients:

    def test_create_clients_uses_both_keys(self) -> None:
        from app.core.config import Settings
        from app.db.supabase import create_clients

        config = Settings(  # type: ignore[call-arg]
            SUPABASE_URL="https://test.supabase.co",
            SUPABASE_ANON_KEY="anon",
            SUPABASE_SERVICE_ROLE_KEY="service",
        )
        with patch("app.db.supabase.create_client", side_effect=lambda url, key: key):
            clients = create_clients(config)

        assert clients.public == "anon"
        assert clients.admin == "service"

    def test_get_clients_created_once_per_app(self) -> None:
        from app.db.supabase import get_clients

        application = FastAPI()
        request = MagicMock()
        request.app = application
        sentinel = MagicMock()
        with patch("app.db.supabase.create_clients", return_value=sentinel) as create:
            first = get_clients(request)
            second = get_clients(request)

        assert first is second is sentinel
        create.assert_called_once()

    def test_is_not_found(self) -> None:
        from supabase import PostgrestAPIError

        from app.db.supabase import is_not_found

        assert is_not_found(not_found_error())
        assert not is_not_found(PostgrestAPIError({"code": "42P01", "message": "x"}))
        assert not is_not_found(RuntimeError("PGRST116"))


class TestHealthEndpoint:

    def test_health(self, anon_client: TestClient) -> None:
        response = anon_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "message": "Server is running"}


class TestErrorEnvelope:

    def test_unknown_route(self, anon_client: TestClient) -> None:
        response = anon_client.get("/api/nope")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == (
            "Cannot find /api/nope on this server!"
        )

    def test_stack_only_in_development(self) -> None:
        from app.core.errors import NotFoundError, error_body

        try:
            raise NotFoundError("gone")
        except NotFoundError as exc:
            with patch("app.core.errors.settings") as config:
                config.is_development = True
                assert "stack" in error_body(exc.message, exc=exc)["error"]
                config.is_development = False
                assert "stack" not in error_body(exc.message, exc=exc)["error"]

    def test_unhandled_error_returns_500(self, mock_clients: MagicMock) -> None:
        from app.core.security import get_current_user
        from app.db.supabase import get_clients
        from app.main import app

        def explode() -> None:
            raise KeyError("unexpected")

        app.dependency_overrides[get_clients] = lambda: mock_clients
        app.dependency_overrides[get_current_user] = explode
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                response = client.get("/api/bookmarks")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Something went wrong"

    def test_handlers_render_their_own_exception_types(self) -> None:
        import asyncio
        import json

        from starlette.exceptions import HTTPException as StarletteHTTPException

        from app.core.errors import ForbiddenError, app_error_handler, http_error_handler

        request = MagicMock()
        request.method = "DELETE"
        request.url.path = "/api/comments/abc"

        forbidden = asyncio.run(app_error_handler(request, ForbiddenError("nope")))
        assert forbidden.status_code == 403
        assert json.loads(forbidden.body)["error"]["message"] == "nope"

        conflict = asyncio.run(
            http_error_handler(request, StarletteHTTPException(409, "Conflict"))
        )
        assert conflict.status_code == 409
        assert json.loads(conflict.body) == {
            "success": False,
            "error": {"message": "Conflict"},
        }

    def test_error_kinds_map_to_status(self) -> None:
        from app.core.errors import (
            AppError,
            AuthenticationError,
            ForbiddenError,
            NotFoundError,
            ValidationError,
        )

        assert AppError("x").status_code == 500
        assert ValidationError("x").status_code == 400
        assert AuthenticationError("x").status_code == 401
        assert ForbiddenError("x").status_code == 403
        assert NotFoundError("x").status_code == 404


class TestLogging:

    def test_setup_logging_configures_root_logger(self) -> None:
        import logging

        from app.core.logging import setup_logging

        setup_logging()
        root = logging.getLogger()
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert handler.formatter is not None
        fmt = handler.formatter._fmt
        assert "%(levelname)" in fmt
        assert "%(asctime)" in fmt
        assert "%(name)" in fmt

    def test_setup_logging_is_repeatable_and_quiets_http_stack(self) -> None:
        import logging

        from app.core.logging import QUIET_LOGGERS, setup_logging

        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
