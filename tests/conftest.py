"""Shared test fixtures.

Provides mock Supabase clients, an authenticated user, and a FastAPI
``TestClient`` whose ``get_clients`` / ``get_current_user`` dependencies
are overridden with them.
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from tests.helpers import USER_ID

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")


@pytest.fixture()
def auth_user():
    from app.models.auth import AuthUser

    return AuthUser(
        id=USER_ID,
        email="reader@example.com",
        username="reader",
        access_token="token-123",
    )


@pytest.fixture()
def mock_clients() -> MagicMock:
    """A ``SupabaseClients`` stand-in with independent public/admin mocks."""
    clients = MagicMock()
    clients.public = MagicMock()
    clients.admin = MagicMock()
    return clients


@pytest.fixture()
def anon_client(mock_clients: MagicMock) -> Generator[TestClient, None, None]:
    """TestClient with mocked Supabase and no user override."""
    from app.db.supabase import get_clients
    from app.main import app

    app.dependency_overrides[get_clients] = lambda: mock_clients
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def test_client(
    mock_clients: MagicMock, auth_user
) -> Generator[TestClient, None, None]:
    """TestClient with mocked Supabase and an authenticated caller."""
    from app.core.security import get_current_user
    from app.db.supabase import get_clients
    from app.main import app

    app.dependency_overrides[get_clients] = lambda: mock_clients
    app.dependency_overrides[get_current_user] = lambda: auth_user
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
