"""Shared fixtures for sessionkit tests."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from sessionkit.config import SessionConfig
from sessionkit.session import SessionClient, SessionStore, User

API_URL = "http://auth.test"

PROFILE = {
    "id": "u1",
    "username": "user@example.com",
    "created_at": "2024-01-01T00:00:00Z",
}


@pytest.fixture
def config(tmp_path, monkeypatch):
    """A config isolated from the developer's environment."""
    for name in (
        "SESSIONKIT_API_URL",
        "SESSIONKIT_TIMEOUT",
        "SESSIONKIT_STATE_DIR",
        "SESSIONKIT_RESTORE_ON_START",
        "SESSIONKIT_REFRESH_ON_RESTORE",
        "SESSIONKIT_SEND_DISPLAY_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    return SessionConfig(api_url=API_URL, state_dir=str(tmp_path / "state"))


@pytest.fixture
def user() -> User:
    return User.model_validate(PROFILE)


@pytest.fixture
def mock_client():
    """A SessionClient double whose calls all succeed unless a test says otherwise."""
    client = MagicMock(spec=SessionClient)
    client.login = AsyncMock(return_value={"message": "Logged in"})
    client.register = AsyncMock(return_value={"message": "User created"})
    client.logout = AsyncMock(return_value=None)
    client.refresh = AsyncMock(return_value={})
    client.fetch_profile = AsyncMock(return_value=User.model_validate(PROFILE))
    client.close = AsyncMock(return_value=None)
    return client


@pytest.fixture
def store(mock_client) -> SessionStore:
    return SessionStore(mock_client, restore_on_start=False)


@pytest_asyncio.fixture
async def make_client(config):
    """Build SessionClients over an httpx.MockTransport handler."""
    clients: list[SessionClient] = []

    def _make(handler, **overrides) -> SessionClient:
        for key, value in overrides.items():
            setattr(config, key, value)
        client = SessionClient(config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.close()
