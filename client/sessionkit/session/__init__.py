"""Session module: client-side authentication state and its remote service client."""

from typing import Optional

import httpx

from ..config import SessionConfig
from .client import SessionClient
from .errors import (
    AuthServiceError,
    InvalidResponseError,
    NotAuthenticatedError,
    RequestRejectedError,
    TransportFailureError,
)
from .models import Session, SessionStatus, User
from .store import SessionStore


def create_session_store(
    config: Optional[SessionConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cookies: Optional[httpx.Cookies] = None,
) -> SessionStore:
    """Build a SessionStore wired to a fresh SessionClient.

    The caller owns the returned store and passes it to whatever needs the
    session; use it as ``async with`` to run restoration and clean up.
    """
    config = config or SessionConfig()
    client = SessionClient(config, transport=transport, cookies=cookies)
    return SessionStore(
        client,
        restore_on_start=config.restore_on_start,
        refresh_on_restore=config.refresh_on_restore,
    )


__all__ = [
    'AuthServiceError',
    'InvalidResponseError',
    'NotAuthenticatedError',
    'RequestRejectedError',
    'Session',
    'SessionClient',
    'SessionStatus',
    'SessionStore',
    'TransportFailureError',
    'User',
    'create_session_store',
]
