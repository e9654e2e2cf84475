"""sessionkit: client-side session manager for a cookie-based authentication service."""

from .config import SessionConfig
from .session import (
    AuthServiceError,
    Session,
    SessionClient,
    SessionStatus,
    SessionStore,
    User,
    create_session_store,
)

__version__ = "0.1.0"

__all__ = [
    'AuthServiceError',
    'Session',
    'SessionClient',
    'SessionConfig',
    'SessionStatus',
    'SessionStore',
    'User',
    'create_session_store',
]
