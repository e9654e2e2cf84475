"""Session data model: the authenticated user and the observable session snapshot."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SessionStatus(str, Enum):
    """Whether a session-changing operation is in flight."""
    IDLE = "idle"
    LOADING = "loading"


class User(BaseModel):
    """Profile of the signed-in user as returned by GET /profile."""
    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    created_at: datetime


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of the local authentication state."""
    user: Optional[User] = None
    status: SessionStatus = SessionStatus.IDLE
    last_error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.LOADING

    def evolve(self, **changes) -> "Session":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "user": self.user.model_dump(mode="json") if self.user else None,
            "status": self.status.value,
            "last_error": self.last_error,
        }
