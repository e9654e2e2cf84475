"""Session client configuration with CLI > env var > defaults precedence."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0
DEFAULT_STATE_DIR = Path.home() / ".sessionkit"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class SessionConfig:
    """Configuration for a session store and its client."""
    api_url: str = ""
    request_timeout: float = 0.0
    state_dir: str = ""

    # Behaviour switches; None means "take it from the environment"
    restore_on_start: Optional[bool] = None
    refresh_on_restore: Optional[bool] = None
    send_display_name: Optional[bool] = None

    def __post_init__(self):
        # Apply env var defaults before CLI overrides
        if not self.api_url:
            self.api_url = os.getenv("SESSIONKIT_API_URL", DEFAULT_API_URL)
        if not self.request_timeout:
            env_timeout = os.getenv("SESSIONKIT_TIMEOUT")
            if env_timeout:
                try:
                    self.request_timeout = float(env_timeout)
                except ValueError:
                    raise ValueError(
                        f"SESSIONKIT_TIMEOUT must be a number of seconds, got {env_timeout!r}"
                    ) from None
            else:
                self.request_timeout = DEFAULT_TIMEOUT
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if not self.state_dir:
            self.state_dir = os.getenv("SESSIONKIT_STATE_DIR", str(DEFAULT_STATE_DIR))

        if self.restore_on_start is None:
            self.restore_on_start = _env_flag("SESSIONKIT_RESTORE_ON_START", True)
        if self.refresh_on_restore is None:
            self.refresh_on_restore = _env_flag("SESSIONKIT_REFRESH_ON_RESTORE", False)
        if self.send_display_name is None:
            self.send_display_name = _env_flag("SESSIONKIT_SEND_DISPLAY_NAME", False)

        self.api_url = self.api_url.rstrip("/")

    @property
    def state_path(self) -> Path:
        """Directory holding the persisted cookie jar and last username."""
        return Path(self.state_dir).expanduser()
