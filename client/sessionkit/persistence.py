"""
Persists the cookie jar and last username between CLI runs.

A browser keeps the service's session cookie across page loads; a CLI
process has to do the same itself. The cookie file holds live session
credentials, so it is written owner-only.
"""

import json
import os
from pathlib import Path

import httpx

from .logging import get_logger

logger = get_logger("persistence")

COOKIE_FILENAME = "cookies.json"
LAST_USERNAME_FILENAME = "last_username"


def load_cookies(state_dir: Path) -> httpx.Cookies:
    """Load a previously saved cookie jar. Missing or unreadable files give an empty jar."""
    cookies = httpx.Cookies()
    path = state_dir / COOKIE_FILENAME
    if not path.exists():
        return cookies

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable cookie file {path}: {e}")
        return cookies

    for record in records if isinstance(records, list) else []:
        try:
            cookies.set(
                record["name"],
                record["value"],
                domain=record.get("domain", ""),
                path=record.get("path", "/"),
            )
        except (KeyError, TypeError):
            logger.warning(f"Skipping malformed cookie record in {path}")
    return cookies


def save_cookies(cookies: httpx.Cookies, state_dir: Path) -> None:
    """Write the cookie jar to disk (mode 0600)."""
    state_dir.mkdir(parents=True, exist_ok=True)
    path = state_dir / COOKIE_FILENAME
    records = [
        {"name": c.name, "value": c.value, "domain": c.domain, "path": c.path}
        for c in cookies.jar
    ]
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    # The O_CREAT mode is ignored for a file that already existed
    os.fchmod(fd, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(json.dumps(records, indent=2))
    logger.debug(f"Saved {len(records)} cookie(s) to {path}")


def save_last_username(username: str, state_dir: Path) -> None:
    """Save the last logged-in username to file."""
    try:
        state_dir.mkdir(parents=True, exist_ok=True)
        (state_dir / LAST_USERNAME_FILENAME).write_text(username, encoding="utf-8")
    except OSError as e:
        logger.debug(f"Could not save last username: {e}")


def get_last_username(state_dir: Path) -> str | None:
    """Get the last logged-in username from file."""
    path = state_dir / LAST_USERNAME_FILENAME
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip() or None
    except OSError as e:
        logger.debug(f"Could not read last username: {e}")
    return None
