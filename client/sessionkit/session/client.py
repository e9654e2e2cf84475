"""HTTP client for the remote authentication service."""

from typing import Optional

import httpx
from pydantic import ValidationError

from ..config import SessionConfig
from ..logging import get_logger
from .errors import (
    InvalidResponseError,
    NotAuthenticatedError,
    RequestRejectedError,
    TransportFailureError,
)
from .models import User

logger = get_logger("session.client")


class SessionClient:
    """Async HTTP client for the authentication service API.

    Every call is an independent round trip. Session cookies issued by the
    service live in the underlying httpx cookie jar and are attached to every
    later request automatically; nothing here reads or writes them directly.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cookies: Optional[httpx.Cookies] = None,
    ):
        self.config = config
        self.base_url = config.api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=config.request_timeout,
            transport=transport,
            cookies=cookies,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        """The live cookie jar used by the transport."""
        return self._client.cookies

    async def close(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = await self._client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.RequestError as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"{method} {path} failed: {type(e).__name__}: {reason}")
            raise TransportFailureError(f"Network error: {reason}") from e
        logger.debug(f"{method} {path} -> {resp.status_code}")
        return resp

    @staticmethod
    def _error_message(resp: httpx.Response) -> Optional[str]:
        """Pull the service's ``message`` field out of an error body, if any."""
        try:
            data = resp.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            message = data.get("message")
            if isinstance(message, str) and message:
                return message
        return None

    def _raise_for_status(self, resp: httpx.Response, *, requires_session: bool = False):
        if resp.is_success:
            return
        message = self._error_message(resp)
        if requires_session and resp.status_code in (401, 403):
            raise NotAuthenticatedError(message, resp.status_code)
        raise RequestRejectedError(message, resp.status_code)

    @staticmethod
    def _payload(resp: httpx.Response) -> dict:
        # 204 No Content (or any empty body) is a success with no payload
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    async def login(self, username: str, password: str) -> dict:
        """Ask the service to open a session; it answers with a session cookie."""
        resp = await self._request(
            "POST", "/login", json={"username": username, "password": password}
        )
        self._raise_for_status(resp)
        return self._payload(resp)

    async def register(
        self,
        username: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> dict:
        """Create an account. Does not open a session by itself."""
        body = {"username": username, "password": password}
        if display_name:
            if self.config.send_display_name:
                body["display_name"] = display_name
            else:
                logger.debug("Display name not sent: send_display_name is disabled")
        resp = await self._request("POST", "/register", json=body)
        self._raise_for_status(resp)
        return self._payload(resp)

    async def logout(self) -> None:
        resp = await self._request("POST", "/logout")
        self._raise_for_status(resp)

    async def refresh(self) -> dict:
        """Exchange the refresh cookie for a new access cookie."""
        resp = await self._request("POST", "/refresh")
        self._raise_for_status(resp, requires_session=True)
        return self._payload(resp)

    async def fetch_profile(self) -> User:
        """Fetch the user the current session cookie belongs to."""
        resp = await self._request("GET", "/profile")
        self._raise_for_status(resp, requires_session=True)
        try:
            return User.model_validate(self._payload(resp))
        except ValidationError as e:
            raise InvalidResponseError(
                "Profile response did not match the expected shape", resp.status_code
            ) from e
