"""SessionStore: the session state machine.

Owns one Session snapshot, runs login/register/logout against the
authentication service one at a time, and pushes every new snapshot to
subscribers. Failures never escape: they end up as a string in
``Session.last_error`` and the status always returns to idle.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional

from ..logging import get_logger
from .client import SessionClient
from .errors import AuthServiceError, NotAuthenticatedError
from .models import Session, SessionStatus, User

logger = get_logger("session.store")

LOGIN_FAILED = "Login failed"
REGISTRATION_FAILED = "Registration failed"
PROFILE_FETCH_FAILED = "Failed to fetch user profile"
UNEXPECTED_ERROR = "Unexpected error"

Subscriber = Callable[[Session], None]


class SessionStore:
    """Holds the current Session and mediates every change to it."""

    def __init__(
        self,
        client: SessionClient,
        *,
        restore_on_start: bool = True,
        refresh_on_restore: bool = False,
    ):
        self.client = client
        self.restore_on_start = restore_on_start
        self.refresh_on_restore = refresh_on_restore
        self._session = Session()
        self._subscribers: list[Subscriber] = []
        self._lock = asyncio.Lock()
        # Bumped whenever an operation starts; lets restore() detect it was overtaken
        self._generation = 0
        self._restore_task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "SessionStore":
        if self.restore_on_start:
            self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def busy(self) -> bool:
        """True while login, register or logout holds the operation guard."""
        return self._lock.locked()

    # --- Subscriptions ---

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` with the current snapshot now and after every change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)
        self._deliver(callback, self._session)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _deliver(self, callback: Subscriber, session: Session):
        try:
            callback(session)
        except Exception:
            logger.exception(f"Session subscriber {callback!r} raised")

    def _set(self, **changes):
        self._session = self._session.evolve(**changes)
        for callback in list(self._subscribers):
            self._deliver(callback, self._session)

    # --- Restoration ---

    def start(self) -> asyncio.Task:
        """Schedule restore() in the background. Idempotent."""
        if self._restore_task is not None:
            return self._restore_task

        self._restore_task = asyncio.create_task(self.restore(), name="session-restore")

        def _on_done(task: asyncio.Task):
            if task.cancelled():
                return
            exc = task.exception()
            if exc:
                logger.error(f"Session restore task crashed: {type(exc).__name__}: {exc}")

        self._restore_task.add_done_callback(_on_done)
        return self._restore_task

    async def wait_restored(self) -> Session:
        """Wait for a restore scheduled by start(), if any."""
        if self._restore_task is not None:
            await asyncio.shield(self._restore_task)
        return self._session

    async def restore(self) -> Session:
        """Adopt an existing remote session, if the service still honours our cookie.

        Absence of a session is the normal unauthenticated state, so no
        failure here touches ``last_error``. The result is dropped if another
        operation was running when the check began or started before it ended.
        """
        generation = self._generation
        overlapped = self.busy

        try:
            user = await self._fetch_existing_user()
        except Exception:
            logger.exception("Unexpected error while restoring session")
            return self._session

        if user is None:
            return self._session
        if overlapped or generation != self._generation:
            logger.info("Discarding restored session: superseded by a newer operation")
            return self._session

        logger.info(f"Restored session for {user.username}")
        self._set(user=user)
        return self._session

    async def _fetch_existing_user(self) -> Optional[User]:
        try:
            return await self.client.fetch_profile()
        except NotAuthenticatedError:
            if not self.refresh_on_restore:
                logger.debug("No existing session")
                return None
        except AuthServiceError as e:
            logger.debug(f"No existing session: {e}")
            return None

        # Access cookie rejected: trade the refresh cookie for a new one and look again
        try:
            await self.client.refresh()
            return await self.client.fetch_profile()
        except AuthServiceError as e:
            logger.debug(f"Session refresh failed: {e}")
            return None

    # --- Operations ---

    async def _run(self, name: str, step: Callable[[], Awaitable[dict]]) -> Session:
        """Run one operation under the guard: Loading on entry, Idle on every exit."""
        async with self._lock:
            self._generation += 1
            self._set(status=SessionStatus.LOADING, last_error=None)
            outcome: dict = {}
            try:
                outcome = await step()
            except Exception:
                logger.exception(f"Unexpected error during {name}", extra={"operation": name})
                outcome = {"last_error": UNEXPECTED_ERROR}
            finally:
                self._set(status=SessionStatus.IDLE, **outcome)
        return self._session

    async def _perform_login(self, username: str, password: str) -> dict:
        """Log in, then load the authoritative profile. Returns the state changes."""
        try:
            await self.client.login(username, password)
        except AuthServiceError as e:
            logger.info(f"Login rejected: {e}")
            return {"last_error": e.message or LOGIN_FAILED}

        try:
            user = await self.client.fetch_profile()
        except AuthServiceError as e:
            # The cookie may be valid; the next restore reconciles it
            logger.warning(f"Logged in but profile fetch failed: {e}")
            return {"last_error": PROFILE_FETCH_FAILED}

        logger.info(f"Logged in as {user.username}", extra={"user_id": user.id})
        return {"user": user}

    async def login(self, username: str, password: str) -> Session:
        return await self._run("login", lambda: self._perform_login(username, password))

    async def register(
        self,
        username: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> Session:
        """Create an account and sign straight into it."""

        async def step() -> dict:
            try:
                await self.client.register(username, password, display_name=display_name)
            except AuthServiceError as e:
                logger.info(f"Registration rejected: {e}")
                return {"last_error": e.message or REGISTRATION_FAILED}
            return await self._perform_login(username, password)

        return await self._run("register", step)

    async def logout(self) -> Session:
        """Drop the local session; the server call is best-effort."""

        async def step() -> dict:
            try:
                await self.client.logout()
            except AuthServiceError as e:
                logger.warning(f"Logout request failed, clearing local session anyway: {e}")
            except Exception:
                logger.exception("Unexpected error during logout request, clearing local session anyway")
            return {"user": None, "last_error": None}

        return await self._run("logout", step)

    async def close(self):
        """Stop a pending restore and release the HTTP client."""
        if self._restore_task and not self._restore_task.done():
            self._restore_task.cancel()
            try:
                await self._restore_task
            except asyncio.CancelledError:
                pass
        await self.client.close()
