"""
User sessions.

The current user is never ambient state: a UserSession is resolved per
request and its user_id is passed explicitly to every operation. Listeners
can subscribe to sign-in and sign-out transitions.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

from comicvault.models.failure import ValidationError

logger = logging.getLogger(__name__)

SessionEvent = Literal["signed_in", "signed_out"]


@dataclass
class UserSession:
    """
    An authenticated user's session.

    Attributes:
        token: Bearer token identifying the session
        user_id: Owner of every row this session reads or writes
        created_at: When the session started
        search_generation: Number of the latest catalog search issued
    """

    token: str
    user_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    search_generation: int = 0

    def next_search_generation(self) -> int:
        """Stamp a new catalog search; only its response is current."""
        self.search_generation += 1
        return self.search_generation


SessionListener = Callable[[SessionEvent, UserSession], None]


class SessionRegistry:
    """In-process registry of active sessions keyed by token."""

    def __init__(self) -> None:
        self._sessions: dict[str, UserSession] = {}
        self._listeners: list[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a callback for sign-in/sign-out transitions.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, user_id: str) -> UserSession:
        """
        Start a new session for a user.

        Raises:
            ValidationError: If user_id is blank
        """
        user_id = (user_id or "").strip()
        if not user_id:
            raise ValidationError("User id is required")

        session = UserSession(token=secrets.token_urlsafe(32), user_id=user_id)
        self._sessions[session.token] = session
        self._notify("signed_in", session)
        return session

    def get(self, token: str) -> UserSession | None:
        """Session for a token, or None if unknown or signed out."""
        return self._sessions.get(token)

    def sign_out(self, token: str) -> bool:
        """
        End a session.

        Returns True if a session was ended, False if the token was unknown.
        """
        session = self._sessions.pop(token, None)
        if session is None:
            return False
        self._notify("signed_out", session)
        return True

    def _notify(self, event: SessionEvent, session: UserSession) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("Session listener failed on %s", event)


session_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    """Dependency returning the process-wide session registry."""
    return session_registry


def log_session_event(event: SessionEvent, session: UserSession) -> None:
    """Listener that records session transitions in the log."""
    logger.info("User %s %s", session.user_id, event.replace("_", " "))
