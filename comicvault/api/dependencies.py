"""
Shared request dependencies.
"""

from typing import Annotated

from fastapi import Depends, Header

from comicvault.models.failure import AuthenticationError
from comicvault.services.session_registry import (
    SessionRegistry,
    UserSession,
    get_session_registry,
)


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an "Authorization: Bearer <token>" header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_session(
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
    authorization: Annotated[str | None, Header()] = None,
) -> UserSession:
    """
    Resolve the signed-in user's session from the Authorization header.

    Raises:
        AuthenticationError: If the header is missing or the session is unknown
    """
    token = bearer_token(authorization)
    if token is None:
        raise AuthenticationError("Missing bearer token")

    session = registry.get(token)
    if session is None:
        raise AuthenticationError("Session expired or signed out")
    return session


CurrentSession = Annotated[UserSession, Depends(get_current_session)]
