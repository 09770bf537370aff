"""
Authentication API endpoints.

Sign-in creates a session and returns its bearer token; every other
endpoint resolves the user from that token.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from comicvault.api.dependencies import CurrentSession
from comicvault.services.session_registry import SessionRegistry, get_session_registry

router = APIRouter(prefix="/auth", tags=["auth"])


class SignInRequest(BaseModel):
    """Request model for signing in."""

    user_id: str = Field(..., description="Identifier of the user signing in")


class SessionResponse(BaseModel):
    """Response model describing a session."""

    user_id: str
    token: str
    created_at: datetime


class SignOutResponse(BaseModel):
    """Response model for sign-out."""

    signed_out: bool


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(
    request: SignInRequest,
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> SessionResponse:
    """Start a session for the user."""
    session = registry.sign_in(request.user_id)
    return SessionResponse(
        user_id=session.user_id, token=session.token, created_at=session.created_at
    )


@router.get("/session", response_model=SessionResponse)
async def current_session(session: CurrentSession) -> SessionResponse:
    """Describe the caller's session."""
    return SessionResponse(
        user_id=session.user_id, token=session.token, created_at=session.created_at
    )


@router.post("/sign-out", response_model=SignOutResponse)
async def sign_out(
    session: CurrentSession,
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> SignOutResponse:
    """End the caller's session."""
    return SignOutResponse(signed_out=registry.sign_out(session.token))
