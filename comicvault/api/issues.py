"""
Issue API endpoints.

Ownership and condition rating are edited one issue at a time.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from comicvault.api.collections import IssueResponse
from comicvault.api.dependencies import CurrentSession
from comicvault.db import issue_to_model, set_issue_owned, set_issue_rating, toggle_issue_owned
from comicvault.db.database import get_session

router = APIRouter(prefix="/issues", tags=["issues"])


class OwnedRequest(BaseModel):
    """Request model for setting ownership explicitly."""

    is_owned: bool


class RatingRequest(BaseModel):
    """Request model for setting a condition rating; null clears it."""

    rating: int | None = Field(
        ...,
        description="Condition rating from 1 (poor) to 5 (mint), or null",
        examples=[4],
    )


@router.post("/{issue_id}/toggle-owned", response_model=IssueResponse)
async def toggle_owned(
    issue_id: int,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> IssueResponse:
    """Flip the owned flag of an issue."""
    issue = await toggle_issue_owned(session, user.user_id, issue_id)
    return IssueResponse.from_model(issue_to_model(issue))


@router.put("/{issue_id}/owned", response_model=IssueResponse)
async def set_owned(
    issue_id: int,
    request: OwnedRequest,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> IssueResponse:
    """Set the owned flag of an issue."""
    issue = await set_issue_owned(session, user.user_id, issue_id, request.is_owned)
    return IssueResponse.from_model(issue_to_model(issue))


@router.put("/{issue_id}/rating", response_model=IssueResponse)
async def rate_issue(
    issue_id: int,
    request: RatingRequest,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> IssueResponse:
    """
    Set the condition rating of an issue.

    Any issue can be rated, owned or not.
    """
    issue = await set_issue_rating(session, user.user_id, issue_id, request.rating)
    return IssueResponse.from_model(issue_to_model(issue))
