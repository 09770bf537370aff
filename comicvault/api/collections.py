"""
Collection API endpoints.

Provides CRUD operations for a user's comic collections and their issues.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from comicvault.api.dependencies import CurrentSession
from comicvault.db import (
    IssueDraft,
    bulk_create_issues,
    collection_to_model,
    create_collection,
    create_issue,
    delete_collection,
    issue_to_model,
    list_collections,
    list_issues,
    require_collection,
    update_collection,
)
from comicvault.db.database import get_session
from comicvault.models.comic import Collection, Issue
from comicvault.models.failure import NotFoundError
from comicvault.services.collection_search import CollectionSort, search_collections
from comicvault.services.import_reconciler import synthetic_drafts

router = APIRouter(prefix="/collections", tags=["collections"])


class IssueResponse(BaseModel):
    """Response model for a single issue."""

    id: int
    collection_id: int
    issue_number: str
    is_owned: bool = False
    name: str | None = None
    cover_url: str | None = None
    cover_color: str | None = None
    condition_rating: int | None = None

    @classmethod
    def from_model(cls, issue: Issue) -> "IssueResponse":
        return cls(
            id=issue.id,
            collection_id=issue.collection_id,
            issue_number=issue.issue_number,
            is_owned=issue.is_owned,
            name=issue.name,
            cover_url=issue.cover_url,
            cover_color=issue.cover_color,
            condition_rating=issue.condition_rating,
        )


class CollectionSummaryResponse(BaseModel):
    """Response model for a collection in a list."""

    id: int
    title: str
    publisher: str
    start_year: int | None = None
    cover_url: str | None = None
    created_at: datetime | None = None
    owned_count: int = 0
    total_count: int = 0

    @classmethod
    def from_model(cls, collection: Collection) -> "CollectionSummaryResponse":
        return cls(
            id=collection.id,
            title=collection.title,
            publisher=collection.publisher,
            start_year=collection.start_year,
            cover_url=collection.cover_url,
            created_at=collection.created_at,
            owned_count=collection.owned_count(),
            total_count=collection.total_count(),
        )


class CollectionResponse(CollectionSummaryResponse):
    """Response model for a collection with its issues."""

    issues: list[IssueResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, collection: Collection) -> "CollectionResponse":
        summary = CollectionSummaryResponse.from_model(collection)
        return cls(
            **summary.model_dump(),
            issues=[IssueResponse.from_model(issue) for issue in collection.issues],
        )


class CollectionListResponse(BaseModel):
    """Response model for a list of collections."""

    collections: list[CollectionSummaryResponse]
    count: int


class CollectionCreateRequest(BaseModel):
    """Request model for creating a collection by hand."""

    title: str = Field(..., examples=["Sandman"])
    publisher: str | None = Field(default=None, examples=["Vertigo"])
    start_year: int | None = Field(default=None, examples=[1989])
    cover_url: str | None = None
    issue_count: int = Field(
        default=0,
        ge=0,
        le=1000,
        description="Create numbered issues #1..#issue_count",
    )


class CollectionUpdateRequest(BaseModel):
    """Request model for editing a collection. Omitted fields are left unchanged."""

    title: str | None = None
    publisher: str | None = None
    start_year: int | None = None
    cover_url: str | None = None


class CollectionStatsResponse(BaseModel):
    """Response model for collection progress."""

    collection_id: int
    owned_count: int
    total_count: int
    completion_percentage: float
    rated_count: int = Field(
        default=0,
        description="Issues that carry a condition rating",
    )


class IssueCreateRequest(BaseModel):
    """Request model for adding an issue by hand."""

    issue_number: str = Field(..., examples=["#1", "Annual 1"])
    name: str | None = None
    cover_url: str | None = None
    is_owned: bool = False


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    collection_id: int
    deleted: bool


@router.get("", response_model=CollectionListResponse)
async def get_collections(
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
    q: Annotated[str | None, Query(description="Filter by title or publisher")] = None,
    sort: CollectionSort = "newest",
) -> CollectionListResponse:
    """
    List the user's collections with owned/total counts.

    Optionally filtered by a case-insensitive term matched against title and
    publisher.
    """
    rows = await list_collections(session, user.user_id)
    collections = search_collections([collection_to_model(row) for row in rows], q, sort)
    return CollectionListResponse(
        collections=[CollectionSummaryResponse.from_model(c) for c in collections],
        count=len(collections),
    )


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def create_user_collection(
    request: CollectionCreateRequest,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionResponse:
    """Create a collection by hand, optionally with numbered issues."""
    collection = await create_collection(
        session,
        user.user_id,
        title=request.title,
        publisher=request.publisher,
        start_year=request.start_year,
        cover_url=request.cover_url,
    )
    issues = await bulk_create_issues(
        session, collection.id, synthetic_drafts(request.issue_count)
    )
    return CollectionResponse.from_model(collection_to_model(collection, issues))


@router.get("/{collection_id}", response_model=CollectionResponse)
async def get_user_collection(
    collection_id: int,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionResponse:
    """Get a collection with its issues in alphanumeric order."""
    collection = await require_collection(session, user.user_id, collection_id)
    return CollectionResponse.from_model(collection_to_model(collection))


@router.patch("/{collection_id}", response_model=CollectionResponse)
async def update_user_collection(
    collection_id: int,
    request: CollectionUpdateRequest,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionResponse:
    """Edit a collection's title, publisher, start year or cover."""
    collection = await update_collection(
        session,
        user.user_id,
        collection_id,
        title=request.title,
        publisher=request.publisher,
        start_year=request.start_year,
        cover_url=request.cover_url,
    )
    return CollectionResponse.from_model(collection_to_model(collection))


@router.delete("/{collection_id}", response_model=DeleteResponse)
async def delete_user_collection(
    collection_id: int,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """
    Delete a collection and every issue in it.

    This is irreversible.
    """
    deleted = await delete_collection(session, user.user_id, collection_id)
    if not deleted:
        raise NotFoundError("Collection", collection_id)
    return DeleteResponse(collection_id=collection_id, deleted=True)


@router.get("/{collection_id}/stats", response_model=CollectionStatsResponse)
async def get_collection_stats(
    collection_id: int,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionStatsResponse:
    """Owned versus total issue counts for a collection."""
    collection = collection_to_model(
        await require_collection(session, user.user_id, collection_id)
    )
    return CollectionStatsResponse(
        collection_id=collection.id,
        owned_count=collection.owned_count(),
        total_count=collection.total_count(),
        completion_percentage=collection.completion_percentage(),
        rated_count=sum(1 for i in collection.issues if i.condition_rating is not None),
    )


@router.get("/{collection_id}/issues", response_model=list[IssueResponse])
async def get_collection_issues(
    collection_id: int,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[IssueResponse]:
    """Issues of a collection in alphanumeric order."""
    issues = await list_issues(session, user.user_id, collection_id)
    return [IssueResponse.from_model(issue_to_model(issue)) for issue in issues]


@router.post(
    "/{collection_id}/issues",
    response_model=IssueResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_collection_issue(
    collection_id: int,
    request: IssueCreateRequest,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> IssueResponse:
    """Add a single issue to a collection."""
    issue = await create_issue(
        session,
        user.user_id,
        collection_id,
        IssueDraft(
            issue_number=request.issue_number,
            name=request.name,
            cover_url=request.cover_url,
            is_owned=request.is_owned,
        ),
    )
    return IssueResponse.from_model(issue_to_model(issue))
