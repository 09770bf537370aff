"""
Catalog API endpoints.

Search external catalogs, preview a series' issue list, and import a
selected series as a new collection.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from comicvault.api.collections import CollectionResponse
from comicvault.api.dependencies import CurrentSession
from comicvault.db.database import get_session
from comicvault.models.catalog import CatalogIssueRecord, CatalogProvider, CatalogSearchResult
from comicvault.services.catalog_client import open_catalog_client, search_series
from comicvault.services.import_reconciler import import_series
from comicvault.services.issue_resolver import resolve_issues

router = APIRouter(prefix="/catalog", tags=["catalog"])


async def get_catalog_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Dependency that provides an HTTP client for catalog requests."""
    async with open_catalog_client() as client:
        yield client


class SearchResultModel(BaseModel):
    """A candidate series from a catalog search."""

    title: str
    publisher: str
    year: str = "N/A"
    issue_count: int = 0
    cover_url: str | None = None
    description: str = ""
    link: str | None = None
    provider: CatalogProvider
    provider_ref: str | None = None

    @classmethod
    def from_result(cls, result: CatalogSearchResult) -> "SearchResultModel":
        return cls(
            title=result.title,
            publisher=result.publisher,
            year=result.year,
            issue_count=result.issue_count,
            cover_url=result.cover_url,
            description=result.description,
            link=result.link,
            provider=result.provider,
            provider_ref=result.provider_ref,
        )

    def to_result(self) -> CatalogSearchResult:
        return CatalogSearchResult(
            title=self.title,
            publisher=self.publisher,
            year=self.year,
            issue_count=self.issue_count,
            cover_url=self.cover_url,
            description=self.description,
            link=self.link,
            provider=self.provider,
            provider_ref=self.provider_ref,
        )


class SearchResponse(BaseModel):
    """Response model for a catalog search."""

    provider: CatalogProvider
    query: str
    generation: int = Field(
        ...,
        description="Increases with every search in a session; only the "
        "highest generation received is current",
    )
    results: list[SearchResultModel]
    count: int


class IssuePreviewModel(BaseModel):
    """One resolved issue of a catalog series."""

    number: str
    name: str | None = None
    cover_url: str | None = None

    @classmethod
    def from_record(cls, record: CatalogIssueRecord) -> "IssuePreviewModel":
        return cls(number=record.number, name=record.name, cover_url=record.cover_url)


class IssuePreviewResponse(BaseModel):
    """Response model for a series issue list."""

    provider: CatalogProvider
    provider_ref: str
    issues: list[IssuePreviewModel]
    count: int


@router.get("/{provider}/search", response_model=SearchResponse)
async def search_catalog(
    provider: CatalogProvider,
    q: Annotated[str, Query(description="Series title to search for")],
    user: CurrentSession,
    client: Annotated[httpx.AsyncClient, Depends(get_catalog_client)],
) -> SearchResponse:
    """
    Search a catalog for series by title.

    Returns at most one page of results in provider order. A newer search in
    the same session supersedes this one; compare `generation` to discard
    stale responses.
    """
    generation = user.next_search_generation()
    results = await search_series(provider, q, client=client)
    return SearchResponse(
        provider=provider,
        query=q.strip(),
        generation=generation,
        results=[SearchResultModel.from_result(r) for r in results],
        count=len(results),
    )


@router.get("/{provider}/issues", response_model=IssuePreviewResponse)
async def preview_issues(
    provider: CatalogProvider,
    ref: Annotated[str, Query(description="provider_ref from a search result")],
    user: CurrentSession,
    client: Annotated[httpx.AsyncClient, Depends(get_catalog_client)],
    fallback_cover: str | None = None,
) -> IssuePreviewResponse:
    """Resolve the issue list of a series without saving anything."""
    records = await resolve_issues(provider, ref, fallback_cover=fallback_cover, client=client)
    return IssuePreviewResponse(
        provider=provider,
        provider_ref=ref,
        issues=[IssuePreviewModel.from_record(r) for r in records],
        count=len(records),
    )


@router.post("/import", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def import_catalog_series(
    request: SearchResultModel,
    user: CurrentSession,
    session: Annotated[AsyncSession, Depends(get_session)],
    client: Annotated[httpx.AsyncClient, Depends(get_catalog_client)],
) -> CollectionResponse:
    """
    Import a selected search result as a new collection.

    The collection and all its issues are saved together. When the catalog
    has no usable issue list, numbered issues #1..#issue_count are created
    instead. Importing the same series twice creates two collections.
    """
    collection = await import_series(session, user.user_id, request.to_result(), client=client)
    return CollectionResponse.from_model(collection)
