"""
Catalog import reconciliation.

Turns a selected CatalogSearchResult into a persisted collection with its
issues:

1. Create the collection from the result's normalized fields.
2. Resolve the series issue list. If the provider yields issues, insert
   them (unowned, random placeholder color, resolved cover). If it yields
   none, or resolution fails, insert a synthetic "#1".."#N" sequence sized
   by the result's issue_count.
3. Return the issues in alphanumeric order.

Importing the same series twice creates two independent collections.

Everything is written through the caller's session; the collection and its
issues are committed (or rolled back) together by the caller.
"""

import logging

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from comicvault.db.operations import (
    IssueDraft,
    bulk_create_issues,
    collection_to_model,
    create_collection,
)
from comicvault.models.catalog import CatalogIssueRecord, CatalogSearchResult
from comicvault.models.comic import Collection
from comicvault.models.failure import CatalogFetchFailed, CatalogSeriesNotFound
from comicvault.services.issue_resolver import resolve_issues

logger = logging.getLogger(__name__)


def issue_label(number: str) -> str:
    """Display label for a provider issue number ("12" -> "#12")."""
    number = number.strip()
    if not number or number.startswith("#"):
        return number or "#?"
    return f"#{number}"


def drafts_from_records(records: list[CatalogIssueRecord]) -> list[IssueDraft]:
    """Issue drafts for resolved catalog records."""
    return [
        IssueDraft(
            issue_number=issue_label(record.number),
            name=record.name,
            cover_url=record.cover_url,
        )
        for record in records
    ]


def synthetic_drafts(issue_count: int) -> list[IssueDraft]:
    """Numbered placeholders "#1".."#issue_count" with no cover."""
    return [IssueDraft(issue_number=f"#{n}") for n in range(1, max(issue_count, 0) + 1)]


async def import_series(
    session: AsyncSession,
    user_id: str,
    result: CatalogSearchResult,
    client: httpx.AsyncClient | None = None,
) -> Collection:
    """
    Persist a catalog search result as a new collection with its issues.

    Args:
        session: Database session; the caller commits
        user_id: Owner of the new collection
        result: The selected search result
        client: Optional httpx client for connection reuse

    Returns:
        The new collection with its issues in alphanumeric order

    Raises:
        ValidationError: If the result has no title
        PersistenceError: If the collection or its issues cannot be written
    """
    collection = await create_collection(
        session,
        user_id,
        title=result.title,
        publisher=result.publisher,
        start_year=result.start_year,
        cover_url=result.cover_url,
    )
    logger.info(
        "Created collection %d for %r from %s",
        collection.id,
        result.title,
        result.provider.display_name,
    )

    try:
        records = await resolve_issues(
            result.provider,
            result.provider_ref,
            fallback_cover=result.cover_url,
            client=client,
        )
    except (CatalogSeriesNotFound, CatalogFetchFailed) as e:
        logger.warning("Issue list unavailable for %r: %s", result.title, e.detail or e.message)
        records = []

    if records:
        drafts = drafts_from_records(records)
    else:
        logger.warning(
            "No issue list for %r, creating %d numbered issues", result.title, result.issue_count
        )
        drafts = synthetic_drafts(result.issue_count)

    issues = await bulk_create_issues(session, collection.id, drafts)
    logger.info("Imported %d issues into collection %d", len(issues), collection.id)

    return collection_to_model(collection, issues)
