"""
Database CRUD operations.

Provides async functions for creating, reading, updating, and deleting
collections and issues. Every function takes the acting user's id and only
ever touches rows that user owns; rows owned by someone else behave exactly
like rows that do not exist.
"""

import random
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from comicvault.config import (
    COVER_COLORS,
    MAX_CONDITION_RATING,
    MIN_CONDITION_RATING,
    settings,
)
from comicvault.models.comic import Collection, Issue
from comicvault.models.db import CollectionDB, IssueDB
from comicvault.models.failure import NotFoundError, PersistenceError, ValidationError
from comicvault.services.issue_ordering import sort_issues


@dataclass(frozen=True)
class IssueDraft:
    """Field values for an issue that has not been persisted yet."""

    issue_number: str
    name: str | None = None
    cover_url: str | None = None
    cover_color: str | None = None
    is_owned: bool = False


def pick_cover_color() -> str:
    """Random placeholder color for an issue without cover art."""
    return random.choice(COVER_COLORS)


async def _flush(session: AsyncSession, operation: str) -> None:
    try:
        await session.flush()
    except SQLAlchemyError as e:
        raise PersistenceError(operation, str(e)) from e


def _require_text(value: str | None, field_name: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field_name} is required")
    return cleaned


# --- Collection Operations ---


async def create_collection(
    session: AsyncSession,
    user_id: str,
    title: str,
    publisher: str | None = None,
    start_year: int | None = None,
    cover_url: str | None = None,
) -> CollectionDB:
    """
    Create a new collection owned by user_id.

    Publisher falls back to the configured placeholder when blank.

    Raises:
        ValidationError: If title is blank
        PersistenceError: If the row could not be written
    """
    collection = CollectionDB(
        user_id=user_id,
        title=_require_text(title, "Title"),
        publisher=(publisher or "").strip() or settings.default_publisher,
        start_year=start_year,
        cover_url=cover_url or None,
    )
    session.add(collection)
    await _flush(session, "create collection")
    return collection


async def get_collection(
    session: AsyncSession, user_id: str, collection_id: int
) -> CollectionDB | None:
    """
    Get one of a user's collections with its issues loaded.

    Returns None if it does not exist or belongs to another user.
    """
    result = await session.execute(
        select(CollectionDB)
        .where(CollectionDB.id == collection_id, CollectionDB.user_id == user_id)
        .options(selectinload(CollectionDB.issues))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def require_collection(
    session: AsyncSession, user_id: str, collection_id: int
) -> CollectionDB:
    """Like get_collection, but raises NotFoundError instead of returning None."""
    collection = await get_collection(session, user_id, collection_id)
    if collection is None:
        raise NotFoundError("Collection", collection_id)
    return collection


async def list_collections(session: AsyncSession, user_id: str) -> list[CollectionDB]:
    """All of a user's collections, newest first, with issues loaded."""
    result = await session.execute(
        select(CollectionDB)
        .where(CollectionDB.user_id == user_id)
        .options(selectinload(CollectionDB.issues))
        .order_by(CollectionDB.created_at.desc(), CollectionDB.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def update_collection(
    session: AsyncSession,
    user_id: str,
    collection_id: int,
    title: str | None = None,
    publisher: str | None = None,
    start_year: int | None = None,
    cover_url: str | None = None,
) -> CollectionDB:
    """
    Update the given fields of a collection. None means "leave unchanged".

    Raises:
        NotFoundError: If the collection is not the user's
        ValidationError: If a new title is blank
    """
    collection = await require_collection(session, user_id, collection_id)

    if title is not None:
        collection.title = _require_text(title, "Title")
    if publisher is not None:
        collection.publisher = publisher.strip() or settings.default_publisher
    if start_year is not None:
        collection.start_year = start_year
    if cover_url is not None:
        collection.cover_url = cover_url or None

    await _flush(session, "update collection")
    return collection


async def delete_collection(session: AsyncSession, user_id: str, collection_id: int) -> bool:
    """
    Delete a collection and all of its issues.

    Returns True if deleted, False if not found.
    """
    collection = await get_collection(session, user_id, collection_id)
    if not collection:
        return False

    await session.delete(collection)
    await _flush(session, "delete collection")
    return True


# --- Issue Operations ---


async def list_issues(session: AsyncSession, user_id: str, collection_id: int) -> list[IssueDB]:
    """
    Issues of a collection in alphanumeric order.

    Raises:
        NotFoundError: If the collection is not the user's
    """
    await require_collection(session, user_id, collection_id)
    result = await session.execute(select(IssueDB).where(IssueDB.collection_id == collection_id))
    return sort_issues(result.scalars().all(), label=lambda issue: issue.issue_number)


async def bulk_create_issues(
    session: AsyncSession,
    collection_id: int,
    drafts: Sequence[IssueDraft],
) -> list[IssueDB]:
    """
    Insert many issues into a collection in one flush.

    Drafts without a color get a random placeholder color. The caller is
    responsible for having checked ownership of the collection.

    Raises:
        ValidationError: If any draft has a blank issue number
        PersistenceError: If the rows could not be written
    """
    issues = [
        IssueDB(
            collection_id=collection_id,
            issue_number=_require_text(draft.issue_number, "Issue number"),
            is_owned=draft.is_owned,
            name=draft.name or None,
            cover_url=draft.cover_url or None,
            cover_color=draft.cover_color or pick_cover_color(),
            condition_rating=None,
        )
        for draft in drafts
    ]
    session.add_all(issues)
    await _flush(session, "create issues")
    return issues


async def create_issue(
    session: AsyncSession,
    user_id: str,
    collection_id: int,
    draft: IssueDraft,
) -> IssueDB:
    """
    Add a single issue to one of the user's collections.

    Raises:
        NotFoundError: If the collection is not the user's
        ValidationError: If the issue number is blank
    """
    await require_collection(session, user_id, collection_id)
    created = await bulk_create_issues(session, collection_id, [draft])
    return created[0]


async def get_issue(session: AsyncSession, user_id: str, issue_id: int) -> IssueDB | None:
    """Get an issue if its collection belongs to the user."""
    result = await session.execute(
        select(IssueDB)
        .join(CollectionDB, IssueDB.collection_id == CollectionDB.id)
        .where(IssueDB.id == issue_id, CollectionDB.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def _require_issue(session: AsyncSession, user_id: str, issue_id: int) -> IssueDB:
    issue = await get_issue(session, user_id, issue_id)
    if issue is None:
        raise NotFoundError("Issue", issue_id)
    return issue


async def toggle_issue_owned(session: AsyncSession, user_id: str, issue_id: int) -> IssueDB:
    """
    Flip the owned flag of one issue.

    Only this row is written; no other issue changes.
    """
    issue = await _require_issue(session, user_id, issue_id)
    issue.is_owned = not issue.is_owned
    await _flush(session, "update issue")
    return issue


async def set_issue_owned(
    session: AsyncSession, user_id: str, issue_id: int, owned: bool
) -> IssueDB:
    """Set the owned flag of one issue to an explicit value."""
    issue = await _require_issue(session, user_id, issue_id)
    issue.is_owned = owned
    await _flush(session, "update issue")
    return issue


async def set_issue_rating(
    session: AsyncSession, user_id: str, issue_id: int, rating: int | None
) -> IssueDB:
    """
    Set (or clear, with None) the condition rating of an issue.

    Rating is independent of ownership; unowned issues may be rated.

    Raises:
        ValidationError: If rating is outside 1-5
    """
    if rating is not None and not MIN_CONDITION_RATING <= rating <= MAX_CONDITION_RATING:
        raise ValidationError(
            f"Condition rating must be between {MIN_CONDITION_RATING} and {MAX_CONDITION_RATING}"
        )

    issue = await _require_issue(session, user_id, issue_id)
    issue.condition_rating = rating
    await _flush(session, "update issue")
    return issue


# --- Conversions ---


def issue_to_model(issue: IssueDB) -> Issue:
    """Convert a database issue to a domain model."""
    return Issue(
        id=issue.id,
        collection_id=issue.collection_id,
        issue_number=issue.issue_number,
        is_owned=issue.is_owned,
        name=issue.name,
        cover_url=issue.cover_url,
        cover_color=issue.cover_color,
        condition_rating=issue.condition_rating,
    )


def collection_to_model(
    collection: CollectionDB, issues: Sequence[IssueDB] | None = None
) -> Collection:
    """
    Convert a database collection to a domain model.

    Issues default to the collection's loaded relationship and are always
    returned in alphanumeric order.
    """
    rows = collection.issues if issues is None else issues
    return Collection(
        id=collection.id,
        user_id=collection.user_id,
        title=collection.title,
        publisher=collection.publisher,
        start_year=collection.start_year,
        cover_url=collection.cover_url,
        created_at=collection.created_at,
        issues=sort_issues(
            (issue_to_model(row) for row in rows), label=lambda issue: issue.issue_number
        ),
    )
