"""
Collection browsing.

Filters a user's collections by a search term and orders them for display.
"""

from typing import Literal

from comicvault.models.comic import Collection

CollectionSort = Literal[
    "newest",
    "oldest",
    "title_asc",
    "title_desc",
    "publisher_asc",
    "publisher_desc",
    "completion_desc",
]


def filter_collections(collections: list[Collection], term: str | None) -> list[Collection]:
    """
    Keep collections whose title or publisher contains term.

    Matching is case-insensitive. A blank term keeps everything.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(collections)

    return [
        c for c in collections if needle in c.title.lower() or needle in c.publisher.lower()
    ]


def sort_collections(collections: list[Collection], sort: CollectionSort) -> list[Collection]:
    """Order collections for display."""
    match sort:
        case "title_asc":
            return sorted(collections, key=lambda c: c.title.lower())
        case "title_desc":
            return sorted(collections, key=lambda c: c.title.lower(), reverse=True)
        case "publisher_asc":
            return sorted(collections, key=lambda c: (c.publisher.lower(), c.title.lower()))
        case "publisher_desc":
            return sorted(
                collections, key=lambda c: (c.publisher.lower(), c.title.lower()), reverse=True
            )
        case "completion_desc":
            return sorted(collections, key=lambda c: c.completion_percentage(), reverse=True)
        case "oldest":
            return sorted(collections, key=lambda c: (c.created_at is None, c.created_at, c.id))
        case _:
            # newest first; rows already arrive in that order from storage
            return sorted(collections, key=lambda c: c.id, reverse=True)


def search_collections(
    collections: list[Collection],
    term: str | None = None,
    sort: CollectionSort = "newest",
) -> list[Collection]:
    """Filter then sort."""
    return sort_collections(filter_collections(collections, term), sort)
