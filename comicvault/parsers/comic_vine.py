"""
Comic Vine payload normalization.

Maps Comic Vine volume and issue payloads into the internal catalog shapes.
Pure functions: the same payload always yields the same output.

API docs: https://comicvine.gamespot.com/api/documentation
"""

from typing import Any

from comicvault.models.catalog import CatalogIssueRecord, CatalogProvider, CatalogSearchResult

UNKNOWN_YEAR = "N/A"


def pick_image(image: dict[str, Any] | None) -> str | None:
    """Medium image, else small image, else None."""
    if not image:
        return None
    return image.get("medium_url") or image.get("small_url") or None


def is_ok(payload: dict[str, Any]) -> bool:
    """Comic Vine reports success as error == "OK"."""
    return payload.get("error") == "OK"


def is_not_found(payload: dict[str, Any]) -> bool:
    """Status code 101 means the requested object does not exist."""
    return payload.get("status_code") == 101


def normalize_volume(item: dict[str, Any], default_publisher: str) -> CatalogSearchResult:
    """
    Normalize one volume from a search response.

    Args:
        item: A single entry of the search "results" list
        default_publisher: Placeholder used when the volume has no publisher

    Returns:
        CatalogSearchResult keyed by the volume's api_detail_url
    """
    publisher = item.get("publisher") or {}
    start_year = item.get("start_year")

    return CatalogSearchResult(
        title=item.get("name") or "",
        publisher=publisher.get("name") or default_publisher,
        year=str(start_year) if start_year else UNKNOWN_YEAR,
        issue_count=int(item.get("count_of_issues") or 0),
        cover_url=pick_image(item.get("image")),
        description=item.get("deck") or item.get("description") or "",
        link=item.get("site_detail_url"),
        provider=CatalogProvider.COMIC_VINE,
        provider_ref=item.get("api_detail_url"),
    )


def parse_search_results(
    payload: dict[str, Any],
    default_publisher: str,
    limit: int,
) -> list[CatalogSearchResult]:
    """Normalize the "results" list of a search response, capped at limit."""
    results = payload.get("results") or []
    return [normalize_volume(item, default_publisher) for item in results[:limit]]


def parse_volume_issues(payload: dict[str, Any]) -> tuple[str | None, list[CatalogIssueRecord]]:
    """
    Extract the volume cover and issue list from a volume detail response.

    Issue entries in a volume payload carry no image of their own, so every
    record's cover_url is None here; covers are filled in by the resolver.

    Returns:
        Tuple of (volume cover URL, issue records in provider order)
    """
    results = payload.get("results") or {}
    volume_cover = pick_image(results.get("image"))

    records = [
        CatalogIssueRecord(
            number=str(issue.get("issue_number") or ""),
            name=issue.get("name") or None,
            cover_url=None,
            provider_issue_ref=issue.get("api_detail_url"),
        )
        for issue in results.get("issues") or []
    ]
    return volume_cover, records


def parse_issue_cover(payload: dict[str, Any]) -> str | None:
    """Cover image of an issue detail response."""
    results = payload.get("results") or {}
    return pick_image(results.get("image"))
