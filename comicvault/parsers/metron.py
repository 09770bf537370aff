"""
Metron payload normalization.

Metron returns relative image paths; they are made absolute against the
provider origin.
"""

from typing import Any

from comicvault.models.catalog import CatalogIssueRecord, CatalogProvider, CatalogSearchResult

UNKNOWN_YEAR = "N/A"


def absolute_image(path: str | None, origin: str) -> str | None:
    """Prefix a relative image path with the provider origin."""
    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{origin}{path}"


def normalize_series(
    item: dict[str, Any],
    origin: str,
    default_publisher: str,
) -> CatalogSearchResult:
    """Normalize one series from a /series/ response."""
    publisher = item.get("publisher") or {}
    year_began = item.get("year_began")
    series_id = item.get("id")

    return CatalogSearchResult(
        title=item.get("display_name") or item.get("name") or "",
        publisher=publisher.get("name") or default_publisher,
        year=str(year_began) if year_began else UNKNOWN_YEAR,
        issue_count=int(item.get("issue_count") or 0),
        cover_url=absolute_image(item.get("image"), origin),
        description=item.get("desc") or "",
        link=f"{origin}/series/{series_id}/" if series_id is not None else None,
        provider=CatalogProvider.METRON,
        provider_ref=str(series_id) if series_id is not None else None,
    )


def parse_series_results(
    payload: dict[str, Any],
    origin: str,
    default_publisher: str,
    limit: int,
) -> list[CatalogSearchResult]:
    """Normalize the "results" list of a series search, capped at limit."""
    results = payload.get("results") or []
    return [normalize_series(item, origin, default_publisher) for item in results[:limit]]


def parse_issue_list(payload: dict[str, Any], origin: str) -> list[CatalogIssueRecord]:
    """Normalize an /issue/?series_id= response, keeping provider order."""
    return [
        CatalogIssueRecord(
            number=str(issue.get("number") or "N/A"),
            name=issue.get("issue_name") or None,
            cover_url=absolute_image(issue.get("image"), origin),
            provider_issue_ref=str(issue["id"]) if issue.get("id") is not None else None,
        )
        for issue in payload.get("results") or []
    ]
