"""
Issue list resolution.

Given a provider reference from a search result, fetches the series issue
list and resolves a cover for every issue.

Cover precedence for each issue:
    issue-specific cover -> series/volume cover -> None

Two depths exist:
- Shallow: the list payload already carries each issue's cover (Metron),
  or per-issue lookups are disabled (Comic Vine with
  comic_vine_fetch_issue_covers=False).
- Deep: one detail request per issue (Comic Vine). Requests run
  concurrently; output order always follows the provider's list order.
  A failed detail request degrades that one issue to the series cover.
"""

import asyncio
import logging
from dataclasses import replace

import httpx

from comicvault.config import settings
from comicvault.models.catalog import CatalogIssueRecord, CatalogProvider
from comicvault.models.failure import CatalogFetchFailed, CatalogSeriesNotFound
from comicvault.parsers import comic_vine, metron
from comicvault.services.catalog_client import (
    client_scope,
    comic_vine_params,
    get_json,
    is_comic_vine_url,
    metron_auth,
)

logger = logging.getLogger(__name__)


def apply_cover_fallback(
    records: list[CatalogIssueRecord],
    series_cover: str | None,
) -> list[CatalogIssueRecord]:
    """Fill in the series cover for every record that has none of its own."""
    return [
        record if record.cover_url else replace(record, cover_url=series_cover)
        for record in records
    ]


async def _fetch_issue_cover(
    client: httpx.AsyncClient,
    record: CatalogIssueRecord,
    fallback: str | None,
) -> CatalogIssueRecord:
    """Resolve one issue's own cover, degrading to fallback on any failure."""
    if not record.provider_issue_ref:
        return replace(record, cover_url=fallback)
    if not is_comic_vine_url(record.provider_issue_ref):
        logger.warning(
            "Ignoring issue %s detail URL outside Comic Vine: %s",
            record.number,
            record.provider_issue_ref,
        )
        return replace(record, cover_url=fallback)

    try:
        payload = await get_json(
            client,
            record.provider_issue_ref,
            params=comic_vine_params(field_list="issue_number,name,image"),
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(
            "Cover lookup failed for issue %s, using series cover: %s", record.number, e
        )
        return replace(record, cover_url=fallback)

    cover = comic_vine.parse_issue_cover(payload) if comic_vine.is_ok(payload) else None
    return replace(record, cover_url=cover or fallback)


async def _resolve_comic_vine(
    client: httpx.AsyncClient,
    provider_ref: str,
    fallback_cover: str | None,
) -> list[CatalogIssueRecord]:
    # provider_ref comes from the client and requests carry the API key
    if not is_comic_vine_url(provider_ref):
        raise CatalogSeriesNotFound(CatalogProvider.COMIC_VINE.display_name, provider_ref)

    try:
        payload = await get_json(
            client,
            provider_ref,
            params=comic_vine_params(field_list="issues,image"),
        )
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            raise CatalogSeriesNotFound(
                CatalogProvider.COMIC_VINE.display_name, provider_ref
            ) from e
        raise

    if comic_vine.is_not_found(payload):
        raise CatalogSeriesNotFound(CatalogProvider.COMIC_VINE.display_name, provider_ref)
    if not comic_vine.is_ok(payload):
        raise CatalogFetchFailed(
            CatalogProvider.COMIC_VINE.display_name,
            f"Comic Vine API error: {payload.get('error')}",
        )

    volume_cover, records = comic_vine.parse_volume_issues(payload)
    series_cover = volume_cover or fallback_cover

    if not settings.comic_vine_fetch_issue_covers:
        return apply_cover_fallback(records, series_cover)

    # gather() returns results in argument order regardless of completion order
    return list(
        await asyncio.gather(
            *(_fetch_issue_cover(client, record, series_cover) for record in records)
        )
    )


async def _resolve_metron(
    client: httpx.AsyncClient,
    provider_ref: str,
    fallback_cover: str | None,
) -> list[CatalogIssueRecord]:
    try:
        payload = await get_json(
            client,
            f"{settings.metron_base_url}/issue/",
            params={"series_id": provider_ref},
            auth=metron_auth(),
        )
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            raise CatalogSeriesNotFound(CatalogProvider.METRON.display_name, provider_ref) from e
        raise

    records = metron.parse_issue_list(payload, settings.metron_origin)
    return apply_cover_fallback(records, fallback_cover)


async def resolve_issues(
    provider: CatalogProvider,
    provider_ref: str | None,
    fallback_cover: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[CatalogIssueRecord]:
    """
    Fetch the issue list of a series with a cover for every issue.

    Args:
        provider: Catalog the reference belongs to
        provider_ref: Opaque series token from the search result
        fallback_cover: Series cover to use when the provider has no better one
        client: Optional httpx client for connection reuse

    Returns:
        Issue records in provider order (not yet alphanumerically sorted).
        Providers without issue lists return an empty list.

    Raises:
        CatalogSeriesNotFound: If the provider has no such series
        CatalogFetchFailed: If the series detail could not be fetched
    """
    if not provider_ref:
        raise CatalogSeriesNotFound(provider.display_name, "<missing>")

    if provider == CatalogProvider.GUIA:
        logger.info("%s has no issue lists; nothing to resolve", provider.display_name)
        return []

    try:
        async with client_scope(client) as http:
            if provider == CatalogProvider.COMIC_VINE:
                records = await _resolve_comic_vine(http, provider_ref, fallback_cover)
            else:
                records = await _resolve_metron(http, provider_ref, fallback_cover)
    except httpx.HTTPStatusError as e:
        raise CatalogFetchFailed(provider.display_name, f"HTTP {e.response.status_code}") from e
    except httpx.RequestError as e:
        raise CatalogFetchFailed(provider.display_name, str(e) or type(e).__name__) from e
    except ValueError as e:
        raise CatalogFetchFailed(provider.display_name, f"Invalid response: {e}") from e

    logger.info(
        "Resolved %d issues from %s for %s", len(records), provider.display_name, provider_ref
    )
    return records
