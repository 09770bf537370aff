"""
Catalog search client.

Issues a single search request against one external comic catalog and
normalizes the response into CatalogSearchResult records. Any transport
failure, non-2xx status or provider-reported error becomes
CatalogSearchFailed. No retries.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from comicvault.config import settings
from comicvault.models.catalog import CatalogProvider, CatalogSearchResult
from comicvault.models.failure import CatalogSearchFailed, ValidationError
from comicvault.parsers import comic_vine, metron
from comicvault.scrapers import guia_quadrinhos

logger = logging.getLogger(__name__)


def open_catalog_client() -> httpx.AsyncClient:
    """Create an HTTP client configured for catalog requests."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        follow_redirects=True,
        timeout=settings.http_timeout,
    )


@asynccontextmanager
async def client_scope(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    """Use the given client, or open (and close) a temporary one."""
    if client is not None:
        yield client
        return
    async with open_catalog_client() as owned:
        yield owned


def metron_auth() -> tuple[str, str] | None:
    """Basic auth credentials for Metron, if configured."""
    if settings.metron_username:
        return (settings.metron_username, settings.metron_password)
    return None


def is_comic_vine_url(url: str) -> bool:
    """True if url points inside the configured Comic Vine API."""
    return url.startswith(settings.comic_vine_base_url.rstrip("/") + "/")


def comic_vine_params(**extra: Any) -> dict[str, Any]:
    """Query parameters every Comic Vine request needs."""
    return {"api_key": settings.comic_vine_api_key, "format": "json", **extra}


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
    auth: tuple[str, str] | None = None,
) -> dict[str, Any]:
    """
    GET a URL and decode its JSON body.

    Raises:
        httpx.HTTPStatusError: For non-2xx responses
        httpx.RequestError: For transport failures
        ValueError: If the body is not a JSON object
    """
    if auth is not None:
        response = await client.get(url, params=params, auth=auth)
    else:
        response = await client.get(url, params=params)
    response.raise_for_status()

    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected payload type: {type(data).__name__}")
    return data


async def _search_comic_vine(client: httpx.AsyncClient, query: str) -> list[CatalogSearchResult]:
    if not settings.comic_vine_api_key:
        raise CatalogSearchFailed(
            CatalogProvider.COMIC_VINE.display_name, "COMIC_VINE_API_KEY not configured"
        )

    payload = await get_json(
        client,
        f"{settings.comic_vine_base_url}/search/",
        params=comic_vine_params(
            query=query,
            resources="volume",
            limit=settings.catalog_page_size,
        ),
    )
    if not comic_vine.is_ok(payload):
        raise CatalogSearchFailed(
            CatalogProvider.COMIC_VINE.display_name,
            f"Comic Vine API error: {payload.get('error')}",
        )

    return comic_vine.parse_search_results(
        payload, settings.default_publisher, settings.catalog_page_size
    )


async def _search_metron(client: httpx.AsyncClient, query: str) -> list[CatalogSearchResult]:
    payload = await get_json(
        client,
        f"{settings.metron_base_url}/series/",
        params={"name": query},
        auth=metron_auth(),
    )
    if "results" not in payload:
        raise CatalogSearchFailed(
            CatalogProvider.METRON.display_name,
            f"Metron API error: {payload.get('detail', 'missing results')}",
        )

    return metron.parse_series_results(
        payload, settings.metron_origin, settings.default_publisher, settings.catalog_page_size
    )


async def _search_guia(client: httpx.AsyncClient, query: str) -> list[CatalogSearchResult]:
    html = await guia_quadrinhos.fetch_search_page(query, client, base_url=settings.guia_base_url)
    return guia_quadrinhos.parse_search_page(
        html,
        settings.default_publisher,
        settings.catalog_page_size,
        base_url=settings.guia_base_url,
    )


_SEARCHERS = {
    CatalogProvider.COMIC_VINE: _search_comic_vine,
    CatalogProvider.METRON: _search_metron,
    CatalogProvider.GUIA: _search_guia,
}


async def search_series(
    provider: CatalogProvider,
    query: str,
    client: httpx.AsyncClient | None = None,
) -> list[CatalogSearchResult]:
    """
    Search a catalog for series matching a title.

    Args:
        provider: Which catalog to query
        query: Free-text title; must not be blank
        client: Optional httpx client for connection reuse

    Returns:
        At most catalog_page_size results, in provider order

    Raises:
        ValidationError: If the query is blank
        CatalogSearchFailed: On any provider or transport failure
    """
    query = query.strip() if query else ""
    if not query:
        raise ValidationError("Search term cannot be empty")

    logger.info("Searching %s for %r", provider.display_name, query)

    try:
        async with client_scope(client) as http:
            results = await _SEARCHERS[provider](http, query)
    except httpx.HTTPStatusError as e:
        raise CatalogSearchFailed(
            provider.display_name, f"HTTP {e.response.status_code}"
        ) from e
    except httpx.RequestError as e:
        raise CatalogSearchFailed(provider.display_name, str(e) or type(e).__name__) from e
    except ValueError as e:
        raise CatalogSearchFailed(provider.display_name, f"Invalid response: {e}") from e

    logger.info("%s returned %d results for %r", provider.display_name, len(results), query)
    return results
