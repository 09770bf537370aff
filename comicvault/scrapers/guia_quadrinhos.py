"""
Guia dos Quadrinhos search scraper.

Fetches the title search page and extracts series titles, links and cover
thumbnails. The site has no API and no issue list endpoint, so results carry
only what the search page shows.

Note: Web scraping is inherently fragile. Page structure may change.
"""

import re
from urllib.parse import quote

import httpx

from comicvault.models.catalog import CatalogProvider, CatalogSearchResult

GUIA_BASE = "http://www.guiadosquadrinhos.com"

# Example: <div class="title_search"> ... <a href="/titulo/batman/123">Batman</a>
TITLE_PATTERN = re.compile(
    r'<div class="title_search">.*?<a href="([^"]+)"[^>]*>([^<]+)</a>',
    re.DOTALL,
)

# Example: <img src="/capas/batman.jpg" class="img thumb">
COVER_PATTERN = re.compile(r'<img[^>]+src="([^"]+)"[^>]*class="[^"]*thumb')


async def fetch_search_page(
    query: str,
    client: httpx.AsyncClient,
    base_url: str = GUIA_BASE,
) -> str:
    """
    Fetch the title search page HTML.

    Raises:
        httpx.HTTPError: If request fails
    """
    url = f"{base_url}/search/title/{quote(query)}"
    response = await client.get(url, follow_redirects=True)
    response.raise_for_status()
    return response.text


def _absolute(path: str, base_url: str) -> str:
    return path if path.startswith("http") else f"{base_url}{path}"


def parse_search_page(
    html: str,
    default_publisher: str,
    limit: int,
    base_url: str = GUIA_BASE,
) -> list[CatalogSearchResult]:
    """
    Parse search results from a title search page.

    Titles and covers are matched up by position; extra titles without a
    cover (or covers without a title) are dropped.
    """
    titles = [(link, name.strip()) for link, name in TITLE_PATTERN.findall(html)]
    covers = COVER_PATTERN.findall(html)

    results: list[CatalogSearchResult] = []
    for (link, name), cover in zip(titles, covers, strict=False):
        full_link = _absolute(link, base_url)
        results.append(
            CatalogSearchResult(
                title=name,
                publisher=default_publisher,
                year="N/A",
                issue_count=0,
                cover_url=_absolute(cover, base_url),
                description="",
                link=full_link,
                provider=CatalogProvider.GUIA,
                provider_ref=full_link,
            )
        )

    return results[:limit]
