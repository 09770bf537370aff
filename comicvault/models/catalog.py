from dataclasses import dataclass
from enum import Enum


class CatalogProvider(str, Enum):
    """External comic-metadata catalogs that can be searched."""

    COMIC_VINE = "comicvine"
    METRON = "metron"
    GUIA = "guia"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    CatalogProvider.COMIC_VINE: "Comic Vine",
    CatalogProvider.METRON: "Metron",
    CatalogProvider.GUIA: "Guia dos Quadrinhos",
}


@dataclass(frozen=True)
class CatalogSearchResult:
    """
    A candidate series returned by a catalog search.

    Attributes:
        title: Series display name
        publisher: Publisher name, or the default placeholder
        year: Start year as text, "N/A" when unknown
        issue_count: Number of issues the provider reports
        cover_url: Series cover image, if any
        description: Short summary
        link: Human-facing page on the provider site
        provider: Which catalog this came from
        provider_ref: Opaque token used to fetch the issue list
    """

    title: str
    publisher: str
    year: str
    issue_count: int
    cover_url: str | None
    description: str
    link: str | None
    provider: CatalogProvider
    provider_ref: str | None

    @property
    def start_year(self) -> int | None:
        """Numeric start year, or None when the provider gave none."""
        return int(self.year) if self.year.isdigit() else None


@dataclass(frozen=True)
class CatalogIssueRecord:
    """One issue of a series as resolved from a catalog."""

    number: str
    name: str | None
    cover_url: str | None
    provider_issue_ref: str | None
