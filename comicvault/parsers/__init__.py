from comicvault.parsers.comic_vine import (
    normalize_volume,
    parse_issue_cover,
    parse_search_results,
    parse_volume_issues,
)
from comicvault.parsers.metron import (
    normalize_series,
    parse_issue_list,
    parse_series_results,
)

__all__ = [
    "normalize_series",
    "normalize_volume",
    "parse_issue_cover",
    "parse_issue_list",
    "parse_search_results",
    "parse_series_results",
    "parse_volume_issues",
]
