from comicvault.models.catalog import CatalogIssueRecord, CatalogProvider, CatalogSearchResult
from comicvault.models.comic import Collection, Issue
from comicvault.models.failure import (
    ApiResponse,
    AuthenticationError,
    CatalogFetchFailed,
    CatalogSearchFailed,
    CatalogSeriesNotFound,
    FailureDetail,
    FailureKind,
    KnownError,
    NotFoundError,
    OutcomeType,
    PersistenceError,
    ValidationError,
    create_known_failure,
    create_unknown_failure,
)

__all__ = [
    "ApiResponse",
    "AuthenticationError",
    "CatalogFetchFailed",
    "CatalogIssueRecord",
    "CatalogProvider",
    "CatalogSearchFailed",
    "CatalogSearchResult",
    "CatalogSeriesNotFound",
    "Collection",
    "FailureDetail",
    "FailureKind",
    "Issue",
    "KnownError",
    "NotFoundError",
    "OutcomeType",
    "PersistenceError",
    "ValidationError",
    "create_known_failure",
    "create_unknown_failure",
]
