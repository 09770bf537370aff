"""
Tests for the failure envelope.

Every failure that reaches the client is classified, explained, and names
the action that failed.
"""

import pytest

from comicvault.models.failure import (
    UNKNOWN_FAILURE_MESSAGE,
    ApiResponse,
    AuthenticationError,
    CatalogFetchFailed,
    CatalogSearchFailed,
    CatalogSeriesNotFound,
    FailureKind,
    KnownError,
    NotFoundError,
    OutcomeType,
    PersistenceError,
    ValidationError,
    create_known_failure,
    create_unknown_failure,
)


class TestFailureEnvelope:
    def test_known_failure_response_structure(self) -> None:
        response = ApiResponse.known_failure(
            kind=FailureKind.NOT_FOUND,
            message="Collection 3 not found",
            action="get user collection",
        )

        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure.kind == FailureKind.NOT_FOUND
        assert response.failure.action == "get user collection"

    def test_unknown_failure_message_is_fixed(self) -> None:
        response = create_unknown_failure(RuntimeError("secret internals"), action="sign in")

        assert response.outcome == OutcomeType.UNKNOWN_FAILURE
        assert response.failure.message == UNKNOWN_FAILURE_MESSAGE
        assert response.failure.detail == "RuntimeError"
        assert "secret" not in response.model_dump_json()

    def test_unknown_failure_without_type(self) -> None:
        response = create_unknown_failure(RuntimeError(), include_type=False)

        assert response.failure.detail is None


class TestKnownErrors:
    @pytest.mark.parametrize(
        ("error", "kind", "status_code"),
        [
            (ValidationError("Title is required"), FailureKind.VALIDATION_ERROR, 422),
            (NotFoundError("Issue", 7), FailureKind.NOT_FOUND, 404),
            (AuthenticationError(), FailureKind.UNAUTHENTICATED, 401),
            (CatalogSearchFailed("Metron", "HTTP 500"), FailureKind.CATALOG_SEARCH_FAILED, 502),
            (CatalogSeriesNotFound("Metron", "42"), FailureKind.CATALOG_SERIES_NOT_FOUND, 404),
            (CatalogFetchFailed("Metron", "timeout"), FailureKind.CATALOG_FETCH_FAILED, 502),
            (PersistenceError("create collection", "disk I/O"), FailureKind.PERSISTENCE_ERROR, 500),
        ],
    )
    def test_classification(self, error: KnownError, kind: FailureKind, status_code: int) -> None:
        assert error.kind == kind
        assert error.status_code == status_code

        response = create_known_failure(error, action="import catalog series")
        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure.kind == kind
        assert response.failure.action == "import catalog series"

    def test_search_failure_carries_provider_and_cause(self) -> None:
        error = CatalogSearchFailed("Comic Vine", "Invalid API Key")

        assert error.provider == "Comic Vine"
        assert "Comic Vine" in error.message
        assert error.detail == "Invalid API Key"

    def test_not_found_message(self) -> None:
        assert NotFoundError("Collection", 3).message == "Collection 3 not found"
