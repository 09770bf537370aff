"""
Failure Envelope: Unified Response Classification.

Every user-visible failure is classified and explained through the same
envelope so the client can render a short, non-blocking notification naming
the action that failed.

INVARIANT: No raw 500 errors may reach the client.

Failure types:
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    VALIDATION_ERROR = "validation_error"

    # Resource failures
    NOT_FOUND = "not_found"
    UNAUTHENTICATED = "unauthenticated"

    # Catalog failures
    CATALOG_SEARCH_FAILED = "catalog_search_failed"
    CATALOG_SERIES_NOT_FOUND = "catalog_series_not_found"
    CATALOG_FETCH_FAILED = "catalog_fetch_failed"

    # Storage failures
    PERSISTENCE_ERROR = "persistence_error"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    action: str | None = Field(
        default=None,
        description="The user action that failed (e.g. 'import series')",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel):
    """
    Response envelope for failures.

    Every failure is classified into an outcome type, ensuring no failure
    reaches the user unexplained.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    failure: FailureDetail = Field(
        ...,
        description="What failed and why",
    )

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        action: str | None = None,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """
        Create a known failure response.

        Use when the system knows exactly why the operation failed.
        Example: Catalog unreachable, issue not found, empty title.
        """
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                action=action,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(
        cls,
        action: str | None = None,
        detail: str | None = None,
    ) -> "ApiResponse":
        """
        Create an unknown failure response.

        This is the catch-all for unexpected exceptions.
        """
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message=UNKNOWN_FAILURE_MESSAGE,
                action=action,
                detail=detail,
                suggestion="Try again. If this persists, please report the issue.",
            ),
        )


UNKNOWN_FAILURE_MESSAGE = "Something went wrong and the cause is unknown."


# Standard exception types that map to known failures


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self, action: str | None = None) -> ApiResponse:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            action=action,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class ValidationError(KnownError):
    """Missing or malformed user input, e.g. an empty title."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.VALIDATION_ERROR,
            message=message,
            detail=detail,
            suggestion="Fill in the required fields and try again.",
            status_code=422,
        )


class NotFoundError(KnownError):
    """A row does not exist or belongs to another user."""

    def __init__(self, resource: str, identifier: object):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"{resource} {identifier} not found",
            status_code=404,
        )


class AuthenticationError(KnownError):
    """No valid session accompanies the request."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.UNAUTHENTICATED,
            message="You need to sign in to do that.",
            detail=detail,
            suggestion="Sign in and try again.",
            status_code=401,
        )


class CatalogSearchFailed(KnownError):
    """A catalog search could not be completed."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(
            kind=FailureKind.CATALOG_SEARCH_FAILED,
            message=f"Search on {provider} failed",
            detail=message,
            suggestion="Check the search term and try again.",
            status_code=502,
        )


class CatalogSeriesNotFound(KnownError):
    """The provider has no series for the given reference."""

    def __init__(self, provider: str, provider_ref: str):
        self.provider = provider
        self.provider_ref = provider_ref
        super().__init__(
            kind=FailureKind.CATALOG_SERIES_NOT_FOUND,
            message=f"Series not found on {provider}",
            detail=f"Reference: {provider_ref}",
            status_code=404,
        )


class CatalogFetchFailed(KnownError):
    """Series details could not be fetched from a provider."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(
            kind=FailureKind.CATALOG_FETCH_FAILED,
            message=f"Could not fetch series details from {provider}",
            detail=message,
            suggestion="Try again in a moment.",
            status_code=502,
        )


class PersistenceError(KnownError):
    """A create, read, update or delete against storage failed."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(
            kind=FailureKind.PERSISTENCE_ERROR,
            message=f"Could not {operation}",
            detail=message,
            suggestion="Try again in a moment.",
            status_code=500,
        )


def create_known_failure(error: KnownError, action: str | None = None) -> ApiResponse:
    """Create a known failure response from a KnownError."""
    return error.to_response(action=action)


def create_unknown_failure(
    exception: Exception,
    action: str | None = None,
    include_type: bool = True,
) -> ApiResponse:
    """
    Create an unknown failure response from an exception.

    The message is fixed and cannot be customized.

    Args:
        exception: The exception that caused the failure
        action: The user action that was being performed
        include_type: Whether to include exception type in detail
    """
    detail = type(exception).__name__ if include_type else None
    return ApiResponse.unknown_failure(action=action, detail=detail)
