"""
Custom error types for daily-write.

Provides the error taxonomy shared by the document gateway, the session
tracker and the HTTP API, plus user-facing messages for each.
"""

# =============================================================================
# Base Exception Hierarchy
# =============================================================================


class DailyWriteError(Exception):
    """Base exception for all daily-write errors."""

    pass


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthenticationError(DailyWriteError):
    """Raised when the Google credential is missing, expired or rejected."""

    pass


class CredentialsNotFoundError(AuthenticationError):
    """Raised when a request arrives without an access token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class CredentialsExpiredError(AuthenticationError):
    """Raised when Google rejects the access token (401)."""

    def __init__(self, message: str = "Your Google session has expired. Please sign in again."):
        super().__init__(message)


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DailyWriteError):
    """Raised when input validation fails, before any network call is made."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


# =============================================================================
# API Errors
# =============================================================================


class APIError(DailyWriteError):
    """Raised for errors returned by the remote document service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResourceNotFoundError(APIError):
    """Raised when a document or tab doesn't exist (404)."""

    pass


class UpstreamError(APIError):
    """Raised for any non-success response from Google Docs or Drive that is not an auth failure or a 404."""

    pass


class PermissionDeniedError(UpstreamError):
    """Raised when the user lacks permission for an operation (403)."""

    pass


class RateLimitError(UpstreamError):
    """Raised when API rate limits are exceeded (429)."""

    pass


# =============================================================================
# Persistence Errors
# =============================================================================


class StorageError(DailyWriteError):
    """Raised when the writing-session store cannot be read or written."""

    pass


def http_status_for(error: DailyWriteError) -> int:
    """Map an error to the HTTP status the API layer answers with."""
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, PermissionDeniedError):
        return 403
    if isinstance(error, ResourceNotFoundError):
        return 404
    if isinstance(error, RateLimitError):
        return 429
    if isinstance(error, APIError):
        return 502
    return 500
