"""Tests for custom error classes."""

import pytest

from core.errors import (
    APIError,
    AuthenticationError,
    CredentialsExpiredError,
    CredentialsNotFoundError,
    DailyWriteError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    StorageError,
    UpstreamError,
    ValidationError,
    http_status_for,
)


class TestErrorHierarchy:
    """Test error class inheritance."""

    def test_base_error_is_exception(self):
        assert issubclass(DailyWriteError, Exception)

    def test_auth_errors_inherit_authentication_error(self):
        assert issubclass(CredentialsNotFoundError, AuthenticationError)
        assert issubclass(CredentialsExpiredError, AuthenticationError)

    def test_validation_error_inherits_base(self):
        assert issubclass(ValidationError, DailyWriteError)

    def test_remote_errors_inherit_api_error(self):
        for error_class in (ResourceNotFoundError, PermissionDeniedError, RateLimitError, UpstreamError):
            assert issubclass(error_class, APIError)

    def test_403_and_429_are_upstream_errors(self):
        assert issubclass(PermissionDeniedError, UpstreamError)
        assert issubclass(RateLimitError, UpstreamError)
        assert not issubclass(ResourceNotFoundError, UpstreamError)
        assert not issubclass(CredentialsExpiredError, UpstreamError)

    def test_storage_error_inherits_base(self):
        assert issubclass(StorageError, DailyWriteError)


class TestAPIError:
    """Test APIError class."""

    def test_api_error_with_status_code(self):
        error = APIError("Test error", status_code=500)
        assert error.status_code == 500
        assert str(error) == "Test error"

    def test_api_error_without_status_code(self):
        error = APIError("Test error")
        assert error.status_code is None

    def test_api_error_is_catchable_as_base(self):
        with pytest.raises(DailyWriteError):
            raise APIError("Test")


class TestMessages:
    def test_missing_credentials_message(self):
        assert str(CredentialsNotFoundError()) == "Unauthorized"

    def test_validation_error_keeps_field(self):
        error = ValidationError("Document ID is required", field="documentId")
        assert error.field == "documentId"


class TestHttpStatusFor:
    @pytest.mark.parametrize(
        "error, status",
        [
            (ValidationError("bad"), 400),
            (CredentialsNotFoundError(), 401),
            (CredentialsExpiredError(), 401),
            (PermissionDeniedError("no"), 403),
            (ResourceNotFoundError("gone"), 404),
            (RateLimitError("slow down"), 429),
            (UpstreamError("boom"), 502),
            (StorageError("disk"), 500),
        ],
    )
    def test_mapping(self, error, status):
        assert http_status_for(error) == status
