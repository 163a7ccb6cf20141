"""Core utilities for daily-write."""

from core.config import AppConfig, get_config, reload_config
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
from core.utils import TransientNetworkError, handle_http_errors

__all__ = [
    "APIError",
    "AppConfig",
    "AuthenticationError",
    "CredentialsExpiredError",
    "CredentialsNotFoundError",
    "DailyWriteError",
    "get_config",
    "handle_http_errors",
    "http_status_for",
    "PermissionDeniedError",
    "RateLimitError",
    "reload_config",
    "ResourceNotFoundError",
    "StorageError",
    "TransientNetworkError",
    "UpstreamError",
    "ValidationError",
]
