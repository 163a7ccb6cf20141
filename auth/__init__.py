"""Authentication for daily-write: bearer access tokens to Google service objects."""

from auth.credentials import (
    build_docs_service,
    build_drive_service,
    credentials_from_access_token,
    extract_bearer_token,
)
from auth.scopes import SCOPES

__all__ = [
    "build_docs_service",
    "build_drive_service",
    "credentials_from_access_token",
    "extract_bearer_token",
    "SCOPES",
]
