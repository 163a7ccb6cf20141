"""
Google credentials and service objects built from a bearer access token.

Every API request carries the user's OAuth access token. A short-lived
``google.oauth2.credentials.Credentials`` is built from it per request and
used to build the Docs and Drive service objects.
"""

import logging

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from auth.scopes import SCOPES
from core.errors import CredentialsNotFoundError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header, if any."""
    if not authorization:
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


def credentials_from_access_token(access_token: str | None) -> Credentials:
    """
    Wrap an access token in Google credentials.

    Raises:
        CredentialsNotFoundError: If no token was supplied.
    """
    if not access_token:
        raise CredentialsNotFoundError()
    return Credentials(token=access_token, scopes=SCOPES)


def build_docs_service(credentials: Credentials):
    """Google Docs API v1 service object."""
    return build("docs", "v1", credentials=credentials, cache_discovery=False)


def build_drive_service(credentials: Credentials):
    """Google Drive API v3 service object."""
    return build("drive", "v3", credentials=credentials, cache_discovery=False)
