"""
Google Workspace OAuth Scopes

The scopes a daily-write access token needs. The token itself is obtained by
the sign-in flow in front of the API; this service only consumes it.
"""

# Individual OAuth Scope Constants
USERINFO_EMAIL_SCOPE = "https://www.googleapis.com/auth/userinfo.email"
USERINFO_PROFILE_SCOPE = "https://www.googleapis.com/auth/userinfo.profile"
OPENID_SCOPE = "openid"

# Google Drive scopes
DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"

# Google Docs scopes
DOCS_WRITE_SCOPE = "https://www.googleapis.com/auth/documents"

# Base OAuth scopes required for user identification
BASE_SCOPES = [USERINFO_EMAIL_SCOPE, USERINFO_PROFILE_SCOPE, OPENID_SCOPE]

# Listing recent documents needs read access to Drive metadata
DOCS_SCOPES = [DOCS_WRITE_SCOPE]
DRIVE_SCOPES = [DRIVE_READONLY_SCOPE, DRIVE_FILE_SCOPE]

SCOPES = BASE_SCOPES + DOCS_SCOPES + DRIVE_SCOPES
