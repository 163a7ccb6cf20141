import asyncio
import datetime
import functools
import logging
import re
import ssl

from googleapiclient.errors import HttpError

from core.errors import (
    APIError,
    AuthenticationError,
    CredentialsExpiredError,
    DailyWriteError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def validate_document_id(document_id: str | None, param_name: str = "documentId") -> str:
    """Validate a Google Docs document ID."""
    if document_id is None or not isinstance(document_id, str):
        raise ValidationError("Document ID is required", field=param_name)

    document_id = document_id.strip()
    if not document_id:
        raise ValidationError("Document ID is required", field=param_name)

    if not re.match(r"^[\w\-]+$", document_id):
        raise ValidationError(f"{param_name} contains invalid characters", field=param_name)

    return document_id


def validate_title(title: str | None, param_name: str = "title") -> str:
    """Validate a new document title."""
    if not title or not isinstance(title, str) or not title.strip():
        raise ValidationError("Document title is required", field=param_name)
    return title.strip()


def validate_markdown(markdown, param_name: str = "markdown") -> str:
    """Validate editor content. An empty string is valid content."""
    if not isinstance(markdown, str):
        raise ValidationError("Markdown content is required", field=param_name)
    return markdown


def validate_date(value: str | None, param_name: str = "date") -> str:
    """Validate a YYYY-MM-DD date string."""
    if not value or not isinstance(value, str):
        raise ValidationError(f"{param_name} is required", field=param_name)
    try:
        datetime.datetime.strptime(value, DATE_FORMAT)
    except ValueError as e:
        raise ValidationError(f"{param_name} must be in YYYY-MM-DD format", field=param_name) from e
    return value


def validate_non_negative_int(value, param_name: str) -> int:
    """Validate a non-negative integer (word counts, targets)."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{param_name} must be a non-negative integer", field=param_name)
    return value


def date_to_string(date: datetime.date) -> str:
    """Format a date as YYYY-MM-DD."""
    return date.strftime(DATE_FORMAT)


def today_string() -> str:
    """Today's local date as YYYY-MM-DD."""
    return date_to_string(datetime.date.today())


class TransientNetworkError(UpstreamError):
    """Custom exception for transient network errors after retries."""

    pass


def _error_from_http_error(operation: str, error: HttpError) -> APIError | AuthenticationError:
    status = error.resp.status
    reason = error.reason if hasattr(error, "reason") else str(error)

    if status == 401:
        return CredentialsExpiredError()
    if status == 403:
        return PermissionDeniedError(
            f"API error in {operation}: permission denied. You may not have access to this document.",
            status_code=status,
        )
    if status == 404:
        return ResourceNotFoundError(f"API error in {operation}: document not found", status_code=status)
    if status == 429:
        return RateLimitError(
            f"API error in {operation}: rate limit exceeded. Please wait and try again.", status_code=status
        )
    return UpstreamError(f"API error in {operation}: {reason}", status_code=status)


def handle_http_errors(operation: str, is_read_only: bool = False):
    """
    A decorator to handle Google API HttpErrors and transient SSL errors in a standardized way.

    It wraps an async gateway method, catches HttpError, logs a detailed error message,
    and raises the matching error from core.errors.

    If is_read_only is True, it will also catch ssl.SSLError and retry with
    exponential backoff. After exhausting retries, it raises a TransientNetworkError.

    Args:
        operation (str): The name of the operation being decorated (e.g., 'list_recent_documents').
        is_read_only (bool): If True, the operation is considered safe to retry on
                             transient network errors. Defaults to False.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            max_retries = 3
            base_delay = 1

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except ssl.SSLError as e:
                    if is_read_only and attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            f"SSL error in {operation} on attempt {attempt + 1}: {e}. Retrying in {delay} seconds..."
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error(f"SSL error in {operation} on final attempt: {e}. Raising exception.")
                        raise TransientNetworkError(
                            f"A transient SSL error occurred in '{operation}'. "
                            "This is likely a temporary network issue. Please try again shortly."
                        ) from e
                except HttpError as error:
                    logger.error(f"API error in {operation}: {error}", exc_info=True)
                    raise _error_from_http_error(operation, error) from error
                except DailyWriteError:
                    raise
                except Exception as e:
                    message = f"An unexpected error occurred in {operation}: {e}"
                    logger.exception(message)
                    raise UpstreamError(message) from e

        return wrapper

    return decorator
