"""Error types and error handling utilities."""

import functools
import json
import time
from typing import Any, Callable, Iterator, Optional, TypeVar

import httplib2
from google.auth.exceptions import TransportError
from googleapiclient.errors import HttpError

from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

QUOTA_REASONS = ("quotaExceeded", "dailyLimitExceeded")
RATE_LIMIT_REASONS = ("rateLimitExceeded", "userRateLimitExceeded")
NOT_FOUND_REASONS = ("playlistNotFound", "playlistIdRequired")

# Raised by the HTTP stack when a request never got an answer
NETWORK_ERRORS = (OSError, httplib2.HttpLib2Error, TransportError)


def log_error(error: Exception, context: Optional[str] = None) -> None:
    """Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error("%s: %s", context, str(error))
    else:
        logger.error(str(error))


class PlaysyncError(Exception):
    """Base class for all playsync errors."""

    pass


class ConfigError(PlaysyncError):
    """Configuration file is missing, corrupt, or a rule change is invalid."""

    pass


class DuplicateTargetError(ConfigError):
    """Error raised when a target playlist is already configured."""

    def __init__(self, playlist_id: str):
        self.playlist_id = playlist_id
        super().__init__(f"Playlist {playlist_id} is already configured")


class RuleNotFoundError(ConfigError):
    """Error raised when a target playlist is not configured."""

    def __init__(self, playlist_id: str):
        self.playlist_id = playlist_id
        super().__init__(f"Playlist {playlist_id} is not configured")


class AuthError(PlaysyncError):
    """Error raised when OAuth2 authentication fails."""

    pass


class ValidationError(PlaysyncError):
    """Error raised when a command references an unknown playlist."""

    pass


class ApiError(PlaysyncError):
    """Error returned by the YouTube Data API."""

    def __init__(self, message: str, status: Optional[int] = None, reason: Optional[str] = None):
        """Initialize error.

        Args:
            message: Human readable message
            status: HTTP status code, if any
            reason: API error reason (e.g. "videoNotFound"), if any
        """
        self.status = status
        self.reason = reason
        self.message = message
        super().__init__(message)


class PlaylistNotFoundError(ApiError):
    """Error raised when a playlist is not found."""

    pass


class QuotaExceededError(ApiError):
    """Error raised when the daily API quota is exhausted."""

    pass


class RateLimitError(ApiError):
    """Error raised for transient failures (rate limiting, server errors)."""

    pass


class SyncAborted(PlaysyncError):
    """Error raised when a sync pass stops before processing every rule."""

    def __init__(self, cause: Exception, reports: Optional[list] = None):
        """Initialize error.

        Args:
            cause: The error that stopped the pass
            reports: Reports of the rules processed so far, the last one partial
        """
        self.cause = cause
        self.reports = reports or []
        super().__init__(f"Sync aborted: {cause}")


def parse_http_error(error: HttpError) -> tuple:
    """Extract status, reason and message from an HttpError.

    Args:
        error: The HttpError raised by googleapiclient

    Returns:
        Tuple of (status, reason, message)
    """
    status = getattr(error.resp, "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None

    reason = None
    message = str(error)
    content = error.content
    if isinstance(content, bytes):
        content = content.decode("utf-8", "ignore")
    try:
        data = json.loads(content) if content else {}
    except ValueError:
        data = {}
    if isinstance(data, dict):
        body = data.get("error", {})
        if isinstance(body, dict):
            message = body.get("message") or message
            errors = body.get("errors") or []
            if errors and isinstance(errors[0], dict):
                reason = errors[0].get("reason")
    return status, reason, message


def api_error_from_http(error: HttpError, context: str = "") -> ApiError:
    """Translate an HttpError into the matching ApiError subclass.

    Args:
        error: The HttpError raised by googleapiclient
        context: Optional prefix for the message (e.g. the failing operation)

    Returns:
        ApiError instance (not raised)
    """
    status, reason, message = parse_http_error(error)
    if context:
        message = f"{context}: {message}"

    if reason in QUOTA_REASONS:
        return QuotaExceededError(message, status, reason)
    if reason in NOT_FOUND_REASONS or (status == 404 and reason is None):
        return PlaylistNotFoundError(message, status, reason)
    if reason in RATE_LIMIT_REASONS or status == 429 or (status is not None and status >= 500):
        return RateLimitError(message, status, reason)
    return ApiError(message, status, reason)


def with_retry(
    max_retries: int = 3,
    initial_delay: float = 2.0,
    max_delay: float = 60.0,
    backoff_factor: float = 2.0,
    retryable_exceptions: Optional[tuple] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry the decorated call while it raises one of retryable_exceptions.

    The wait starts at initial_delay and is multiplied by backoff_factor after
    every failed attempt, capped at max_delay. The last error is re-raised once
    max_retries retries have been spent. RateLimitError is retried by default.
    """
    retry_on = retryable_exceptions or (RateLimitError,)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            delays = _backoff_delays(max_retries, initial_delay, max_delay, backoff_factor)
            while True:
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    delay = next(delays, None)
                    if delay is None:
                        logger.error("%s gave up after %d retries: %s", func.__name__, max_retries, e)
                        raise
                    logger.warning("%s failed (%s), retrying in %ss", func.__name__, e, delay)
                    time.sleep(delay)

        return wrapper

    return decorator


def _backoff_delays(retries: int, delay: float, max_delay: float, factor: float) -> Iterator[float]:
    for _ in range(retries):
        yield delay
        delay = min(delay * factor, max_delay)
