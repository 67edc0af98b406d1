"""Error taxonomy and helpers for consistent error responses."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel

from scribe.models.events import ErrorEvent

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Request errors
    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNSUPPORTED_FILE = "UNSUPPORTED_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # Capability errors
    CAPABILITY_UNAVAILABLE = "CAPABILITY_UNAVAILABLE"
    GENERATION_FAILED = "GENERATION_FAILED"
    RATE_LIMITED = "RATE_LIMITED"
    PROVIDER_ERROR = "PROVIDER_ERROR"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"


class ErrorResponse(BaseModel):
    """HTTP error response body."""

    success: bool = False
    error: str
    code: ErrorCode | None = None
    request_id: str | None = None


# User-friendly error messages by error code
USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_REQUEST: "Invalid request",
    ErrorCode.VALIDATION_ERROR: "Request validation failed",
    ErrorCode.UNSUPPORTED_FILE: "Unsupported file type",
    ErrorCode.FILE_TOO_LARGE: "Uploaded file is too large",
    ErrorCode.CAPABILITY_UNAVAILABLE: "AI Language Model not available",
    ErrorCode.GENERATION_FAILED: "Text generation failed. Please try again.",
    ErrorCode.RATE_LIMITED: (
        "The service is experiencing high demand. Please try again in a moment."
    ),
    ErrorCode.PROVIDER_ERROR: "The AI provider returned an error. Please try again.",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
    ErrorCode.SERVICE_UNAVAILABLE: (
        "The service is temporarily unavailable. Please try again later."
    ),
    ErrorCode.TIMEOUT: "The request timed out. Please try again.",
}

DEFAULT_USER_MESSAGE = "An unexpected error occurred"

# Maximum length for error details
MAX_ERROR_LENGTH = 500


class ScribeError(Exception):
    """Base class for errors surfaced to clients.

    Attributes:
        code: Error code reported to the client.
        status_code: HTTP status used when the error ends a JSON request.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        self.message = message or get_user_message(self.code)
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidRequest(ScribeError):
    """Missing or blank prompt, missing text, malformed upload."""

    code = ErrorCode.INVALID_REQUEST
    status_code = 400


class UnsupportedFile(InvalidRequest):
    code = ErrorCode.UNSUPPORTED_FILE


class FileTooLarge(InvalidRequest):
    code = ErrorCode.FILE_TOO_LARGE
    status_code = 413


class CapabilityUnavailable(ScribeError):
    """The generation capability cannot be reached.

    Reported with 400 when the probe says unavailable, 500 when session
    creation itself fails.
    """

    code = ErrorCode.CAPABILITY_UNAVAILABLE
    status_code = 400


class GenerationFailure(ScribeError):
    """The capability raised mid-call or mid-stream."""

    code = ErrorCode.GENERATION_FAILED
    status_code = 500


class SessionStateError(ScribeError):
    """A session was used outside its lifecycle (reuse, use after destroy)."""

    code = ErrorCode.INTERNAL_ERROR
    status_code = 500


def get_user_message(code: ErrorCode | None, default: str | None = None) -> str:
    """Get user-appropriate error message for an error code.

    Args:
        code: The error code.
        default: Default message if code not found.

    Returns:
        User-friendly error message.
    """
    if code is None:
        return default or DEFAULT_USER_MESSAGE

    return USER_MESSAGES.get(code, default or DEFAULT_USER_MESSAGE)


def truncate_error(error: str, max_length: int = MAX_ERROR_LENGTH) -> str:
    """Truncate error message if too long."""
    if len(error) <= max_length:
        return error

    return error[: max_length - 3] + "..."


def create_error_response(
    code: ErrorCode,
    detail: str | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Create a standardized error response.

    Args:
        code: The error code.
        detail: Optional custom message.
        request_id: Optional request ID.

    Returns:
        ErrorResponse model.
    """
    message = detail if detail else get_user_message(code)
    return ErrorResponse(
        error=truncate_error(message),
        code=code,
        request_id=request_id,
    )


def create_stream_error_event(
    code: ErrorCode | None = None,
    message: str | None = None,
) -> ErrorEvent:
    """Create the terminal error event for a streaming response.

    Args:
        code: Optional error code.
        message: Optional custom message (takes precedence over code).

    Returns:
        ErrorEvent model for SSE streaming.
    """
    if message:
        error_message = truncate_error(message)
    else:
        error_message = get_user_message(code)

    return ErrorEvent(error=error_message)


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception to an error code.

    Args:
        exc: The exception to classify.

    Returns:
        Appropriate error code.
    """
    # Import here to avoid circular imports
    import httpx
    from pydantic import ValidationError

    if isinstance(exc, ScribeError):
        return exc.code

    if isinstance(exc, ValidationError):
        return ErrorCode.VALIDATION_ERROR

    # HTTP errors from upstream
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        if status_code == 429:
            return ErrorCode.RATE_LIMITED
        elif status_code >= 500:
            return ErrorCode.SERVICE_UNAVAILABLE
        else:
            return ErrorCode.PROVIDER_ERROR

    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCode.TIMEOUT

    if isinstance(exc, (httpx.ConnectError, ConnectionError)):
        return ErrorCode.SERVICE_UNAVAILABLE

    return ErrorCode.INTERNAL_ERROR


def to_client_message(exc: Exception) -> str:
    """Message safe to show a client for an exception.

    Errors raised by this service carry their own message; anything else is
    reduced to the generic message for its code.
    """
    if isinstance(exc, ScribeError):
        return truncate_error(exc.message)
    return get_user_message(classify_exception(exc))


def log_error(
    exc: Exception,
    code: ErrorCode | None = None,
    request_id: str | None = None,
    **context: Any,
) -> None:
    """Log an error with context.

    Args:
        exc: The exception that occurred.
        code: Optional pre-classified error code.
        request_id: Optional request ID.
        **context: Additional context to include in log.
    """
    if code is None:
        code = classify_exception(exc)

    log_extra = {
        "error_code": code.value,
        "error_type": type(exc).__name__,
        "request_id": request_id,
        **context,
    }

    # Internal errors get the traceback, expected ones a single line
    if code == ErrorCode.INTERNAL_ERROR:
        logger.exception("Internal error occurred", extra=log_extra)
    else:
        logger.error(f"Request error: {exc}", extra=log_extra)
