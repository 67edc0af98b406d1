"""Error taxonomy and error-handling helpers."""

from scribe.utils.errors import (
    CapabilityUnavailable,
    ErrorCode,
    GenerationFailure,
    InvalidRequest,
    ScribeError,
    SessionStateError,
)

__all__ = [
    "CapabilityUnavailable",
    "ErrorCode",
    "GenerationFailure",
    "InvalidRequest",
    "ScribeError",
    "SessionStateError",
]
