"""Lifecycle management for generation sessions.

A session is created immediately before use, serves exactly one generation
call, and is destroyed on every exit path. Nothing pools or shares sessions
between requests.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from scribe.core.resolver import ResolvedConfig
from scribe.utils.errors import (
    CapabilityUnavailable,
    ErrorCode,
    GenerationFailure,
    ScribeError,
    SessionStateError,
    classify_exception,
    get_user_message,
)

logger = logging.getLogger(__name__)


def _generation_failure(exc: Exception) -> GenerationFailure:
    """Wrap a backend exception, keeping a specific message where one applies."""
    code = classify_exception(exc)
    if code in (ErrorCode.INTERNAL_ERROR, ErrorCode.VALIDATION_ERROR):
        code = ErrorCode.GENERATION_FAILED
    return GenerationFailure(get_user_message(code))


@dataclass(frozen=True)
class SessionParams:
    """Sampling parameters a session is created with."""

    temperature: float
    sampling_breadth: int
    max_output_units: int

    @classmethod
    def from_config(cls, config: ResolvedConfig) -> "SessionParams":
        return cls(
            temperature=config.temperature,
            sampling_breadth=config.sampling_breadth,
            max_output_units=config.max_output_units,
        )


@runtime_checkable
class Session(Protocol):
    """Live handle on a generation backend."""

    async def generate(self, prompt: str) -> str: ...

    def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield successive increments of the answer (not cumulative text)."""
        ...

    def destroy(self) -> None: ...


class SessionState(str, Enum):
    CREATED = "created"
    GENERATING = "generating"
    DESTROYED = "destroyed"


class ManagedSession:
    """Wraps a backend session and enforces its lifecycle.

    - at most one generation call
    - no generation after destroy
    - the backend's destroy() runs exactly once
    """

    def __init__(self, session: Session, params: SessionParams, session_id: str | None = None):
        self._session = session
        self.params = params
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.state = SessionState.CREATED
        self.chunks_emitted = 0

    def _begin(self) -> None:
        if self.state is SessionState.DESTROYED:
            raise SessionStateError("Session already destroyed")
        if self.state is SessionState.GENERATING:
            raise SessionStateError("Session already used for a generation")
        self.state = SessionState.GENERATING

    async def generate(self, prompt: str) -> str:
        """Run one blocking generation and return the trimmed text.

        Raises:
            GenerationFailure: If the backend raises.
            SessionStateError: If the session was already used or destroyed.
        """
        self._begin()
        try:
            text = await self._session.generate(prompt)
        except ScribeError:
            raise
        except Exception as e:
            raise _generation_failure(e) from e

        return (text or "").strip()

    async def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield text increments from the backend.

        Empty increments are skipped; the rest are passed through untouched so
        that concatenating them reproduces the full answer.

        Raises:
            GenerationFailure: If the backend raises mid-stream.
            SessionStateError: If the session was already used or destroyed.
        """
        self._begin()
        stream = self._session.generate_stream(prompt)
        try:
            async for chunk in stream:
                if self.state is SessionState.DESTROYED:
                    break
                if not chunk:
                    continue
                self.chunks_emitted += 1
                yield chunk
        except ScribeError:
            raise
        except Exception as e:
            raise _generation_failure(e) from e
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    def destroy(self) -> None:
        """Release the backend handle. Safe to call more than once."""
        if self.state is SessionState.DESTROYED:
            return
        self.state = SessionState.DESTROYED
        try:
            self._session.destroy()
        except Exception:
            logger.exception(
                "Failed to destroy generation session",
                extra={"session_id": self.session_id},
            )


@asynccontextmanager
async def open_session(capability, config: ResolvedConfig) -> AsyncIterator[ManagedSession]:
    """Create a session for one request and destroy it on exit.

    Args:
        capability: The generation capability to create the session on.
        config: Resolved parameters for the session.

    Yields:
        The managed session.

    Raises:
        CapabilityUnavailable: If the capability cannot create a session.
    """
    params = SessionParams.from_config(config)

    try:
        backend_session = await capability.create_session(params)
    except ScribeError:
        raise
    except Exception as e:
        logger.error(
            f"Session creation failed: {type(e).__name__}: {e}",
            extra={"error_type": type(e).__name__},
        )
        raise CapabilityUnavailable(
            "Could not start a generation session", status_code=500
        ) from e

    session = ManagedSession(backend_session, params)
    logger.debug(
        "Session created",
        extra={"session_id": session.session_id, "template_key": config.template_key},
    )

    try:
        yield session
    finally:
        session.destroy()
        logger.debug(
            "Session destroyed",
            extra={"session_id": session.session_id, "chunks": session.chunks_emitted},
        )
