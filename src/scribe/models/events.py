"""Server-Sent Event payloads for streaming generation.

Every stream carries zero or more chunk events followed by exactly one
terminal event, either done or error.
"""

from typing import Literal, Union

from pydantic import BaseModel


class ChunkEvent(BaseModel):
    """Next increment of generated text."""

    chunk: str


class DoneEvent(BaseModel):
    """Generation completed successfully."""

    done: Literal[True] = True


class ErrorEvent(BaseModel):
    """Generation failed; no further events follow."""

    error: str


TerminalEvent = Union[DoneEvent, ErrorEvent]

StreamEvent = Union[ChunkEvent, DoneEvent, ErrorEvent]


def is_terminal(event: StreamEvent) -> bool:
    """Whether the event closes the stream."""
    return isinstance(event, (DoneEvent, ErrorEvent))
