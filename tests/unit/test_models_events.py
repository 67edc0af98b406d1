"""Tests for SSE event data models."""

import json

import pytest
from pydantic import TypeAdapter, ValidationError

from scribe.models.events import (
    ChunkEvent,
    DoneEvent,
    ErrorEvent,
    StreamEvent,
    is_terminal,
)


class TestChunkEvent:
    """Tests for ChunkEvent model."""

    def test_serialization(self):
        """Test JSON serialization matches the wire format."""
        assert ChunkEvent(chunk="Hello").model_dump() == {"chunk": "Hello"}

    def test_whitespace_preserved(self):
        event = ChunkEvent(chunk="  \n")
        assert json.loads(event.model_dump_json()) == {"chunk": "  \n"}

    def test_chunk_required(self):
        with pytest.raises(ValidationError):
            ChunkEvent()


class TestDoneEvent:
    def test_serialization(self):
        assert DoneEvent().model_dump() == {"done": True}

    def test_done_must_be_true(self):
        with pytest.raises(ValidationError):
            DoneEvent(done=False)


class TestErrorEvent:
    def test_serialization(self):
        event = ErrorEvent(error="Text generation failed. Please try again.")
        assert event.model_dump() == {"error": "Text generation failed. Please try again."}


class TestIsTerminal:
    @pytest.mark.parametrize(
        "event,terminal",
        [
            (ChunkEvent(chunk="x"), False),
            (DoneEvent(), True),
            (ErrorEvent(error="x"), True),
        ],
    )
    def test_terminal_events(self, event, terminal):
        assert is_terminal(event) is terminal


class TestStreamEventUnion:
    """Tests for parsing payloads back into events."""

    @pytest.fixture
    def adapter(self):
        return TypeAdapter(StreamEvent)

    @pytest.mark.parametrize(
        "payload,expected",
        [
            ({"chunk": "a"}, ChunkEvent),
            ({"done": True}, DoneEvent),
            ({"error": "boom"}, ErrorEvent),
        ],
    )
    def test_parses_each_variant(self, adapter, payload, expected):
        assert isinstance(adapter.validate_python(payload), expected)
