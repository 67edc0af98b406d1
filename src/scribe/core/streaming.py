"""Server-Sent Events transport for streamed generation.

Frames a lazy sequence of stream events as ``data: {json}\\n\\n`` messages,
guarantees exactly one terminal event per stream and stops pulling from the
source as soon as the client goes away.
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

from fastapi import Request
from fastapi.responses import StreamingResponse

from scribe.models.events import DoneEvent, StreamEvent, is_terminal
from scribe.utils.errors import create_stream_error_event, log_error, to_client_message

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def encode_sse_event(data: dict[str, Any] | str) -> str:
    """Encode data as a Server-Sent Event.

    Args:
        data: Dictionary to encode as JSON, or pre-encoded JSON string.

    Returns:
        SSE-formatted string with data: prefix and blank line terminator.
    """
    if isinstance(data, str):
        json_data = data
    else:
        json_data = json.dumps(data, ensure_ascii=False)

    return f"data: {json_data}\n\n"


def encode_stream_event(event: StreamEvent) -> str:
    """Encode a stream event model as an SSE event."""
    return encode_sse_event(event.model_dump())


async def _client_gone(request: Request | None) -> bool:
    if request is None:
        return False
    return await request.is_disconnected()


async def stream_sse(
    events: AsyncIterator[StreamEvent],
    request: Request | None = None,
    request_id: str | None = None,
) -> AsyncIterator[str]:
    """Frame stream events as SSE strings, ending with one terminal event.

    A terminal event found in the source ends the stream. Otherwise a done
    event follows normal exhaustion and an error event follows any exception
    from the source. Events already sent are never retracted.

    After each event the client connection is checked; once it is gone the
    source is closed without pulling another item and nothing more is sent.

    Args:
        events: Async generator of stream events.
        request: Optional request used for disconnect detection.
        request_id: Optional request ID for error logs.

    Yields:
        SSE-formatted strings.
    """
    try:
        async with aclosing(events) as source:
            async for event in source:
                yield encode_stream_event(event)

                if is_terminal(event):
                    return

                if await _client_gone(request):
                    logger.info("Client disconnected, terminating stream")
                    return

    except Exception as e:
        log_error(e, request_id=request_id, component="streaming")
        yield encode_stream_event(create_stream_error_event(message=to_client_message(e)))
        return

    yield encode_stream_event(DoneEvent())


def create_streaming_response(
    event_generator: AsyncIterator[str],
    request: Request | None = None,
) -> StreamingResponse:
    """Create a FastAPI StreamingResponse for SSE.

    Args:
        event_generator: Async iterator yielding SSE-encoded strings.
        request: Optional request to extract request ID for headers.

    Returns:
        StreamingResponse with event-stream headers.
    """
    headers = dict(SSE_HEADERS)

    if request is not None:
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            headers["X-Request-ID"] = request_id

    return StreamingResponse(
        event_generator,
        media_type="text/event-stream",
        headers=headers,
    )
