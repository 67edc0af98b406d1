"""Request ID middleware for request tracing."""

import re
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

# Accept client-supplied ids that are safe to echo in headers and logs
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{8,128}")


def is_valid_request_id(value: str | None) -> bool:
    """Check if a client-supplied request ID can be reused."""
    return bool(value) and _REQUEST_ID_RE.fullmatch(value) is not None


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request and response.

    Reuses a well-formed X-Request-ID header, otherwise generates a UUID4,
    stores it in ``request.state.request_id`` and echoes it on the response.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)

        if not is_valid_request_id(request_id):
            request_id = generate_request_id()

        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        return response
