"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scribe import __version__
from scribe.api.routes import api_router
from scribe.config import Settings, get_settings
from scribe.core.capability import GenerationCapability, build_capability
from scribe.middleware.logging import LoggingMiddleware, configure_logging
from scribe.middleware.request_id import RequestIdMiddleware
from scribe.utils.errors import (
    ErrorCode,
    ScribeError,
    create_error_response,
    log_error,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown events."""
    settings: Settings = app.state.settings

    configure_logging(
        level=settings.logging.level,
        format=settings.logging.format,
    )

    capability: GenerationCapability = app.state.capability
    status = capability.probe()

    logger.info(
        "Starting scribe-server",
        extra={
            "version": __version__,
            "host": settings.server.host,
            "port": settings.server.port,
            "provider": capability.name,
            "log_level": settings.logging.level,
        },
    )

    # A missing credential only makes the capability unavailable; the probe
    # endpoints still need to answer
    try:
        settings.validate_required()
    except ValueError as e:
        logger.warning(f"Configuration incomplete: {e}")

    if not status.available:
        logger.warning(f"Generation capability unavailable: {status.reason}")

    logger.info("scribe-server started successfully")

    yield

    logger.info("Shutting down scribe-server")


def create_app(
    settings: Settings | None = None,
    capability: GenerationCapability | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing.
        capability: Optional generation capability; built from settings
                    when omitted.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="scribe-server",
        description="FastAPI backend for document-grounded text generation with SSE streaming",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.capability = capability or build_capability(settings)

    # Middleware order matters - last added = first executed.
    # CORS should be outermost to handle preflight requests.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.server.cors.allowed_methods,
        allow_headers=settings.server.cors.allowed_headers,
    )
    # Request ID runs before logging so access lines carry the id
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an application."""
    app.add_exception_handler(ScribeError, scribe_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


async def scribe_error_handler(request: Request, exc: ScribeError) -> JSONResponse:
    """Handle errors raised deliberately by the service."""
    request_id = getattr(request.state, "request_id", None)
    log_error(exc, request_id=request_id, path=request.url.path)

    body = create_error_response(exc.code, detail=exc.message, request_id=request_id)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies with a 400."""
    request_id = getattr(request.state, "request_id", None)
    body = create_error_response(ErrorCode.VALIDATION_ERROR, request_id=request_id)
    content = body.model_dump(mode="json")
    content["errors"] = jsonable_errors(exc)
    return JSONResponse(status_code=400, content=content)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation error details without the raw input values."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type")}
        for error in exc.errors()
    ]


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors with a generic message."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
        },
    )

    body = create_error_response(ErrorCode.INTERNAL_ERROR, request_id=request_id)
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


# Create the default app instance
app = create_app()
