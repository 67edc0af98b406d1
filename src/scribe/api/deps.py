"""Dependency injection for API handlers."""

from typing import Annotated

from fastapi import Depends, Request

from scribe.config import Settings, get_settings
from scribe.core.capability import GenerationCapability, build_capability


def get_settings_dependency(request: Request) -> Settings:
    """Get application settings.

    Prefers the settings the app was created with, then the cached
    global settings. Tests replace it via dependency override.
    """
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]


def get_capability(request: Request, settings: SettingsDep) -> GenerationCapability:
    """Get the generation capability for this request.

    The application builds one capability at startup and keeps it on
    ``app.state``; routers mounted without it fall back to building one
    from settings. Tests override this dependency with a fake.
    """
    capability = getattr(request.app.state, "capability", None)
    if capability is None:
        capability = build_capability(settings)
        request.app.state.capability = capability
    return capability


CapabilityDep = Annotated[GenerationCapability, Depends(get_capability)]


def get_request_id(request: Request) -> str | None:
    """Extract request ID from request state.

    The request ID is set by the request ID middleware.
    """
    return getattr(request.state, "request_id", None)


RequestIdDep = Annotated[str | None, Depends(get_request_id)]
