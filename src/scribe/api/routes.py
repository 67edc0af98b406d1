"""API route registration."""

from fastapi import APIRouter

from scribe.api.handlers.capabilities import router as capabilities_router
from scribe.api.handlers.documents import router as documents_router
from scribe.api.handlers.generation import router as generation_router
from scribe.api.handlers.health import router as health_router
from scribe.api.handlers.options import router as options_router

# Main API router that aggregates all endpoint routers
api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(capabilities_router, tags=["capabilities"])
api_router.include_router(options_router, tags=["options"])
api_router.include_router(documents_router, tags=["documents"])
api_router.include_router(generation_router, tags=["generation"])
