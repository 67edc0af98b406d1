"""Capability probe endpoint handlers."""

import logging

from fastapi import APIRouter

from scribe.api.deps import CapabilityDep
from scribe.core.capability import ensure_available
from scribe.models.response import CapabilityStatus, StrictCapabilityResponse
from scribe.utils.errors import CapabilityUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/check-capabilities", response_model=CapabilityStatus)
async def check_capabilities(capability: CapabilityDep) -> CapabilityStatus:
    """Report whether generation is available and which limits apply.

    Always answers 200; availability is in the body.
    """
    status = capability.probe()
    logger.debug(f"Capability probe: available={status.available}")
    return status


@router.get("/ai-capabilities", response_model=StrictCapabilityResponse)
async def ai_capabilities(capability: CapabilityDep) -> StrictCapabilityResponse:
    """Report capability details, failing with 500 when unavailable."""
    try:
        status = ensure_available(capability)
    except CapabilityUnavailable as e:
        raise CapabilityUnavailable(e.message, status_code=500) from e

    return StrictCapabilityResponse(**status.model_dump())
