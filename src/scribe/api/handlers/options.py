"""Style option listing endpoint handlers."""

from fastapi import APIRouter

from scribe.core.resolver import GENERATION_FORMATS, LENGTH_BUDGETS, TONES, WRITING_FORMATS
from scribe.models.response import OptionsResponse

router = APIRouter()


@router.get("/generation-options", response_model=OptionsResponse)
async def generation_options() -> OptionsResponse:
    """List formats for content derived from a source document."""
    return OptionsResponse(
        formats=list(GENERATION_FORMATS),
        tones=list(TONES),
        lengths=list(LENGTH_BUDGETS),
    )


@router.get("/writing-options", response_model=OptionsResponse)
async def writing_options() -> OptionsResponse:
    """List formats for free writing."""
    return OptionsResponse(
        formats=list(WRITING_FORMATS),
        tones=list(TONES),
        lengths=list(LENGTH_BUDGETS),
    )
