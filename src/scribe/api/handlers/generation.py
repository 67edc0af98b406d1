"""One-shot and streaming generation endpoint handlers.

Each endpoint family maps onto the same orchestration core; the only
difference between them is the composition mode.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from scribe.api.deps import CapabilityDep, RequestIdDep, SettingsDep
from scribe.config import Settings
from scribe.core.capability import GenerationCapability
from scribe.core.orchestrator import (
    PreparedGeneration,
    generate_once,
    generation_events,
    prepare_generation,
)
from scribe.core.streaming import create_streaming_response, stream_sse
from scribe.models.request import GenerationBody, GenerationMode
from scribe.models.response import GenerationResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _prepare(
    body: GenerationBody,
    mode: GenerationMode,
    capability: GenerationCapability,
    settings: Settings,
) -> PreparedGeneration:
    """Validate the body and prepare it; raises before any session exists."""
    generation_request = body.to_generation_request(mode)
    prepared = prepare_generation(capability, generation_request, settings.generation)

    logger.info(
        f"Generation request: mode={mode.value}, "
        f"template={prepared.config.template_key}, "
        f"length={prepared.config.length}, "
        f"context_chars={len(generation_request.source_context or '')}"
    )
    return prepared


async def _respond_once(
    body: GenerationBody,
    mode: GenerationMode,
    capability: GenerationCapability,
    settings: Settings,
) -> GenerationResponse:
    prepared = _prepare(body, mode, capability, settings)
    result = await generate_once(capability, prepared)
    return GenerationResponse(result=result)


def _respond_stream(
    body: GenerationBody,
    mode: GenerationMode,
    request: Request,
    capability: GenerationCapability,
    settings: Settings,
    request_id: str | None,
) -> StreamingResponse:
    # Validation and probe failures surface as JSON before stream headers
    prepared = _prepare(body, mode, capability, settings)

    events = generation_events(capability, prepared)
    return create_streaming_response(
        stream_sse(events, request=request, request_id=request_id),
        request,
    )


@router.post("/generate-content", response_model=GenerationResponse)
async def generate_content(
    body: GenerationBody, capability: CapabilityDep, settings: SettingsDep
) -> GenerationResponse:
    """Generate format-specific content from a source document."""
    return await _respond_once(body, GenerationMode.WRITE, capability, settings)


@router.post("/write", response_model=GenerationResponse)
async def write(
    body: GenerationBody, capability: CapabilityDep, settings: SettingsDep
) -> GenerationResponse:
    """Write new text from a prompt in the requested tone, format and length."""
    return await _respond_once(body, GenerationMode.WRITE, capability, settings)


@router.post("/rewrite", response_model=GenerationResponse)
async def rewrite(
    body: GenerationBody, capability: CapabilityDep, settings: SettingsDep
) -> GenerationResponse:
    """Rewrite the submitted text in the requested tone and length."""
    return await _respond_once(body, GenerationMode.REWRITE, capability, settings)


@router.post("/prompt", response_model=GenerationResponse)
async def prompt(
    body: GenerationBody, capability: CapabilityDep, settings: SettingsDep
) -> GenerationResponse:
    """Answer a free-form question, optionally about a source document."""
    return await _respond_once(body, GenerationMode.PROMPT, capability, settings)


@router.post("/generate-content-stream")
async def generate_content_stream(
    body: GenerationBody,
    request: Request,
    capability: CapabilityDep,
    settings: SettingsDep,
    request_id: RequestIdDep,
) -> StreamingResponse:
    """Streaming variant of /generate-content."""
    return _respond_stream(
        body, GenerationMode.WRITE, request, capability, settings, request_id
    )


@router.post("/write-stream")
async def write_stream(
    body: GenerationBody,
    request: Request,
    capability: CapabilityDep,
    settings: SettingsDep,
    request_id: RequestIdDep,
) -> StreamingResponse:
    """Streaming variant of /write."""
    return _respond_stream(
        body, GenerationMode.WRITE, request, capability, settings, request_id
    )


@router.post("/prompt-stream")
async def prompt_stream(
    body: GenerationBody,
    request: Request,
    capability: CapabilityDep,
    settings: SettingsDep,
    request_id: RequestIdDep,
) -> StreamingResponse:
    """Streaming variant of /prompt.

    Emits ``{"chunk": ...}`` events, then ``{"done": true}`` or
    ``{"error": ...}``.
    """
    return _respond_stream(
        body, GenerationMode.PROMPT, request, capability, settings, request_id
    )
