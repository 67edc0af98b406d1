"""Orchestration of one generation request.

Every endpoint family goes through the same three operations:
prepare_generation (probe, resolve, compose), then either generate_once or
generation_events. The capability is always passed in explicitly.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass

from scribe.config import GenerationSettings
from scribe.core.capability import GenerationCapability, ensure_available
from scribe.core.prompts import compose
from scribe.core.resolver import ResolvedConfig, resolve
from scribe.core.session import open_session
from scribe.models.events import ChunkEvent
from scribe.models.request import GenerationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedGeneration:
    """A request that passed validation, with its config and final prompt."""

    request: GenerationRequest
    config: ResolvedConfig
    prompt: str


def prepare_generation(
    capability: GenerationCapability,
    request: GenerationRequest,
    generation: GenerationSettings | None = None,
) -> PreparedGeneration:
    """Probe the capability, resolve style options and compose the prompt.

    Nothing here acquires a session, so every failure is reported before any
    resource exists.

    Raises:
        CapabilityUnavailable: If the probe reports the capability unavailable.
        InvalidRequest: If the prompt is blank.
    """
    ensure_available(capability)

    generation = generation or GenerationSettings()
    config = resolve(
        request.style,
        request.temperature,
        request.sampling_breadth,
        default_temperature=generation.default_temperature,
        default_sampling_breadth=generation.default_sampling_breadth,
        max_sampling_breadth=generation.max_sampling_breadth,
    )
    prompt = compose(request, config)

    logger.debug(
        f"Prepared {request.mode.value} generation: template={config.template_key}, "
        f"tone={config.tone}, length={config.length}, "
        f"context={'yes' if request.has_context else 'no'}"
    )

    return PreparedGeneration(request=request, config=config, prompt=prompt)


async def generate_once(
    capability: GenerationCapability, prepared: PreparedGeneration
) -> str:
    """Generate the complete answer in a single call.

    Raises:
        CapabilityUnavailable: If no session could be created.
        GenerationFailure: If the capability fails during generation.
    """
    async with open_session(capability, prepared.config) as session:
        return await session.generate(prepared.prompt)


async def generation_events(
    capability: GenerationCapability, prepared: PreparedGeneration
) -> AsyncIterator[ChunkEvent]:
    """Yield a chunk event per text increment.

    The session is released before this generator finishes or raises, so
    the transport's terminal event always follows the release. Closing the
    generator early closes the model stream and releases the session too.

    Raises:
        CapabilityUnavailable: If no session could be created.
        GenerationFailure: If the capability fails mid-stream.
    """
    async with open_session(capability, prepared.config) as session:
        async with aclosing(session.generate_stream(prepared.prompt)) as chunks:
            async for chunk in chunks:
                yield ChunkEvent(chunk=chunk)
