"""Generation capability interface, probe helpers and provider selection."""

import logging
from typing import Protocol, runtime_checkable

from scribe.config import GenerationSettings, Settings
from scribe.core.session import Session, SessionParams
from scribe.models.response import CapabilityLimits, CapabilityStatus
from scribe.utils.errors import CapabilityUnavailable

logger = logging.getLogger(__name__)


@runtime_checkable
class GenerationCapability(Protocol):
    """Backend able to open generation sessions."""

    name: str

    def probe(self) -> CapabilityStatus:
        """Report availability and limits without touching the network."""
        ...

    async def create_session(self, params: SessionParams) -> Session: ...


def build_limits(generation: GenerationSettings) -> CapabilityLimits:
    return CapabilityLimits(
        max_context_chars=generation.max_context_chars,
        max_output_units=generation.max_output_units,
        default_temperature=generation.default_temperature,
        default_sampling_breadth=generation.default_sampling_breadth,
        max_sampling_breadth=generation.max_sampling_breadth,
    )


def ensure_available(capability: GenerationCapability) -> CapabilityStatus:
    """Probe the capability and fail fast when it is unavailable.

    Raises:
        CapabilityUnavailable: If the probe reports ``available=False``.
    """
    status = capability.probe()
    if not status.available:
        logger.warning(
            f"Generation capability unavailable: {status.reason or 'no reason given'}"
        )
        raise CapabilityUnavailable(status.reason)
    return status


def build_capability(settings: Settings) -> GenerationCapability:
    """Create the capability selected by ``settings.capability.provider``."""
    provider = settings.capability.provider

    if provider == "echo":
        from scribe.core.echo import EchoCapability

        return EchoCapability(settings)

    from scribe.core.agent import OpenAICapability

    return OpenAICapability(settings)
