"""Offline capability that echoes the prompt, for local development and demos."""

import asyncio
import re
from collections.abc import AsyncIterator

from scribe.config import Settings
from scribe.core.capability import build_limits
from scribe.core.session import SessionParams
from scribe.models.response import CapabilityStatus

ECHO_PREFIX = "[ECHO RESPONSE]\n"

_TOKEN_RE = re.compile(r"\S+\s*")


class EchoSession:
    def __init__(self, params: SessionParams):
        self.params = params
        self.destroyed = False

    def _reply(self, prompt: str) -> str:
        # Roughly honour the output budget, counting words as units
        words = _TOKEN_RE.findall(prompt)[: self.params.max_output_units]
        return ECHO_PREFIX + "".join(words)

    async def generate(self, prompt: str) -> str:
        return self._reply(prompt)

    async def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        for token in _TOKEN_RE.findall(self._reply(prompt)):
            await asyncio.sleep(0)
            yield token

    def destroy(self) -> None:
        self.destroyed = True


class EchoCapability:
    name = "echo"

    def __init__(self, settings: Settings):
        self.settings = settings

    def probe(self) -> CapabilityStatus:
        return CapabilityStatus(
            available=self.settings.capability.enabled,
            limits=build_limits(self.settings.generation),
            provider=self.name,
            reason=None if self.settings.capability.enabled else "Generation capability is disabled",
        )

    async def create_session(self, params: SessionParams) -> EchoSession:
        return EchoSession(params)
