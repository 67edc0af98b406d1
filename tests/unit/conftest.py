"""Shared fixtures: a scriptable fake generation capability."""

import pytest

from scribe.config import CapabilitySettings, Settings
from scribe.models.response import CapabilityLimits, CapabilityStatus


class FakeSession:
    """Backend session that records how it is used."""

    def __init__(
        self,
        params,
        chunks=("Hello", ", ", "world!"),
        result="  Generated text  ",
        fail_after=None,
        generate_error=None,
    ):
        self.params = params
        self.chunks = list(chunks)
        self.result = result
        self.fail_after = fail_after
        self.generate_error = generate_error
        self.prompts: list[str] = []
        self.pulled = 0
        self.destroy_calls = 0
        self.stream_closed = False

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.generate_error is not None:
            raise self.generate_error
        return self.result

    async def generate_stream(self, prompt: str):
        self.prompts.append(prompt)
        try:
            for index, chunk in enumerate(self.chunks):
                if self.fail_after is not None and index == self.fail_after:
                    raise RuntimeError("backend exploded")
                self.pulled += 1
                yield chunk
        finally:
            self.stream_closed = True

    def destroy(self) -> None:
        self.destroy_calls += 1


class FakeCapability:
    """Capability whose availability and sessions are scripted per test."""

    name = "fake"

    def __init__(self, available=True, create_error=None, **session_kwargs):
        self.available = available
        self.create_error = create_error
        self.session_kwargs = session_kwargs
        self.sessions: list[FakeSession] = []
        self.probe_calls = 0

    def probe(self) -> CapabilityStatus:
        self.probe_calls += 1
        return CapabilityStatus(
            available=self.available,
            limits=CapabilityLimits(
                max_context_chars=4000,
                max_output_units=1000,
                default_temperature=0.7,
                default_sampling_breadth=40,
                max_sampling_breadth=128,
            ),
            provider=self.name,
            reason=None if self.available else "AI Language Model not available",
        )

    async def create_session(self, params) -> FakeSession:
        if self.create_error is not None:
            raise self.create_error
        session = FakeSession(params, **self.session_kwargs)
        self.sessions.append(session)
        return session


@pytest.fixture
def fake_capability():
    return FakeCapability()


@pytest.fixture
def settings(monkeypatch):
    """Settings with a dummy key so nothing depends on the environment."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    return Settings(capability=CapabilitySettings(provider="openai"))


def parse_sse(body: str) -> list:
    """Split an SSE body into decoded JSON payloads."""
    import json

    events = []
    for block in body.split("\n\n"):
        block = block.strip()
        if block.startswith("data: "):
            events.append(json.loads(block[len("data: "):]))
    return events
