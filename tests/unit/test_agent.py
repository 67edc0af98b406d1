"""Tests for the Pydantic AI backed capability."""

import pytest
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.models.test import TestModel

from scribe.config import CapabilitySettings, OpenAISettings, Settings
from scribe.core.agent import AgentSession, OpenAICapability
from scribe.core.session import SessionParams
from scribe.utils.errors import SessionStateError

PARAMS = SessionParams(temperature=0.4, sampling_breadth=16, max_output_units=250)

ANSWER = "The quick brown fox jumps over the lazy dog."


@pytest.fixture
def capability(settings):
    return OpenAICapability(settings, model=TestModel(custom_output_text=ANSWER))


class TestProbe:
    """Tests for OpenAICapability.probe."""

    def test_available_with_key(self, settings):
        status = OpenAICapability(settings).probe()
        assert status.available is True
        assert status.provider == "openai"
        assert status.limits.max_context_chars == 4000

    def test_unavailable_without_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        status = OpenAICapability(Settings()).probe()
        assert status.available is False
        assert status.reason == "AI Language Model not available"

    def test_unavailable_when_disabled(self, settings):
        settings = settings.model_copy(update={"capability": CapabilitySettings(enabled=False)})
        status = OpenAICapability(settings).probe()
        assert status.available is False
        assert "disabled" in status.reason

    def test_injected_model_needs_no_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert OpenAICapability(Settings(), model=TestModel()).probe().available is True


class TestModelConstruction:
    def test_builds_openai_model_lazily(self, settings):
        capability = OpenAICapability(settings)
        assert capability._model is None
        assert isinstance(capability.model, OpenAIChatModel)
        assert capability.model is capability.model

    def test_model_settings(self, settings):
        model_settings = OpenAICapability(settings).build_model_settings(PARAMS)
        assert model_settings["temperature"] == 0.4
        assert model_settings["max_tokens"] == 250
        assert "extra_body" not in model_settings

    def test_top_k_sent_when_enabled(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        settings = Settings(openai=OpenAISettings(send_top_k=True))
        model_settings = OpenAICapability(settings).build_model_settings(PARAMS)
        assert model_settings["extra_body"] == {"top_k": 16}


class TestAgentSession:
    """Tests for AgentSession against the Pydantic AI test model."""

    @pytest.mark.asyncio
    async def test_generate(self, capability):
        session = await capability.create_session(PARAMS)
        assert await session.generate("Tell me about foxes") == ANSWER

    @pytest.mark.asyncio
    async def test_generate_stream_yields_increments(self, capability):
        """Test streamed increments concatenate to the full answer."""
        session = await capability.create_session(PARAMS)
        chunks = [chunk async for chunk in session.generate_stream("Tell me about foxes")]

        assert len(chunks) >= 1
        assert "".join(chunks) == ANSWER

    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, capability):
        first = await capability.create_session(PARAMS)
        second = await capability.create_session(PARAMS)
        assert first.agent is not second.agent

    @pytest.mark.asyncio
    async def test_destroy_releases_agent(self, capability):
        session = await capability.create_session(PARAMS)
        session.destroy()

        assert session.agent is None
        with pytest.raises(SessionStateError):
            await session.generate("too late")

    def test_session_carries_settings(self):
        session = AgentSession(TestModel(), {"temperature": 0.1})
        assert session.model_settings == {"temperature": 0.1}
