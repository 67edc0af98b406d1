"""Pydantic AI backed generation capability for OpenAI-compatible APIs."""

import logging
from collections.abc import AsyncIterator

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from scribe.config import Settings
from scribe.core.capability import build_limits
from scribe.core.session import SessionParams
from scribe.models.response import CapabilityStatus
from scribe.utils.errors import SessionStateError

logger = logging.getLogger(__name__)


class AgentSession:
    """One generation session backed by a dedicated Pydantic AI agent.

    The agent is built for this session only, carrying its sampling settings,
    and dropped on destroy().
    """

    def __init__(self, model: Model | str, model_settings: ModelSettings):
        self.model_settings = model_settings
        self.agent: Agent | None = Agent(model, model_settings=model_settings)

    def _require_agent(self) -> Agent:
        if self.agent is None:
            raise SessionStateError("Session already destroyed")
        return self.agent

    async def generate(self, prompt: str) -> str:
        """Run the agent and return the complete response text."""
        agent = self._require_agent()
        try:
            result = await agent.run(prompt)
            return result.output

        except Exception:
            logger.exception("Error during agent run")
            raise

    async def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        """Stream text increments as the model produces them."""
        agent = self._require_agent()
        try:
            async with agent.run_stream(prompt) as response:
                async for text in response.stream_text(delta=True):
                    yield text

        except Exception:
            logger.exception("Error during agent streaming")
            raise

    def destroy(self) -> None:
        self.agent = None


class OpenAICapability:
    """Generation capability over the OpenAI chat completions API.

    Provider and model objects are shared across sessions (they only hold the
    HTTP client); every session gets its own agent.
    """

    name = "openai"

    def __init__(self, settings: Settings, model: Model | None = None):
        """Initialize the capability.

        Args:
            settings: Application settings.
            model: Optional pre-built model, used instead of the OpenAI model
                   configured in settings.
        """
        self.settings = settings
        self._model = model

    @property
    def model(self) -> Model:
        if self._model is None:
            provider = OpenAIProvider(
                base_url=self.settings.openai.base_url,
                api_key=self.settings.openai.api_key,
            )
            self._model = OpenAIChatModel(self.settings.openai.model, provider=provider)
        return self._model

    def probe(self) -> CapabilityStatus:
        limits = build_limits(self.settings.generation)

        if not self.settings.capability.enabled:
            return CapabilityStatus(
                available=False,
                limits=limits,
                provider=self.name,
                reason="Generation capability is disabled",
            )

        if self._model is None and not self.settings.openai.api_key:
            return CapabilityStatus(
                available=False,
                limits=limits,
                provider=self.name,
                reason="AI Language Model not available",
            )

        return CapabilityStatus(available=True, limits=limits, provider=self.name)

    def build_model_settings(self, params: SessionParams) -> ModelSettings:
        """Translate session parameters into Pydantic AI model settings."""
        model_settings = ModelSettings(
            temperature=params.temperature,
            max_tokens=params.max_output_units,
        )
        if self.settings.openai.send_top_k:
            model_settings["extra_body"] = {"top_k": params.sampling_breadth}
        return model_settings

    async def create_session(self, params: SessionParams) -> AgentSession:
        return AgentSession(self.model, self.build_model_settings(params))
