"""Generation request data models."""

from enum import Enum
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from scribe.utils.errors import InvalidRequest


def _optional_text(value: Any) -> str | None:
    """Coerce a loosely typed style value to a string.

    Style values are resolved leniently later on, so anything the client
    sends (numbers, booleans) is kept as text rather than rejected here.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return None


def _optional_float(value: Any) -> float | None:
    """Parse a number the way form fields arrive, ignoring garbage."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_int(value: Any) -> int | None:
    number = _optional_float(value)
    if number is None or number != number:  # NaN
        return None
    try:
        return int(number)
    except (OverflowError, ValueError):
        return None


LenientText = Annotated[str | None, BeforeValidator(_optional_text)]
LenientFloat = Annotated[float | None, BeforeValidator(_optional_float)]
LenientInt = Annotated[int | None, BeforeValidator(_optional_int)]


class GenerationMode(str, Enum):
    """How the composer shapes the prompt."""

    WRITE = "write"
    PROMPT = "prompt"
    REWRITE = "rewrite"


class StyleOptions(BaseModel):
    """User-chosen style words. Values are resolved against closed sets."""

    model_config = ConfigDict(frozen=True)

    tone: LenientText = None
    format: LenientText = None
    length: LenientText = None


class GenerationRequest(BaseModel):
    """Immutable request value handed to the orchestration core."""

    model_config = ConfigDict(frozen=True)

    prompt_text: str
    source_context: str | None = None
    style: StyleOptions = Field(default_factory=StyleOptions)
    temperature: float | None = None
    sampling_breadth: int | None = None
    mode: GenerationMode = GenerationMode.WRITE

    @property
    def has_context(self) -> bool:
        return bool(self.source_context and self.source_context.strip())


def ensure_prompt(prompt_text: str | None) -> str:
    """Return the prompt if it has content, else raise InvalidRequest."""
    if prompt_text is None or not prompt_text.strip():
        raise InvalidRequest("No prompt provided")
    return prompt_text


class GenerationBody(BaseModel):
    """Request body shared by every one-shot and streaming endpoint.

    Front ends send different field names: the prompt may arrive as
    ``prompt``, ``promptText``, ``text`` or ``userPrompt`` and the source
    document as ``context``, ``sourceContext`` or ``pdfText``.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    prompt: LenientText = Field(
        default=None,
        validation_alias=AliasChoices("prompt", "promptText", "text", "userPrompt"),
    )
    context: LenientText = Field(
        default=None,
        validation_alias=AliasChoices("context", "sourceContext", "pdfText"),
    )
    tone: LenientText = None
    format: LenientText = None
    length: LenientText = None
    temperature: LenientFloat = None
    top_k: LenientInt = Field(
        default=None,
        validation_alias=AliasChoices("topK", "top_k", "samplingBreadth"),
    )

    def to_generation_request(
        self, mode: GenerationMode = GenerationMode.WRITE
    ) -> GenerationRequest:
        """Validate and freeze the body into a GenerationRequest.

        Raises:
            InvalidRequest: If the prompt is missing or blank.
        """
        prompt_text = ensure_prompt(self.prompt)
        # Context is embedded verbatim; only a blank one counts as absent
        context = self.context if self.context and self.context.strip() else None

        return GenerationRequest(
            prompt_text=prompt_text,
            source_context=context,
            style=StyleOptions(tone=self.tone, format=self.format, length=self.length),
            temperature=self.temperature,
            sampling_breadth=self.top_k,
            mode=mode,
        )


class TextCheckBody(BaseModel):
    """Body for the text length check endpoint."""

    text: LenientText = None
