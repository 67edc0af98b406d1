"""Response data models."""

from pydantic import BaseModel, Field


class GenerationResponse(BaseModel):
    """Result of a one-shot generation."""

    success: bool = True
    result: str


class CapabilityLimits(BaseModel):
    """Limits that apply to the generation capability."""

    max_context_chars: int
    max_output_units: int
    default_temperature: float
    default_sampling_breadth: int
    max_sampling_breadth: int


class CapabilityStatus(BaseModel):
    """Probe result: whether generation can be attempted right now."""

    available: bool
    limits: CapabilityLimits
    provider: str | None = None
    reason: str | None = Field(
        default=None,
        description="Why the capability is unavailable, when it is",
    )


class StrictCapabilityResponse(CapabilityStatus):
    """Probe result wrapped in the success envelope."""

    success: bool = True


class OptionsResponse(BaseModel):
    """Closed sets of style words a client may offer."""

    formats: list[str]
    tones: list[str]
    lengths: list[str]


class UploadResponse(BaseModel):
    """Text extracted from an uploaded document."""

    text: str
    textLength: int
    exceedsLimit: bool


class TextCheckResponse(BaseModel):
    """Length check for a block of text."""

    textLength: int
    exceedsLimit: bool
