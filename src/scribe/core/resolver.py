"""Resolution of user-chosen style words into generation parameters.

Resolution is total: unknown or malformed values fall back to defaults
instead of failing the request.
"""

from dataclasses import dataclass
from types import MappingProxyType

from scribe.models.request import StyleOptions

DEFAULT_TEMPERATURE = 0.7
DEFAULT_SAMPLING_BREADTH = 40
MAX_TEMPERATURE = 2.0

DEFAULT_LENGTH = "medium"
DEFAULT_TONE = "professional"
DEFAULT_TEMPLATE = "summary"

LENGTH_BUDGETS = MappingProxyType({"short": 250, "medium": 500, "long": 1000})

TONES = (
    "professional",
    "casual",
    "formal",
    "friendly",
    "enthusiastic",
)

# Formats that shape output derived from a source document
GENERATION_FORMATS = (
    "summary",
    "bullet-points",
    "analysis",
    "outline",
    "explanation",
)

# Free-writing formats
WRITING_FORMATS = (
    "email",
    "blog-post",
    "social-media",
    "business-letter",
    "creative-writing",
)

TEMPLATE_KEYS = frozenset(GENERATION_FORMATS + WRITING_FORMATS)


@dataclass(frozen=True)
class ResolvedConfig:
    """Concrete parameters for one generation."""

    max_output_units: int = LENGTH_BUDGETS[DEFAULT_LENGTH]
    template_key: str = DEFAULT_TEMPLATE
    tone: str = DEFAULT_TONE
    length: str = DEFAULT_LENGTH
    temperature: float = DEFAULT_TEMPERATURE
    sampling_breadth: int = DEFAULT_SAMPLING_BREADTH


def _normalize(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower().replace("_", "-").replace(" ", "-")


def resolve_length(length: object) -> str:
    key = _normalize(length)
    return key if key in LENGTH_BUDGETS else DEFAULT_LENGTH


def resolve_tone(tone: object) -> str:
    key = _normalize(tone)
    return key if key in TONES else DEFAULT_TONE


def resolve_template_key(format: object) -> str:
    key = _normalize(format)
    return key if key in TEMPLATE_KEYS else DEFAULT_TEMPLATE


def resolve_temperature(
    temperature: float | None, default: float = DEFAULT_TEMPERATURE
) -> float:
    if temperature is None or isinstance(temperature, bool):
        return default
    try:
        value = float(temperature)
    except (TypeError, ValueError):
        return default
    if value != value or not 0.0 <= value <= MAX_TEMPERATURE:
        return default
    return value


def resolve_sampling_breadth(
    sampling_breadth: int | None,
    default: int = DEFAULT_SAMPLING_BREADTH,
    maximum: int | None = None,
) -> int:
    if sampling_breadth is None or isinstance(sampling_breadth, bool):
        return default
    try:
        value = int(sampling_breadth)
    except (TypeError, ValueError, OverflowError):
        return default
    if value < 1:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


def resolve(
    style: StyleOptions | None,
    temperature: float | None = None,
    sampling_breadth: int | None = None,
    *,
    default_temperature: float = DEFAULT_TEMPERATURE,
    default_sampling_breadth: int = DEFAULT_SAMPLING_BREADTH,
    max_sampling_breadth: int | None = None,
) -> ResolvedConfig:
    """Map style options and sampling parameters to a ResolvedConfig.

    Args:
        style: Tone, format and length chosen by the client; may be None.
        temperature: Requested sampling temperature.
        sampling_breadth: Requested top-k.
        default_temperature: Temperature used when none (or a bad one) is given.
        default_sampling_breadth: Top-k used when none (or a bad one) is given.
        max_sampling_breadth: Optional upper clamp for top-k.

    Returns:
        The resolved configuration. Never raises.
    """
    style = style or StyleOptions()
    length = resolve_length(style.length)

    return ResolvedConfig(
        max_output_units=LENGTH_BUDGETS[length],
        template_key=resolve_template_key(style.format),
        tone=resolve_tone(style.tone),
        length=length,
        temperature=resolve_temperature(temperature, default_temperature),
        sampling_breadth=resolve_sampling_breadth(
            sampling_breadth, default_sampling_breadth, max_sampling_breadth
        ),
    )
