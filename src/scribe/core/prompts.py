"""Prompt composition from a generation request and its resolved style.

The template table is fixed at import time and read-only, so concurrent
requests share it without locking.
"""

from types import MappingProxyType

from scribe.core.resolver import DEFAULT_TEMPLATE, ResolvedConfig, resolve
from scribe.models.request import GenerationMode, GenerationRequest, ensure_prompt

QUESTION_TEMPLATE = "Context from the text:\n{source}\n\nUser request: {prompt}"

LENGTH_WORDS = MappingProxyType(
    {
        "short": "brief",
        "medium": "moderately detailed",
        "long": "comprehensive",
    }
)

REWRITE_LENGTH_WORDS = MappingProxyType(
    {
        "short": "shorter than the original",
        "medium": "about the same length as the original",
        "long": "longer and more detailed than the original",
    }
)

FORMAT_LABELS = MappingProxyType(
    {
        "summary": "summary",
        "bullet-points": "bulleted list of key points",
        "analysis": "analysis",
        "outline": "outline",
        "explanation": "explanation",
        "email": "email",
        "blog-post": "blog post",
        "social-media": "social media post",
        "business-letter": "business letter",
        "creative-writing": "piece of creative writing",
    }
)

# Templates applied to a source document. The document-shaping formats carry
# their instruction in the template; the writing formats also take the
# user's request.
CONTEXT_TEMPLATES = MappingProxyType(
    {
        "summary": (
            "Write a {length_words} summary of the following text in a {tone} tone.\n\n"
            "Text:\n{source}"
        ),
        "bullet-points": (
            "Summarize the key points of the following text as a {length_words} "
            "bulleted list, written in a {tone} tone. Start each point with \"- \".\n\n"
            "Text:\n{source}"
        ),
        "analysis": (
            "Write a {length_words} analysis of the following text in a {tone} tone. "
            "Cover its main arguments, the evidence behind them and its conclusions.\n\n"
            "Text:\n{source}"
        ),
        "outline": (
            "Create a {length_words} hierarchical outline of the following text "
            "in a {tone} tone, using numbered sections and indented sub-points.\n\n"
            "Text:\n{source}"
        ),
        "explanation": (
            "Explain the following text in a {tone} tone. Give a {length_words} "
            "explanation that someone new to the subject could follow.\n\n"
            "Text:\n{source}"
        ),
        "email": (
            "Write a {length_words} email in a {tone} tone.\n\n"
            "Request: {prompt}\n\nBackground:\n{source}"
        ),
        "blog-post": (
            "Write a {length_words} blog post in a {tone} tone.\n\n"
            "Request: {prompt}\n\nBackground:\n{source}"
        ),
        "social-media": (
            "Write a {length_words} social media post in a {tone} tone.\n\n"
            "Request: {prompt}\n\nBackground:\n{source}"
        ),
        "business-letter": (
            "Write a {length_words} business letter in a {tone} tone.\n\n"
            "Request: {prompt}\n\nBackground:\n{source}"
        ),
        "creative-writing": (
            "Write a {length_words} piece of creative writing in a {tone} tone.\n\n"
            "Request: {prompt}\n\nBackground:\n{source}"
        ),
    }
)

DIRECT_TEMPLATE = (
    "Respond with a {length_words} {label} in a {tone} tone.\n\nRequest: {prompt}"
)

REWRITE_TEMPLATE = (
    "Rewrite the following text in a {tone} tone, making it {rewrite_length}. "
    "Keep its meaning and respond with the rewritten text only.\n\nText:\n{prompt}"
)

REWRITE_CONTEXT_SUFFIX = "\n\nContext:\n{source}"


def get_template(template_key: str) -> str:
    """Look up a context template by exact key, falling back to summary."""
    return CONTEXT_TEMPLATES.get(template_key, CONTEXT_TEMPLATES[DEFAULT_TEMPLATE])


def compose(request: GenerationRequest, config: ResolvedConfig | None = None) -> str:
    """Build the final prompt for a request.

    Args:
        request: The generation request.
        config: Resolved style; resolved from the request when omitted.

    Returns:
        The composed prompt. Any source context appears in it unmodified.

    Raises:
        InvalidRequest: If the prompt text is empty or blank.
    """
    prompt_text = ensure_prompt(request.prompt_text)
    config = config or resolve(request.style)

    length_words = LENGTH_WORDS.get(config.length, LENGTH_WORDS["medium"])

    if request.mode is GenerationMode.REWRITE:
        composed = REWRITE_TEMPLATE.format(
            tone=config.tone,
            rewrite_length=REWRITE_LENGTH_WORDS.get(
                config.length, REWRITE_LENGTH_WORDS["medium"]
            ),
            prompt=prompt_text,
        )
        if request.has_context:
            composed += REWRITE_CONTEXT_SUFFIX.format(source=request.source_context)
        return composed

    if not request.has_context:
        if request.mode is GenerationMode.PROMPT:
            return prompt_text
        return DIRECT_TEMPLATE.format(
            length_words=length_words,
            label=FORMAT_LABELS.get(config.template_key, FORMAT_LABELS[DEFAULT_TEMPLATE]),
            tone=config.tone,
            prompt=prompt_text,
        )

    # A question about the document, or no format asked for
    if request.mode is GenerationMode.PROMPT or request.style.format is None:
        return QUESTION_TEMPLATE.format(source=request.source_context, prompt=prompt_text)

    return get_template(config.template_key).format(
        length_words=length_words,
        tone=config.tone,
        source=request.source_context,
        prompt=prompt_text,
    )
