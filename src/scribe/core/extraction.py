"""Plain-text extraction from uploaded documents."""

import io
import logging
from dataclasses import dataclass
from pathlib import PurePath

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from scribe.utils.errors import InvalidRequest, UnsupportedFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedText:
    text: str

    @property
    def text_length(self) -> int:
        return len(self.text)

    def exceeds(self, limit: int) -> bool:
        return self.text_length > limit


def _extract_pdf(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError) as e:
        raise InvalidRequest("Error processing PDF") from e

    return "\n".join(page for page in pages if page)


def extract_text(
    filename: str | None,
    data: bytes,
    allowed_extensions: list[str] | None = None,
) -> ExtractedText:
    """Extract plain text from a PDF or UTF-8 text document.

    Args:
        filename: Name of the uploaded file; its extension selects the parser.
        data: Raw file content.
        allowed_extensions: Extensions accepted, including the dot.

    Returns:
        The extracted text.

    Raises:
        UnsupportedFile: If the extension is not accepted.
        InvalidRequest: If the PDF cannot be parsed.
    """
    suffix = PurePath(filename or "").suffix.lower()
    allowed = [ext.lower() for ext in (allowed_extensions or [".pdf", ".txt", ".md"])]

    if suffix not in allowed:
        raise UnsupportedFile(f"Unsupported file type: {suffix or 'unknown'}")

    if suffix == ".pdf":
        text = _extract_pdf(data)
    else:
        text = data.decode("utf-8", errors="replace")

    logger.info(f"Extracted {len(text)} characters from {suffix} upload")
    return ExtractedText(text=text)
