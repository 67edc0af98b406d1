"""Document upload and text check endpoint handlers."""

import logging

from fastapi import APIRouter, File, UploadFile

from scribe.api.deps import SettingsDep
from scribe.core.extraction import extract_text
from scribe.models.request import TextCheckBody
from scribe.models.response import TextCheckResponse, UploadResponse
from scribe.utils.errors import FileTooLarge, InvalidRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload(
    settings: SettingsDep,
    file: UploadFile | None = File(default=None),
) -> UploadResponse:
    """Extract plain text from an uploaded PDF or text file.

    The upload is read in memory and never written to disk.
    """
    if file is None:
        raise InvalidRequest("File not uploaded")

    max_bytes = settings.upload.max_file_bytes
    # Read one byte past the limit to detect oversize uploads
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise FileTooLarge(f"File exceeds the {max_bytes} byte limit")

    extracted = extract_text(file.filename, data, settings.upload.allowed_extensions)
    limit = settings.generation.max_context_chars

    if extracted.exceeds(limit):
        logger.warning(
            f"Extracted text ({extracted.text_length} chars) exceeds the {limit} char limit"
        )

    return UploadResponse(
        text=extracted.text,
        textLength=extracted.text_length,
        exceedsLimit=extracted.exceeds(limit),
    )


@router.post("/check-text", response_model=TextCheckResponse)
async def check_text(body: TextCheckBody, settings: SettingsDep) -> TextCheckResponse:
    """Report the length of a block of text against the context limit."""
    if not body.text:
        raise InvalidRequest("No text provided")

    limit = settings.generation.max_context_chars
    return TextCheckResponse(
        textLength=len(body.text),
        exceedsLimit=len(body.text) > limit,
    )
