"""
Routes document bytes to the extractor for their content type.

This is the single place where extractor failures are normalized and where
the "non-empty text or a typed error" guarantee is enforced.
"""

import logging
from collections.abc import Callable

from . import content_types
from .docx import extract_docx
from .exceptions import (
    DecodeFailureError,
    EmptyContentError,
    ExtractionError,
    ExtractionFailedError,
    UnsupportedFormatError,
)
from .pdf import extract_pdf
from .text import extract_txt, has_bom, is_utf8, looks_like_text

logger = logging.getLogger(__name__)

Extractor = Callable[[bytes], str]

EXTRACTORS: dict[str, Extractor] = {
    content_types.PDF: extract_pdf,
    content_types.DOCX: extract_docx,
    content_types.TEXT: extract_txt,
}


def extract(data: bytes, content_type: str) -> str:
    """
    Extract text from a document of the given content type.

    Args:
        data: Raw document bytes.
        content_type: Canonical content type or an accepted variant of one.

    Returns:
        Non-empty, stripped text.

    Raises:
        UnsupportedFormatError: If the type is not supported.
        ExtractionError: Any typed failure reported by the extractor, or
            ExtractionFailedError wrapping an unexpected one.
        EmptyContentError: If the extractor produced only whitespace.
    """
    canonical = content_types.canonicalize(content_type)
    if canonical is None:
        raise _unsupported(content_type)

    extractor = EXTRACTORS[canonical]
    try:
        text = extractor(data)
    except ExtractionError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure extracting %s content", canonical)
        raise ExtractionFailedError(
            "Failed to extract text from document"
        ) from e

    text = (text or "").strip()
    if not text:
        raise EmptyContentError(
            "No text could be extracted from the document. "
            "The file may be empty or corrupted"
        )
    return text


def process_upload(
    data: bytes, filename: str | None, claimed_type: str | None
) -> tuple[str, str]:
    """
    Resolve, validate and extract an uploaded file.

    Args:
        data: Uploaded bytes (size already bounded by the caller).
        filename: Client-supplied filename.
        claimed_type: Content-Type header of the uploaded part.

    Returns:
        Tuple of (canonical content type, extracted text).
    """
    resolved = content_types.resolve(filename, claimed_type)
    if not content_types.is_supported(resolved):
        raise _unsupported(resolved)
    canonical = content_types.canonicalize(resolved)

    if canonical == content_types.TEXT and _looks_binary(data):
        raise DecodeFailureError("File does not appear to be valid text")

    logger.info(
        "Extracting %s (claimed=%s, resolved=%s, %d bytes)",
        filename,
        claimed_type,
        canonical,
        len(data),
    )
    return canonical, extract(data, canonical)


def _looks_binary(data: bytes) -> bool:
    # Empty input is left to the extractor; BOM-marked and valid UTF-8
    # bytes are decoded as they are, whatever their script
    if not data or has_bom(data) or is_utf8(data):
        return False
    return not looks_like_text(data)


def _unsupported(content_type: str | None) -> UnsupportedFormatError:
    if content_type == content_types.LEGACY_DOC:
        return UnsupportedFormatError(
            content_type,
            "Legacy .doc files are not supported. Save the document as .docx and retry",
        )
    return UnsupportedFormatError(
        content_type or "",
        f"Unsupported file type '{content_type or 'unknown'}'. "
        "Only PDF, DOCX and TXT files are allowed",
    )
