"""
PDF text extraction using pypdf.

Extraction is best-effort: pages that cannot be loaded or decoded are
skipped so a few malformed or image-only pages do not fail the document.
"""

import io
import logging

from pypdf import PasswordType, PdfReader
from pypdf.errors import FileNotDecryptedError, PdfReadError

from .exceptions import CorruptContainerError, EmptyContentError

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF"
# pypdf tolerates leading junk before the header, within reason
HEADER_SEARCH_WINDOW = 1024


def extract_pdf(data: bytes) -> str:
    """
    Extract plain text from every readable page of a PDF.

    Args:
        data: Raw PDF bytes.

    Returns:
        Page texts joined by newlines, stripped.

    Raises:
        CorruptContainerError: If the PDF structure cannot be opened.
        EmptyContentError: If no page yields any text.
    """
    reader = _open(data)
    page_count = _page_count(reader)

    parts: list[str] = []
    skipped = 0
    for number in range(1, page_count + 1):
        try:
            text = _page_text(reader, number)
        except Exception as e:
            logger.debug("Skipping unreadable PDF page %d: %s", number, e)
            skipped += 1
            continue
        if text is None:
            logger.debug("Skipping null PDF page %d", number)
            continue
        parts.append(text)
        parts.append("\n")

    if skipped:
        logger.info("Skipped %d of %d PDF page(s)", skipped, page_count)

    text = "".join(parts).strip()
    if not text:
        raise EmptyContentError("No text could be extracted from PDF")
    return text


def _open(data: bytes) -> PdfReader:
    if PDF_SIGNATURE not in data[:HEADER_SEARCH_WINDOW]:
        raise CorruptContainerError(
            "Invalid PDF file: does not start with PDF header"
        )

    try:
        reader = PdfReader(io.BytesIO(data))
    except PdfReadError as e:
        raise CorruptContainerError(f"Invalid or corrupted PDF file: {e}") from e
    except Exception as e:
        logger.warning("pypdf failed to open document: %s", e)
        raise CorruptContainerError(f"Invalid or corrupted PDF file: {e}") from e

    if reader.is_encrypted:
        try:
            decrypted = reader.decrypt("")
        except Exception as e:
            raise CorruptContainerError(
                "PDF is encrypted and cannot be opened without a password"
            ) from e
        if decrypted == PasswordType.NOT_DECRYPTED:
            raise CorruptContainerError(
                "PDF is encrypted and cannot be opened without a password"
            )

    return reader


def _page_count(reader: PdfReader) -> int:
    try:
        return len(reader.pages)
    except FileNotDecryptedError as e:
        raise CorruptContainerError(
            "PDF is encrypted and cannot be opened without a password"
        ) from e
    except Exception as e:
        raise CorruptContainerError(f"Could not determine PDF page count: {e}") from e


def _page_text(reader: PdfReader, number: int) -> str | None:
    """Return the text of a page by its 1-based number, None for null pages."""
    page = reader.pages[number - 1]
    if page is None:
        return None
    return page.extract_text() or ""
