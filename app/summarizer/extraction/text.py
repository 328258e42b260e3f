"""
Plain-text decoding and normalization.

Handles byte-order marks, mixed legacy encodings and line-ending cleanup for
uploaded .txt files.
"""

import logging

from .exceptions import EmptyContentError

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"
UTF16_LE_BOM = b"\xff\xfe"
UTF16_BE_BOM = b"\xfe\xff"

# Tried in order when the bytes are not valid UTF-8
FALLBACK_ENCODINGS = ("cp1252", "latin-1")

SNIFF_SAMPLE_SIZE = 512
MIN_PRINTABLE_RATIO = 0.8
_WHITESPACE_BYTES = frozenset(b"\t\n\r")


def extract_txt(data: bytes) -> str:
    """
    Extract normalized text from a plain-text file.

    Args:
        data: Raw file bytes.

    Returns:
        Cleaned, non-empty text.

    Raises:
        EmptyContentError: If the file is empty or contains only whitespace.
    """
    if not data:
        raise EmptyContentError("Empty text file")

    text = clean(decode(data))
    if not text:
        raise EmptyContentError("No text could be extracted from file")
    return text


def decode(data: bytes) -> str:
    """
    Decode bytes to text, honouring a byte-order mark if present.

    Never raises: when no encoding applies cleanly, undecodable bytes are
    replaced.
    """
    if data.startswith(UTF8_BOM):
        return data[len(UTF8_BOM):].decode("utf-8", errors="replace")
    if data.startswith(UTF16_LE_BOM):
        return data[len(UTF16_LE_BOM):].decode("utf-16-le", errors="replace")
    if data.startswith(UTF16_BE_BOM):
        return data[len(UTF16_BE_BOM):].decode("utf-16-be", errors="replace")

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass

    for encoding in FALLBACK_ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            continue
        logger.debug("Decoded text as %s", encoding)
        return text

    return data.decode("utf-8", errors="replace")


def clean(text: str) -> str:
    """Normalize line endings, drop NULs and blank lines, strip each line."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\x00", "")

    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line).strip()


def has_bom(data: bytes) -> bool:
    """Check whether data starts with a UTF-8 or UTF-16 byte-order mark."""
    return data.startswith((UTF8_BOM, UTF16_LE_BOM, UTF16_BE_BOM))


def is_utf8(data: bytes) -> bool:
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def looks_like_text(data: bytes) -> bool:
    """
    Cheap binary/text discriminator.

    Samples the first 512 bytes and requires at least 80% of them to be
    printable ASCII or common whitespace.
    """
    sample = data[:SNIFF_SAMPLE_SIZE]
    if not sample:
        return False

    printable = sum(
        1 for byte in sample if 32 <= byte <= 126 or byte in _WHITESPACE_BYTES
    )
    return printable / len(sample) >= MIN_PRINTABLE_RATIO
