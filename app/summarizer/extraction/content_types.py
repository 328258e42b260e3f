"""
Content-type resolution and validation for uploaded documents.
"""

from pathlib import PurePath

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT = "text/plain"
LEGACY_DOC = "application/msword"

DOCX_VARIANTS = frozenset(
    {
        DOCX,
        # Some browsers send these for .docx
        "application/vnd.openxmlformats-officedocument.wordprocessingml",
        "application/docx",
        "application/x-docx",
    }
)
TEXT_VARIANTS = frozenset(
    {
        TEXT,
        "text/txt",
        "application/txt",
        "application/x-txt",
    }
)
SUPPORTED_TYPES = frozenset({PDF}) | DOCX_VARIANTS | TEXT_VARIANTS

EXTENSION_TYPES = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".txt": TEXT,
    ".doc": LEGACY_DOC,
}


def resolve(filename: str | None, declared_type: str | None) -> str:
    """
    Determine the content type of an upload.

    The filename extension takes precedence. When it is missing or unknown,
    the declared header is returned verbatim, valid or not.

    Args:
        filename: Client-supplied filename.
        declared_type: Content-Type header sent with the file part.

    Returns:
        The resolved content type string.
    """
    extension = PurePath(filename or "").suffix.lower()
    if extension in EXTENSION_TYPES:
        return EXTENSION_TYPES[extension]
    return declared_type or ""


def is_supported(content_type: str | None) -> bool:
    """Check whether a content type is one of the accepted strings."""
    return content_type in SUPPORTED_TYPES


def canonicalize(content_type: str | None) -> str | None:
    """
    Map an accepted content type variant to its canonical form.

    Returns:
        The canonical type, or None if the type is not supported.
    """
    if content_type == PDF:
        return PDF
    if content_type in DOCX_VARIANTS:
        return DOCX
    if content_type in TEXT_VARIANTS:
        return TEXT
    return None
