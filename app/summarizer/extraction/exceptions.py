"""
Exceptions raised by the text extraction pipeline.

Every failure carries an ErrorKind so callers can decide how to report it
without inspecting messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of an extraction failure."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    CORRUPT_CONTAINER = "corrupt_container"
    MISSING_REQUIRED_PART = "missing_required_part"
    EMPTY_CONTENT = "empty_content"
    DECODE_FAILURE = "decode_failure"
    EXTRACTION_FAILED = "extraction_failed"


class ExtractionError(Exception):
    """Base class for extraction failures."""

    kind: ErrorKind = ErrorKind.EXTRACTION_FAILED


class UnsupportedFormatError(ExtractionError):
    """Raised when the content type is not one of the supported formats."""

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, content_type: str, message: str | None = None):
        self.content_type = content_type
        super().__init__(message or f"Unsupported file type '{content_type}'")


class CorruptContainerError(ExtractionError):
    """Raised when the PDF or ZIP structure cannot be parsed."""

    kind = ErrorKind.CORRUPT_CONTAINER


class MissingRequiredPartError(ExtractionError):
    """Raised when a container opens but its main part is absent."""

    kind = ErrorKind.MISSING_REQUIRED_PART


class EmptyContentError(ExtractionError):
    """Raised when parsing succeeded but produced no usable text."""

    kind = ErrorKind.EMPTY_CONTENT


class DecodeFailureError(ExtractionError):
    """Raised when bytes declared as text do not look like text."""

    kind = ErrorKind.DECODE_FAILURE


class ExtractionFailedError(ExtractionError):
    """Raised when an extractor fails unexpectedly."""

    kind = ErrorKind.EXTRACTION_FAILED
