"""
Text extraction pipeline for uploaded documents.

Contains:
- content_types: content-type resolution and the supported-format set
- dispatcher: routes bytes to a format extractor and normalizes failures
- pdf, docx, text: format-specific extractors
"""

from .content_types import canonicalize, is_supported, resolve
from .dispatcher import extract, process_upload
from .docx import extract_docx
from .exceptions import (
    CorruptContainerError,
    DecodeFailureError,
    EmptyContentError,
    ErrorKind,
    ExtractionError,
    ExtractionFailedError,
    MissingRequiredPartError,
    UnsupportedFormatError,
)
from .pdf import extract_pdf
from .text import extract_txt, looks_like_text

__all__ = [
    "extract",
    "process_upload",
    "extract_pdf",
    "extract_docx",
    "extract_txt",
    "looks_like_text",
    "resolve",
    "is_supported",
    "canonicalize",
    "ErrorKind",
    "ExtractionError",
    "UnsupportedFormatError",
    "CorruptContainerError",
    "MissingRequiredPartError",
    "EmptyContentError",
    "DecodeFailureError",
    "ExtractionFailedError",
]
