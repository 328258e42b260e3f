"""
Services package for the document summarizer.

Contains:
- analysis: LLM summarization through an OpenAI-compatible API
- documents: upload, analysis and retrieval workflow
- storage: S3 and local object storage for original files
"""

from .analysis import AnalysisService, AnalysisServiceError, get_analysis_service
from .documents import DocumentNotFoundError, DocumentService
from .storage import LocalStorage, S3Storage, StorageError, get_storage

__all__ = [
    "AnalysisService",
    "AnalysisServiceError",
    "get_analysis_service",
    "DocumentService",
    "DocumentNotFoundError",
    "LocalStorage",
    "S3Storage",
    "StorageError",
    "get_storage",
]
