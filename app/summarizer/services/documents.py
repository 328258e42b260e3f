"""
Document lifecycle: upload, analysis and retrieval.

Coordinates the extraction pipeline, object storage, the database and the
analysis model.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..extraction import process_upload
from ..models_db import Document
from .analysis import AnalysisService
from .storage import Storage, StorageError, build_storage_key

logger = logging.getLogger(__name__)


class DocumentNotFoundError(Exception):
    """Raised when a document id does not exist."""

    def __init__(self, document_id: uuid.UUID | str):
        self.document_id = str(document_id)
        super().__init__(f"Document {document_id} not found")


class DocumentService:
    """Service for document upload, analysis and retrieval."""

    def __init__(self, db: Session, storage: Storage, analyzer: AnalysisService):
        self.db = db
        self.storage = storage
        self.analyzer = analyzer

    def upload(self, data: bytes, filename: str, claimed_type: str | None) -> Document:
        """
        Extract, store and persist an uploaded document.

        Args:
            data: Uploaded bytes.
            filename: Client-supplied filename.
            claimed_type: Content-Type header of the uploaded part.

        Returns:
            The persisted Document.

        Raises:
            ExtractionError: If the file type is unsupported or text extraction fails.
            StorageError: If the original file cannot be stored.
            SQLAlchemyError: If the database write fails.
        """
        content_type, text = process_upload(data, filename, claimed_type)

        document_id = uuid.uuid4()
        storage_key = build_storage_key(str(document_id), filename)
        self.storage.upload(storage_key, data, content_type)

        document = Document(
            id=document_id,
            filename=filename,
            file_size=len(data),
            content_type=content_type,
            storage_key=storage_key,
            extracted_text=text,
        )
        try:
            self.db.add(document)
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to save document %s to database", document_id)
            self.db.rollback()
            self._discard_object(storage_key)
            raise
        self.db.refresh(document)

        logger.info(
            "Document uploaded successfully: id=%s, filename=%s, content_type=%s, text_length=%d",
            document_id,
            filename,
            content_type,
            len(text),
        )
        return document

    async def analyze(self, document_id: uuid.UUID) -> Document:
        """
        Summarize a document, reusing a previous analysis when present.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            AnalysisServiceError: If the analysis model fails.
            SQLAlchemyError: If the analysis cannot be saved.
        """
        document = self.get(document_id)

        if document.is_analyzed:
            logger.info("Document %s already analyzed, returning cached results", document_id)
            return document

        logger.info(
            "Starting document analysis: id=%s, text_length=%d",
            document_id,
            len(document.extracted_text),
        )
        result = await self.analyzer.analyze(document.extracted_text)

        now = datetime.now(timezone.utc)
        document.summary = result.summary
        document.document_type = result.document_type
        document.analysis_metadata = result.metadata.model_dump()
        document.analyzed_at = now
        document.updated_at = now
        try:
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to save analysis for document %s", document_id)
            self.db.rollback()
            raise
        self.db.refresh(document)

        logger.info(
            "Document analyzed successfully: id=%s, type=%s",
            document_id,
            result.document_type,
        )
        return document

    def get(self, document_id: uuid.UUID) -> Document:
        """
        Fetch a document by id.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        document = self.db.get(Document, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def _discard_object(self, storage_key: str) -> None:
        try:
            self.storage.delete(storage_key)
        except StorageError as e:
            logger.warning("Failed to clean up stored object %s: %s", storage_key, e)
