"""
Router for document endpoints.

Handles:
- Document upload with text extraction
- On-demand LLM analysis
- Document retrieval
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..models import AnalysisResponse, DocumentResponse, ErrorResponse, UploadResponse
from ..models_db import Document
from ..services.analysis import AnalysisService, get_analysis_service
from ..services.documents import DocumentService
from ..services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/documents", tags=["documents"])

UPLOAD_ERRORS = {
    400: {"model": ErrorResponse, "description": "Unsupported, empty or undecodable file"},
    413: {"model": ErrorResponse, "description": "File exceeds the upload size limit"},
    422: {"model": ErrorResponse, "description": "Corrupt or unreadable document"},
    500: {"model": ErrorResponse, "description": "Original file could not be stored"},
}
DOCUMENT_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid document ID format"},
    404: {"model": ErrorResponse, "description": "Document not found"},
}


def get_document_service(
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage),
    analyzer: AnalysisService = Depends(get_analysis_service),
) -> DocumentService:
    return DocumentService(db, storage, analyzer)


def _parse_document_id(document_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(document_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid document ID format",
        )


def _size_limit_error(max_bytes: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File size exceeds {max_bytes // (1024 * 1024)}MB limit",
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses=UPLOAD_ERRORS,
)
async def upload_document(
    file: Annotated[UploadFile, File(description="PDF, DOCX or TXT file")],
    service: DocumentService = Depends(get_document_service),
) -> UploadResponse:
    """
    Upload a document and extract its text.

    The content type is derived from the filename extension, falling back to
    the Content-Type of the uploaded part.
    """
    max_bytes = get_settings().max_upload_bytes

    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided",
        )

    try:
        if file.size is not None and file.size > max_bytes:
            raise _size_limit_error(max_bytes)

        # Read one byte past the limit to detect oversized bodies
        data = await file.read(max_bytes + 1)
        if len(data) > max_bytes:
            raise _size_limit_error(max_bytes)
        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is empty",
            )

        logger.info(
            "File upload attempt: %s (%d bytes, reported content type %s)",
            file.filename,
            len(data),
            file.content_type,
        )

        document = service.upload(data, file.filename, file.content_type)
    finally:
        await file.close()

    return UploadResponse(
        id=str(document.id),
        filename=document.filename,
        file_size=document.file_size,
        content_type=document.content_type,
        created_at=document.created_at,
    )


@router.post(
    "/{document_id}/analyze",
    response_model=AnalysisResponse,
    responses={
        **DOCUMENT_ERRORS,
        503: {"model": ErrorResponse, "description": "Analysis model unavailable"},
    },
)
async def analyze_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> AnalysisResponse:
    """
    Summarize a document with the analysis model.

    Results are stored; repeated calls return the stored analysis.
    """
    document = await service.analyze(_parse_document_id(document_id))

    return AnalysisResponse(
        id=str(document.id),
        summary=document.summary or "",
        document_type=document.document_type or "",
        metadata=document.analysis_metadata or {},
        analyzed_at=document.analyzed_at,
    )


@router.get(
    "/{document_id}",
    response_model=DocumentResponse,
    responses=DOCUMENT_ERRORS,
)
async def get_document(
    document_id: str,
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Retrieve a stored document with its extracted text and analysis."""
    document = service.get(_parse_document_id(document_id))
    return _to_response(document)


def _to_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        id=str(document.id),
        filename=document.filename,
        file_size=document.file_size,
        content_type=document.content_type,
        storage_key=document.storage_key,
        extracted_text=document.extracted_text,
        summary=document.summary,
        document_type=document.document_type,
        metadata=document.analysis_metadata,
        created_at=document.created_at,
        updated_at=document.updated_at,
        analyzed_at=document.analyzed_at,
    )
