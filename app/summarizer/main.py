"""
FastAPI application for the document summarizer service.

Provides endpoints for:
- Uploading PDF, DOCX and plain-text documents with text extraction
- Summarizing stored documents with an LLM
- Retrieving stored documents
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .database import init_db
from .extraction import ErrorKind, ExtractionError
from .models import ErrorResponse, HealthResponse
from .routers import documents
from .services.analysis import AnalysisServiceError, get_analysis_service
from .services.documents import DocumentNotFoundError
from .services.storage import StorageError, get_storage

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# HTTP status per extraction failure kind
EXTRACTION_ERROR_STATUS = {
    ErrorKind.UNSUPPORTED_FORMAT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EMPTY_CONTENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DECODE_FAILURE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CORRUPT_CONTAINER: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.MISSING_REQUIRED_PART: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.EXTRACTION_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Document Summarizer Service...")
    init_db()
    get_storage()
    get_analysis_service()
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down Document Summarizer Service...")


# Create FastAPI application
app = FastAPI(
    title="Document Summarizer API",
    description="Text extraction and LLM summaries for PDF, DOCX and TXT documents",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(
        status="healthy",
        message="Document Summarizer API is running",
        version=__version__,
    )


@app.get("/health", response_model=HealthResponse)
@app.get("/api/v1/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", message="Service is healthy", version=__version__)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(documents.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(ExtractionError)
async def extraction_error_handler(request: Request, exc: ExtractionError):
    """Handle text extraction errors."""
    status_code = EXTRACTION_ERROR_STATUS.get(
        exc.kind, status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    if exc.kind is ErrorKind.EXTRACTION_FAILED:
        logger.error("Extraction failed: %r", exc.__cause__)
    else:
        logger.warning("Extraction rejected (%s): %s", exc.kind.value, exc)

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), error_kind=exc.kind.value).model_dump(),
    )


@app.exception_handler(DocumentNotFoundError)
async def not_found_error_handler(request: Request, exc: DocumentNotFoundError):
    """Handle unknown document ids."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Document not found"},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    """Handle object storage errors."""
    logger.error("Storage error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Failed to store document"},
    )


@app.exception_handler(AnalysisServiceError)
async def analysis_error_handler(request: Request, exc: AnalysisServiceError):
    """Handle analysis service errors."""
    logger.error("Analysis error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": f"Failed to analyze document: {exc}"},
    )
