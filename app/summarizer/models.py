"""
Pydantic models for the document summarizer API.

Defines request/response shapes and the structured analysis returned by the
language model.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Analysis Models
# =============================================================================


class AnalysisMetadata(BaseModel):
    """
    Recognized metadata keys returned by the analysis model.

    Every key is optional; unrecognized keys are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    date: str | None = Field(default=None, description="Document date (YYYY-MM-DD)")
    sender: str | None = None
    recipient: str | None = None
    amount: str | None = Field(
        default=None,
        description="Total amount for invoices and financial documents",
    )
    currency: str | None = Field(default=None, description="Currency code")
    company: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_scalars(cls, v: Any) -> Any:
        """Models sometimes answer with numbers or the string 'null'."""
        if isinstance(v, str) and v.strip().lower() in ("", "null", "none", "n/a"):
            return None
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (int, float)):
            return str(v)
        return v


class AnalysisResult(BaseModel):
    """Structured analysis produced for a document."""

    summary: str = Field(..., description="A concise 2-3 sentence summary")
    document_type: str = Field(
        ...,
        description="Type of document (invoice, cv, report, letter, ...)",
    )
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v: Any) -> Any:
        return {} if v is None else v


# =============================================================================
# API Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    message: str = Field(default="")
    version: str = Field(default="1.0.0")


class UploadResponse(BaseModel):
    """Response returned after a successful upload."""

    id: str
    filename: str
    file_size: int
    content_type: str
    created_at: datetime
    message: str = Field(
        default="Document uploaded successfully. Use /api/v1/documents/{id}/analyze to analyze it.",
    )


class AnalysisResponse(BaseModel):
    """Analysis results for a document."""

    id: str
    summary: str
    document_type: str
    metadata: dict[str, Any]
    analyzed_at: datetime


class DocumentResponse(BaseModel):
    """Full stored record of a document."""

    id: str
    filename: str
    file_size: int
    content_type: str
    storage_key: str
    extracted_text: str
    summary: str | None = None
    document_type: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime
    analyzed_at: datetime | None = None


class ErrorResponse(BaseModel):
    """Error payload returned by the exception handlers."""

    detail: str
    error_kind: str | None = None
