"""
Request and response models for the verification endpoint.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from truth_checker.models.content import ContentType


class VerifyRequest(BaseModel):
    """Body of POST /verify: a question, a claim, or a URL to check."""

    query: str = Field(
        ...,
        min_length=1,
        description="Plain text, a YouTube link, or a webpage URL",
        examples=[
            "What is the capital of France?",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://example.com/article",
        ],
    )


class VerifyMetadata(BaseModel):
    """Provenance details attached to a verification result."""

    content_type: ContentType
    source_info: str
    video_id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    processing_time_ms: float = Field(..., ge=0)


class VerifyResponse(BaseModel):
    """Fact-check text returned by the model plus request metadata."""

    result: str
    metadata: VerifyMetadata


class ErrorDetail(BaseModel):
    """Shape of the ``detail`` payload for failed verification requests."""

    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="User-facing description of the failure")
    details: str | None = Field(
        default=None, description="Underlying error message, development builds only"
    )


class ErrorResponse(BaseModel):
    detail: ErrorDetail


__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "VerifyMetadata",
    "VerifyRequest",
    "VerifyResponse",
]
