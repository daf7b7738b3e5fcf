"""
Models Package for Truth Checker.

Pydantic models for normalized content and the verification API. All
values are request-scoped; nothing is persisted.
"""

from truth_checker.models.content import (
    ContentType,
    NormalizedContent,
    TranscriptResult,
    TranscriptStrategyName,
    WebpageContent,
)
from truth_checker.models.verification import (
    ErrorDetail,
    ErrorResponse,
    VerifyMetadata,
    VerifyRequest,
    VerifyResponse,
)


__all__ = [
    "ContentType",
    "ErrorDetail",
    "ErrorResponse",
    "NormalizedContent",
    "TranscriptResult",
    "TranscriptStrategyName",
    "VerifyMetadata",
    "VerifyRequest",
    "VerifyResponse",
    "WebpageContent",
]
