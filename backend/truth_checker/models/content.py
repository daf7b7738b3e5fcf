"""
Content models for Truth Checker.

This module defines the request-scoped values produced while normalizing a
user query: the content classification, the results of webpage and
transcript extraction, and the router's final normalized content handed to
the fact-checking model. None of these are persisted.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class ContentType(str, Enum):
    """
    Classification of a raw user query.

    - TEXT: free text passed through unchanged
    - YOUTUBE: a YouTube link or bare video ID
    - WEBPAGE: any other http(s) URL
    """

    TEXT = "text"
    YOUTUBE = "youtube"
    WEBPAGE = "webpage"


class TranscriptStrategyName(str, Enum):
    """Transcript acquisition strategies, in the order they are attempted."""

    CAPTION_TRACKS = "caption_tracks"
    INITIAL_DATA = "initial_data"
    EMBED_PAGE = "embed_page"
    VIDEO_METADATA = "video_metadata"


# =============================================================================
# EXTRACTION RESULTS
# =============================================================================


class WebpageContent(BaseModel):
    """Plain text and title extracted from a fetched webpage."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="URL the content was fetched from")
    text: str = Field(default="", description="Collapsed page text, bounded in length")
    title: str = Field(default="", description="Trimmed <title> text, empty if absent")


class TranscriptResult(BaseModel):
    """Text produced by the transcript acquisition pipeline."""

    model_config = ConfigDict(frozen=True)

    video_id: str = Field(..., min_length=11, max_length=11)
    text: str = Field(..., description="Transcript or degraded title/description text")
    strategy: TranscriptStrategyName = Field(
        ..., description="Strategy that produced the text"
    )

    @property
    def is_degraded(self) -> bool:
        """True when the text is video metadata rather than captions."""
        return self.strategy == TranscriptStrategyName.VIDEO_METADATA


# =============================================================================
# ROUTER OUTPUT
# =============================================================================


class NormalizedContent(BaseModel):
    """
    Normalized form of a user query.

    ``query`` is the exact text handed to the fact-checking model; for
    non-text input it opens with a provenance preamble. ``source_info`` is a
    short human-readable label returned in response metadata only.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    content_type: ContentType
    source_info: str
    video_id: str | None = None
    source_url: str | None = None
    title: str | None = None
    transcript_strategy: TranscriptStrategyName | None = None


__all__ = [
    "ContentType",
    "NormalizedContent",
    "TranscriptResult",
    "TranscriptStrategyName",
    "WebpageContent",
]
