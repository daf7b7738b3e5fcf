"""
Content Router Service Module for Truth Checker

Classifies a raw user query and turns it into the normalized text handed to
the fact-checking model:

- YouTube links (anything mentioning youtube.com or youtu.be) are resolved
  to a video ID and replaced by the video's transcript
- Other http(s) URLs are replaced by the page's extracted text
- Everything else passes through unchanged

Non-text queries gain a provenance preamble so the model knows what it is
reading. Routing failures raise ContentRoutingError subclasses whose
messages are safe to show to the user.
"""

import logging
import re

from truth_checker.config import Settings, get_settings
from truth_checker.models.content import ContentType, NormalizedContent
from truth_checker.services.transcript_service import (
    TranscriptNotFoundError,
    TranscriptUnavailableError,
    YouTubeTranscriptService,
)
from truth_checker.services.webpage_service import WebpageExtractorService, WebpageFetchError
from truth_checker.utils.youtube_url import extract_youtube_video_id


# =============================================================================
# CONSTANTS
# =============================================================================

YOUTUBE_HOST_MARKERS: tuple[str, ...] = ("youtube.com", "youtu.be")
HTTP_URL_PATTERN = re.compile(r"^https?://")

TEXT_SOURCE_LABEL: str = "User Query"

INVALID_YOUTUBE_URL_MESSAGE: str = (
    "Invalid YouTube URL. Please provide a valid YouTube video link."
)
CAPTIONS_UNAVAILABLE_MESSAGE: str = (
    "This YouTube video doesn't have available captions or the transcript is too short. "
    "Please try a different video or enable captions."
)

YOUTUBE_QUERY_TEMPLATE: str = (
    "Analyze this YouTube video transcript for factual accuracy:\n\n"
    "Video ID: {video_id}\n"
    "Transcript: {transcript}"
)
WEBPAGE_QUERY_TEMPLATE: str = (
    "Analyze this webpage content for factual accuracy:\n\n"
    "Source: {url}\n"
    "Title: {title}\n"
    "Content: {content}"
)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ContentRoutingError(Exception):
    """Base exception for routing failures; the message is user-facing."""

    error_code: str = "content_routing_error"

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidYouTubeURLError(ContentRoutingError):
    """Raised when a YouTube link carries no recognizable video ID."""

    error_code = "invalid_youtube_url"


class CaptionsUnavailableError(ContentRoutingError):
    """Raised when no usable transcript text could be obtained."""

    error_code = "captions_unavailable"


class WebpageUnavailableError(ContentRoutingError):
    """Raised when a webpage could not be fetched."""

    error_code = "webpage_unavailable"


# =============================================================================
# CLASSIFICATION
# =============================================================================


def classify_input(raw_input: str) -> ContentType:
    """
    Classify a raw query.

    The YouTube check is a plain substring test and runs first, so a
    YouTube link is never treated as a generic webpage.
    """
    if any(marker in raw_input for marker in YOUTUBE_HOST_MARKERS):
        return ContentType.YOUTUBE
    if HTTP_URL_PATTERN.match(raw_input):
        return ContentType.WEBPAGE
    return ContentType.TEXT


# =============================================================================
# CONTENT ROUTER SERVICE
# =============================================================================


class ContentRouterService:
    """
    Service that normalizes raw queries for fact checking.

    Example:
        >>> router = ContentRouterService()
        >>> content = await router.route("The Eiffel Tower is in Berlin")
        >>> content.content_type, content.source_info
        (<ContentType.TEXT: 'text'>, 'User Query')
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transcript_service: YouTubeTranscriptService | None = None,
        webpage_service: WebpageExtractorService | None = None,
    ) -> None:
        self.logger = logging.getLogger(__name__)
        self.settings = settings or get_settings()
        self.transcript_service = transcript_service or YouTubeTranscriptService(self.settings)
        self.webpage_service = webpage_service or WebpageExtractorService(self.settings)

    async def route(self, raw_input: str) -> NormalizedContent:
        """
        Classify a raw query and produce its normalized form.

        Args:
            raw_input: User-supplied query, URL or bare video ID

        Returns:
            NormalizedContent with the model query and source label

        Raises:
            InvalidYouTubeURLError: YouTube link without a video ID
            CaptionsUnavailableError: No usable transcript for the video
            WebpageUnavailableError: Webpage fetch failed
        """
        content_type = classify_input(raw_input)
        self.logger.info(f"Routing query as {content_type.value}: {raw_input[:100]}")

        if content_type == ContentType.YOUTUBE:
            return await self._route_youtube(raw_input)
        if content_type == ContentType.WEBPAGE:
            return await self._route_webpage(raw_input)

        return NormalizedContent(
            query=raw_input,
            content_type=ContentType.TEXT,
            source_info=TEXT_SOURCE_LABEL,
        )

    async def _route_youtube(self, raw_input: str) -> NormalizedContent:
        video_id = extract_youtube_video_id(raw_input)
        if not video_id:
            raise InvalidYouTubeURLError(INVALID_YOUTUBE_URL_MESSAGE)

        try:
            transcript = await self.transcript_service.fetch_transcript(video_id)
        except TranscriptNotFoundError as e:
            raise CaptionsUnavailableError(CAPTIONS_UNAVAILABLE_MESSAGE) from e
        except TranscriptUnavailableError as e:
            raise CaptionsUnavailableError(str(e)) from e

        if len(transcript.text) < self.settings.min_transcript_chars:
            raise CaptionsUnavailableError(CAPTIONS_UNAVAILABLE_MESSAGE)

        if transcript.is_degraded:
            self.logger.warning(f"Using video metadata instead of captions for {video_id}")

        query = YOUTUBE_QUERY_TEMPLATE.format(
            video_id=video_id,
            transcript=transcript.text[: self.settings.transcript_max_chars],
        )
        return NormalizedContent(
            query=query,
            content_type=ContentType.YOUTUBE,
            source_info=f"YouTube Video (ID: {video_id})",
            video_id=video_id,
            transcript_strategy=transcript.strategy,
        )

    async def _route_webpage(self, url: str) -> NormalizedContent:
        try:
            page = await self.webpage_service.extract(url)
        except WebpageFetchError as e:
            self.logger.error(f"Webpage fetch error for {url[:100]}: {e.reason}")
            raise WebpageUnavailableError(
                f"Unable to fetch content from this webpage: {e.reason}"
            ) from e

        query = WEBPAGE_QUERY_TEMPLATE.format(url=url, title=page.title, content=page.text)
        return NormalizedContent(
            query=query,
            content_type=ContentType.WEBPAGE,
            source_info=f"Webpage: {page.title}" if page.title else f"Webpage: {url}",
            source_url=url,
            title=page.title,
        )


def create_content_router(settings: Settings | None = None) -> ContentRouterService:
    """Factory used by FastAPI dependency injection."""
    return ContentRouterService(settings=settings)


__all__ = [
    "CAPTIONS_UNAVAILABLE_MESSAGE",
    "INVALID_YOUTUBE_URL_MESSAGE",
    "CaptionsUnavailableError",
    "ContentRouterService",
    "ContentRoutingError",
    "InvalidYouTubeURLError",
    "WebpageUnavailableError",
    "classify_input",
    "create_content_router",
]
