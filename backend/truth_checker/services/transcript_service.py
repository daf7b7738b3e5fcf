"""
YouTube Transcript Service Module for Truth Checker

Obtains text for a YouTube video by walking an ordered chain of independent
strategies and stopping at the first one that produces usable text:

1. caption_tracks - caption track list embedded in the watch page
2. initial_data   - transcript renderer inside the watch page's ytInitialData
3. embed_page     - caption track list embedded in the player embed page
4. video_metadata - degraded title + description summary from the watch page

Every fetch and parse is guarded on its own: an HTTP error, network failure
or malformed embedded JSON only ends the current strategy. Exhausting the
chain raises TranscriptUnavailableError, whose message asks the user to
paste a transcript by hand. When no strategy failed along the way the
TranscriptNotFoundError subclass is raised instead.
"""

import json
import logging
import re

from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple

from bs4 import BeautifulSoup

from truth_checker.config import Settings, get_settings
from truth_checker.core.http_client import FetchError, TextFetcher, fetch_text
from truth_checker.models.content import TranscriptResult, TranscriptStrategyName
from truth_checker.utils.html_text import collapse_whitespace, decode_html_entities, extract_title


# =============================================================================
# CONSTANTS
# =============================================================================

WATCH_URL_TEMPLATE: str = "https://www.youtube.com/watch?v={video_id}"
EMBED_URL_TEMPLATE: str = "https://www.youtube.com/embed/{video_id}"

# Markers that precede JSON values embedded in YouTube page scripts
CAPTIONS_MARKER = re.compile(r'"captions":\s*')
INITIAL_DATA_MARKER = re.compile(r"var ytInitialData\s*=\s*")
CAPTION_TRACKS_MARKER = re.compile(r'"captionTracks":\s*')
SHORT_DESCRIPTION_MARKER = re.compile(r'"shortDescription":\s*')

YOUTUBE_TITLE_SUFFIX: str = " - YouTube"
UNKNOWN_VIDEO_TITLE: str = "Unknown Video"

MANUAL_TRANSCRIPT_MESSAGE: str = """Unable to process this YouTube video.

WHAT YOU CAN DO INSTEAD:
1. Go to the YouTube video
2. If captions are available, click the "..." menu → "Show transcript"
3. Copy the transcript text and paste it here instead of the URL
4. Or describe the main claims from the video in your own words

This approach will give you better fact-checking results."""

_JSON_DECODER = json.JSONDecoder()

# Errors raised while reading decoded page data; JSONDecodeError is a ValueError
PARSE_ERRORS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    IndexError,
    TypeError,
    AttributeError,
)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class TranscriptServiceError(Exception):
    """Base exception for transcript service errors."""


class TranscriptUnavailableError(TranscriptServiceError):
    """Raised when no strategy produced usable text for a video."""

    def __init__(self, video_id: str, message: str = MANUAL_TRANSCRIPT_MESSAGE) -> None:
        self.video_id = video_id
        super().__init__(message)


class TranscriptNotFoundError(TranscriptUnavailableError):
    """Raised when every strategy ran cleanly but none found usable text."""


# =============================================================================
# PAGE PARSING HELPERS
# =============================================================================


def find_embedded_json(html: str, marker: re.Pattern[str]) -> Any | None:
    """
    Decode the JSON value that follows a marker in an HTML page.

    Every occurrence of the marker is tried in order and the first value
    that decodes is returned.

    Returns:
        The decoded value, or None when the marker does not occur

    Raises:
        json.JSONDecodeError: If the marker occurs but no value decodes
    """
    last_error: json.JSONDecodeError | None = None

    for match in marker.finditer(html):
        try:
            value, _ = _JSON_DECODER.raw_decode(html, match.end())
        except json.JSONDecodeError as e:
            last_error = e
            continue
        return value

    if last_error is not None:
        raise last_error
    return None


def parse_timed_text(xml_text: str) -> str | None:
    """
    Flatten a timed-text caption document into a single line of text.

    Markup inside each cue is stripped, entities are decoded (cue text is
    frequently entity-encoded twice) and cues are joined with single spaces.

    Returns:
        Joined cue text, or None when the document holds no cues
    """
    soup = BeautifulSoup(xml_text, "html.parser")
    nodes = soup.find_all("text") or soup.find_all("p")

    cues: list[str] = []
    for node in nodes:
        cue = collapse_whitespace(decode_html_entities(node.get_text(separator=" ")))
        if cue:
            cues.append(cue)

    return " ".join(cues) if cues else None


def first_track_url(tracks: Any) -> str | None:
    """Return the baseUrl of the first caption track, if any."""
    if not isinstance(tracks, list) or not tracks:
        return None
    first = tracks[0]
    if not isinstance(first, dict):
        return None
    return first.get("baseUrl") or None


# =============================================================================
# STRATEGY PLUMBING
# =============================================================================


class VideoPages:
    """
    Pages fetched for one video during a single pipeline run.

    The watch page is fetched lazily and kept once a fetch succeeds, so
    strategies sharing it issue at most one successful request. A failed
    fetch is not remembered: a later strategy will try again.
    """

    def __init__(self, video_id: str, fetch: Callable[[str], Awaitable[str]]) -> None:
        self.video_id = video_id
        self._fetch = fetch
        self._watch_html: str | None = None

    @property
    def watch_url(self) -> str:
        return WATCH_URL_TEMPLATE.format(video_id=self.video_id)

    @property
    def embed_url(self) -> str:
        return EMBED_URL_TEMPLATE.format(video_id=self.video_id)

    async def watch_page(self) -> str:
        if self._watch_html is None:
            self._watch_html = await self._fetch(self.watch_url)
        return self._watch_html

    async def embed_page(self) -> str:
        return await self._fetch(self.embed_url)


class TranscriptStrategy(NamedTuple):
    """One step of the acquisition chain: returns text or None for no result."""

    name: TranscriptStrategyName
    attempt: Callable[[VideoPages], Awaitable[str | None]]


# =============================================================================
# TRANSCRIPT SERVICE
# =============================================================================


class YouTubeTranscriptService:
    """
    Service that turns a YouTube video ID into text for fact checking.

    Strategies run strictly one after another. The first result of at
    least ``min_transcript_chars`` characters wins; anything shorter, any
    fetch failure and any parse failure moves on to the next strategy.

    Example:
        >>> service = YouTubeTranscriptService()
        >>> result = await service.fetch_transcript("dQw4w9WgXcQ")
        >>> result.strategy.value
        'caption_tracks'
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fetcher: TextFetcher | None = None,
    ) -> None:
        """
        Initialize the transcript service.

        Args:
            settings: Application settings (defaults to get_settings())
            fetcher: Async text fetcher (defaults to http_client.fetch_text)
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings or get_settings()
        self._fetcher = fetcher or fetch_text

        self.strategies: tuple[TranscriptStrategy, ...] = (
            TranscriptStrategy(TranscriptStrategyName.CAPTION_TRACKS, self._from_caption_tracks),
            TranscriptStrategy(TranscriptStrategyName.INITIAL_DATA, self._from_initial_data),
            TranscriptStrategy(TranscriptStrategyName.EMBED_PAGE, self._from_embed_page),
            TranscriptStrategy(TranscriptStrategyName.VIDEO_METADATA, self._from_video_metadata),
        )

    async def fetch_transcript(self, video_id: str) -> TranscriptResult:
        """
        Run the strategy chain for a video.

        Args:
            video_id: Validated 11-character YouTube video ID

        Returns:
            TranscriptResult with the text and the strategy that produced it

        Raises:
            TranscriptNotFoundError: If every strategy ran but found no usable text
            TranscriptUnavailableError: If the chain ended with fetch or parse failures
        """
        self.logger.info(f"Attempting to get transcript for video: {video_id}")
        pages = VideoPages(video_id, self._fetch_youtube)
        min_chars = self.settings.min_transcript_chars
        had_errors = False

        for strategy in self.strategies:
            try:
                text = await strategy.attempt(pages)
            except FetchError as e:
                self.logger.warning(f"[{strategy.name.value}] fetch failed for {video_id}: {e}")
                had_errors = True
                continue
            except PARSE_ERRORS as e:
                self.logger.warning(f"[{strategy.name.value}] parse failed for {video_id}: {e}")
                had_errors = True
                continue

            if text and len(text) >= min_chars:
                self.logger.info(
                    f"Transcript for {video_id} obtained via {strategy.name.value} "
                    f"({len(text)} characters)"
                )
                return TranscriptResult(video_id=video_id, text=text, strategy=strategy.name)

            self.logger.info(f"[{strategy.name.value}] no usable text for {video_id}")

        self.logger.warning(f"All transcript strategies exhausted for video: {video_id}")
        if had_errors:
            raise TranscriptUnavailableError(video_id)
        raise TranscriptNotFoundError(video_id)

    async def _fetch_youtube(self, url: str) -> str:
        return await self._fetcher(
            url,
            headers=self.settings.fetch_headers,
            timeout=self.settings.youtube_request_timeout,
        )

    async def _fetch_caption_track(self, base_url: str) -> str | None:
        xml_text = await self._fetch_youtube(base_url)
        return parse_timed_text(xml_text)

    # =========================================================================
    # STRATEGIES
    # =========================================================================

    async def _from_caption_tracks(self, pages: VideoPages) -> str | None:
        html = await pages.watch_page()
        captions = find_embedded_json(html, CAPTIONS_MARKER)
        if not isinstance(captions, dict):
            return None

        renderer = captions.get("playerCaptionsTracklistRenderer") or {}
        track_url = first_track_url(renderer.get("captionTracks"))
        if not track_url:
            return None

        return await self._fetch_caption_track(track_url)

    async def _from_initial_data(self, pages: VideoPages) -> str | None:
        html = await pages.watch_page()
        data = find_embedded_json(html, INITIAL_DATA_MARKER)
        if not isinstance(data, dict):
            return None

        contents = (
            data.get("contents", {})
            .get("twoColumnWatchNextResults", {})
            .get("results", {})
            .get("results", {})
            .get("contents")
        ) or []

        for node in contents:
            if isinstance(node, dict) and (
                "transcriptRenderer" in node or "videoTranscriptRenderer" in node
            ):
                # TODO: follow the renderer's getTranscriptEndpoint to read cue segments
                self.logger.debug(f"Transcript renderer present for {pages.video_id}")
                return None

        return None

    async def _from_embed_page(self, pages: VideoPages) -> str | None:
        html = await pages.embed_page()
        track_url = first_track_url(find_embedded_json(html, CAPTION_TRACKS_MARKER))
        if not track_url:
            return None

        return await self._fetch_caption_track(track_url)

    async def _from_video_metadata(self, pages: VideoPages) -> str | None:
        html = await pages.watch_page()

        title = extract_title(html)
        if title.endswith(YOUTUBE_TITLE_SUFFIX):
            title = title[: -len(YOUTUBE_TITLE_SUFFIX)]
        title = title or UNKNOWN_VIDEO_TITLE

        description = find_embedded_json(html, SHORT_DESCRIPTION_MARKER)
        if not isinstance(description, str):
            description = ""
        description = re.sub(r"\r?\n", " ", description)[: self.settings.description_max_chars]

        video_info = f"Video Title: {title}\n\nVideo Description: {description}"
        if len(video_info) > 50:
            return video_info
        return None


__all__ = [
    "MANUAL_TRANSCRIPT_MESSAGE",
    "TranscriptServiceError",
    "TranscriptNotFoundError",
    "TranscriptStrategy",
    "TranscriptUnavailableError",
    "VideoPages",
    "YouTubeTranscriptService",
    "find_embedded_json",
    "parse_timed_text",
]
