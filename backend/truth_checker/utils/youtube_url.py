"""
YouTube URL Utilities for Truth Checker

Recovers the 11-character video ID from the many URL shapes YouTube links
come in (watch, short-link, embed, legacy /v/, shorts, mobile, music) as
well as a bare ID pasted on its own.
"""

import logging
import re

from typing import NamedTuple


logger = logging.getLogger(__name__)

# YouTube video ID standard length
YOUTUBE_VIDEO_ID_LENGTH: int = 11

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")


class YouTubeURLPattern(NamedTuple):
    """A named URL shape whose first capture group is the video ID."""

    name: str
    regex: re.Pattern[str]


# Order matters: several shapes are special cases of later ones.
YOUTUBE_URL_PATTERNS: tuple[YouTubeURLPattern, ...] = (
    YouTubeURLPattern("watch", re.compile(r"(?:youtube\.com/watch\?v=)([a-zA-Z0-9_-]{11})")),
    YouTubeURLPattern(
        "watch_query", re.compile(r"(?:youtube\.com/watch\?.*[&?]v=)([a-zA-Z0-9_-]{11})")
    ),
    YouTubeURLPattern("short_link", re.compile(r"(?:youtu\.be/)([a-zA-Z0-9_-]{11})")),
    YouTubeURLPattern("embed", re.compile(r"(?:youtube\.com/embed/)([a-zA-Z0-9_-]{11})")),
    YouTubeURLPattern("legacy_v", re.compile(r"(?:youtube\.com/v/)([a-zA-Z0-9_-]{11})")),
    YouTubeURLPattern("shorts", re.compile(r"(?:youtube\.com/shorts/)([a-zA-Z0-9_-]{11})")),
    YouTubeURLPattern("mobile", re.compile(r"(?:m\.youtube\.com/watch\?v=)([a-zA-Z0-9_-]{11})")),
    YouTubeURLPattern(
        "music", re.compile(r"(?:music\.youtube\.com/watch\?v=)([a-zA-Z0-9_-]{11})")
    ),
    YouTubeURLPattern("bare_id", re.compile(r"^([a-zA-Z0-9_-]{11})$")),
)

# Searched against the uncleaned input when no ordered pattern matches
FLEXIBLE_V_PARAM_PATTERN = re.compile(r"[?&]v=([a-zA-Z0-9_-]{11})")


def is_valid_video_id(candidate: str | None) -> bool:
    """Check that a candidate is exactly 11 characters from [A-Za-z0-9_-]."""
    return bool(candidate) and VIDEO_ID_PATTERN.match(candidate) is not None


def extract_youtube_video_id(raw_input: str | None) -> str | None:
    """
    Extract the video ID from a YouTube URL or bare ID.

    Everything from the first ``&`` onward is dropped before the ordered
    patterns are tried, so tracking parameters never interfere. When no
    pattern matches, the original input is searched for a ``v=`` parameter
    in any position.

    Args:
        raw_input: User-supplied string, possibly a URL

    Returns:
        11-character video ID string, or None if extraction fails

    Example:
        >>> extract_youtube_video_id("https://youtu.be/dQw4w9WgXcQ?t=42")
        'dQw4w9WgXcQ'
        >>> extract_youtube_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42")
        'dQw4w9WgXcQ'
    """
    if not raw_input or not isinstance(raw_input, str):
        return None

    raw_input = raw_input.strip()
    cleaned = raw_input.split("&", 1)[0]

    for pattern in YOUTUBE_URL_PATTERNS:
        match = pattern.regex.search(cleaned)
        if match and is_valid_video_id(match.group(1)):
            video_id = match.group(1)
            logger.info(f"Extracted video ID {video_id} via '{pattern.name}' pattern")
            return video_id

    match = FLEXIBLE_V_PARAM_PATTERN.search(raw_input)
    if match and is_valid_video_id(match.group(1)):
        video_id = match.group(1)
        logger.info(f"Extracted video ID {video_id} via flexible v= match")
        return video_id

    logger.warning(f"Could not extract YouTube video ID from input: {raw_input[:100]}")
    return None


__all__ = [
    "YOUTUBE_URL_PATTERNS",
    "YOUTUBE_VIDEO_ID_LENGTH",
    "YouTubeURLPattern",
    "extract_youtube_video_id",
    "is_valid_video_id",
]
