"""
Utilities Package for the Truth Checker backend.

Modules:
--------
html_text:
    HTML entity decoding, HTML-to-text reduction and title extraction.

youtube_url:
    Video ID extraction from YouTube URLs and bare IDs.

logger:
    Structured logging configuration (JSON and human-readable formatters,
    Uvicorn integration, request context adapters).
"""

from truth_checker.utils.html_text import (
    collapse_whitespace,
    decode_html_entities,
    extract_title,
    html_to_text,
)
from truth_checker.utils.logger import add_log_context, setup_logging
from truth_checker.utils.youtube_url import extract_youtube_video_id, is_valid_video_id


__all__ = [
    "add_log_context",
    "collapse_whitespace",
    "decode_html_entities",
    "extract_title",
    "extract_youtube_video_id",
    "html_to_text",
    "is_valid_video_id",
    "setup_logging",
]
