"""
Test suite for the YouTube transcript acquisition pipeline.

Covers the embedded-JSON and timed-text helpers, each strategy in the
fallback chain, the order in which strategies are tried, per-run caching
of the watch page, and the terminal failure when every strategy comes up
empty.
"""

import json
import logging

import pytest

from conftest import (
    CAPTION_TEXT,
    EMBED_TIMEDTEXT_URL,
    EMBED_URL,
    TIMEDTEXT_URL,
    VIDEO_ID,
    WATCH_URL,
    FakeFetcher,
    build_embed_page,
    build_watch_page,
)

from truth_checker.core.http_client import FetchTimeoutError
from truth_checker.models.content import TranscriptStrategyName
from truth_checker.services.transcript_service import (
    CAPTIONS_MARKER,
    INITIAL_DATA_MARKER,
    MANUAL_TRANSCRIPT_MESSAGE,
    SHORT_DESCRIPTION_MARKER,
    TranscriptNotFoundError,
    TranscriptUnavailableError,
    YouTubeTranscriptService,
    find_embedded_json,
    parse_timed_text,
)


METADATA_TEXT = (
    "Video Title: Eiffel Tower Facts\n\n"
    "Video Description: In this video we look at the history of the Eiffel Tower. "
    "Sources are listed below."
)


# =============================================================================
# HELPER TESTS
# =============================================================================


class TestFindEmbeddedJson:
    """Tests for marker-based JSON extraction from page scripts."""

    def test_decodes_object_after_marker(self):
        html = '<script>var x = {"captions": {"a": [1, 2, {"b": "}"}]}, "other": 1};</script>'
        assert find_embedded_json(html, CAPTIONS_MARKER) == {"a": [1, 2, {"b": "}"}]}

    def test_decodes_assignment(self):
        html = '<script>var ytInitialData = {"contents": {}};</script>'
        assert find_embedded_json(html, INITIAL_DATA_MARKER) == {"contents": {}}

    def test_decodes_string_value_with_escapes(self):
        html = '{"shortDescription":"Line one\\nLine \\"two\\""}'
        assert find_embedded_json(html, SHORT_DESCRIPTION_MARKER) == 'Line one\nLine "two"'

    def test_returns_none_without_marker(self):
        assert find_embedded_json("<html></html>", CAPTIONS_MARKER) is None

    def test_skips_undecodable_occurrence(self):
        html = '"captions": undefined; "captions": {"ok": true}'
        assert find_embedded_json(html, CAPTIONS_MARKER) == {"ok": True}

    def test_raises_when_no_occurrence_decodes(self):
        with pytest.raises(json.JSONDecodeError):
            find_embedded_json('"captions": {broken', CAPTIONS_MARKER)


class TestParseTimedText:
    """Tests for timed-text caption flattening."""

    def test_joins_cues_and_decodes_entities(self, timedtext_xml: str):
        assert parse_timed_text(timedtext_xml) == CAPTION_TEXT

    def test_strips_markup_inside_cues(self):
        xml = "<transcript><text>Hello <font color='red'>there</font></text></transcript>"
        assert parse_timed_text(xml) == "Hello there"

    def test_skips_empty_cues(self):
        xml = "<transcript><text>  </text><text>One</text><text></text></transcript>"
        assert parse_timed_text(xml) == "One"

    def test_returns_none_without_cues(self):
        assert parse_timed_text("<transcript></transcript>") is None

    def test_reads_paragraph_format(self):
        xml = '<timedtext><body><p t="0">First cue</p><p t="10">second cue</p></body></timedtext>'
        assert parse_timed_text(xml) == "First cue second cue"


# =============================================================================
# STRATEGY CHAIN TESTS
# =============================================================================


class TestTranscriptStrategies:
    """Tests for each strategy and the order the chain tries them in."""

    def test_strategy_order(self, test_settings):
        service = YouTubeTranscriptService(test_settings, fetcher=FakeFetcher())
        assert [s.name for s in service.strategies] == [
            TranscriptStrategyName.CAPTION_TRACKS,
            TranscriptStrategyName.INITIAL_DATA,
            TranscriptStrategyName.EMBED_PAGE,
            TranscriptStrategyName.VIDEO_METADATA,
        ]

    @pytest.mark.asyncio
    async def test_caption_tracks_success(self, test_settings, timedtext_xml):
        fetcher = FakeFetcher({WATCH_URL: build_watch_page(), TIMEDTEXT_URL: timedtext_xml})
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert result.strategy == TranscriptStrategyName.CAPTION_TRACKS
        assert result.text == CAPTION_TEXT
        assert result.video_id == VIDEO_ID
        assert not result.is_degraded

    @pytest.mark.asyncio
    async def test_caption_hit_short_circuits_chain(self, test_settings, timedtext_xml):
        fetcher = FakeFetcher({WATCH_URL: build_watch_page(), TIMEDTEXT_URL: timedtext_xml})
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        await service.fetch_transcript(VIDEO_ID)

        assert fetcher.call_count(EMBED_URL) == 0
        assert [call["url"] for call in fetcher.calls] == [WATCH_URL, TIMEDTEXT_URL]

    @pytest.mark.asyncio
    async def test_sends_browser_headers(self, test_settings, timedtext_xml):
        fetcher = FakeFetcher({WATCH_URL: build_watch_page(), TIMEDTEXT_URL: timedtext_xml})
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        await service.fetch_transcript(VIDEO_ID)

        for call in fetcher.calls:
            assert call["headers"]["User-Agent"] == test_settings.user_agent
            assert call["headers"]["Accept-Language"] == "en-US,en;q=0.9"
            assert call["timeout"] is None

    @pytest.mark.asyncio
    async def test_embed_page_fallback(self, test_settings, timedtext_xml):
        fetcher = FakeFetcher(
            {
                WATCH_URL: build_watch_page(caption_url=None),
                EMBED_URL: build_embed_page(),
                EMBED_TIMEDTEXT_URL: timedtext_xml,
            }
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert result.strategy == TranscriptStrategyName.EMBED_PAGE
        assert result.text == CAPTION_TEXT

    @pytest.mark.asyncio
    async def test_video_metadata_fallback(self, test_settings):
        fetcher = FakeFetcher(
            {
                WATCH_URL: build_watch_page(caption_url=None),
                EMBED_URL: build_embed_page(caption_url=None),
            }
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert result.strategy == TranscriptStrategyName.VIDEO_METADATA
        assert result.text == METADATA_TEXT
        assert result.is_degraded

    @pytest.mark.asyncio
    async def test_watch_page_fetched_once(self, test_settings):
        fetcher = FakeFetcher(
            {
                WATCH_URL: build_watch_page(caption_url=None, initial_data={"contents": {}}),
                EMBED_URL: build_embed_page(caption_url=None),
            }
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        await service.fetch_transcript(VIDEO_ID)

        assert fetcher.call_count(WATCH_URL) == 1
        assert fetcher.call_count(EMBED_URL) == 1

    @pytest.mark.asyncio
    async def test_failed_watch_page_is_refetched(self, test_settings):
        fetcher = FakeFetcher({WATCH_URL: FetchTimeoutError(WATCH_URL, "timed out")})
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        with pytest.raises(TranscriptUnavailableError):
            await service.fetch_transcript(VIDEO_ID)

        # caption_tracks, initial_data and video_metadata each try again
        assert fetcher.call_count(WATCH_URL) == 3

    @pytest.mark.asyncio
    async def test_short_caption_result_falls_through(self, test_settings):
        short_xml = "<transcript><text>Music</text></transcript>"
        fetcher = FakeFetcher(
            {
                WATCH_URL: build_watch_page(),
                TIMEDTEXT_URL: short_xml,
                EMBED_URL: build_embed_page(caption_url=None),
            }
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert result.strategy == TranscriptStrategyName.VIDEO_METADATA

    @pytest.mark.asyncio
    async def test_caption_track_fetch_failure_falls_through(self, test_settings, timedtext_xml):
        fetcher = FakeFetcher(
            {
                WATCH_URL: build_watch_page(),
                EMBED_URL: build_embed_page(),
                EMBED_TIMEDTEXT_URL: timedtext_xml,
            }
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert fetcher.call_count(TIMEDTEXT_URL) == 1
        assert result.strategy == TranscriptStrategyName.EMBED_PAGE

    @pytest.mark.asyncio
    async def test_malformed_captions_json_is_logged_and_skipped(self, test_settings, caplog):
        watch_page = (
            "<html><head><title>Broken - YouTube</title></head><body>"
            '<script>var p = {"captions": {"playerCaptionsTracklistRenderer": </script>'
            "</body></html>"
        )
        fetcher = FakeFetcher({WATCH_URL: watch_page})
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        with caplog.at_level(logging.WARNING), pytest.raises(TranscriptUnavailableError):
            await service.fetch_transcript(VIDEO_ID)

        assert "[caption_tracks] parse failed" in caplog.text

    @pytest.mark.asyncio
    async def test_initial_data_never_yields_text(self, test_settings):
        initial_data = {
            "contents": {
                "twoColumnWatchNextResults": {
                    "results": {
                        "results": {
                            "contents": [
                                {"videoPrimaryInfoRenderer": {}},
                                {"transcriptRenderer": {"content": "Full transcript " * 10}},
                            ]
                        }
                    }
                }
            }
        }
        fetcher = FakeFetcher(
            {WATCH_URL: build_watch_page(caption_url=None, initial_data=initial_data)}
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert result.strategy == TranscriptStrategyName.VIDEO_METADATA

    @pytest.mark.asyncio
    async def test_missing_title_uses_placeholder(self, test_settings):
        fetcher = FakeFetcher({WATCH_URL: build_watch_page(title=None, caption_url=None)})
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert result.text.startswith("Video Title: Unknown Video\n\n")

    @pytest.mark.asyncio
    async def test_description_truncated(self, test_settings):
        fetcher = FakeFetcher(
            {WATCH_URL: build_watch_page(caption_url=None, description="x" * 2000)}
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        result = await service.fetch_transcript(VIDEO_ID)

        assert result.text.endswith("Video Description: " + "x" * 500)


# =============================================================================
# TERMINAL FAILURE TESTS
# =============================================================================


class TestTranscriptUnavailable:
    """Tests for chain exhaustion."""

    @pytest.mark.asyncio
    async def test_all_strategies_fail(self, test_settings, fake_fetcher):
        service = YouTubeTranscriptService(test_settings, fetcher=fake_fetcher)

        with pytest.raises(TranscriptUnavailableError) as exc_info:
            await service.fetch_transcript(VIDEO_ID)

        assert str(exc_info.value) == MANUAL_TRANSCRIPT_MESSAGE
        assert exc_info.value.video_id == VIDEO_ID
        assert not isinstance(exc_info.value, TranscriptNotFoundError)

    @pytest.mark.asyncio
    async def test_short_metadata_is_not_enough(self, test_settings):
        fetcher = FakeFetcher(
            {WATCH_URL: build_watch_page(title="A - YouTube", caption_url=None, description="")}
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        with pytest.raises(TranscriptUnavailableError):
            await service.fetch_transcript(VIDEO_ID)

    @pytest.mark.asyncio
    async def test_video_without_captions_raises_not_found(self, test_settings):
        fetcher = FakeFetcher(
            {
                WATCH_URL: build_watch_page(title="A - YouTube", caption_url=None, description=""),
                EMBED_URL: build_embed_page(caption_url=None),
            }
        )
        service = YouTubeTranscriptService(test_settings, fetcher=fetcher)

        with pytest.raises(TranscriptNotFoundError) as exc_info:
            await service.fetch_transcript(VIDEO_ID)

        assert exc_info.value.video_id == VIDEO_ID

    def test_manual_message_explains_workaround(self):
        assert MANUAL_TRANSCRIPT_MESSAGE.startswith("Unable to process this YouTube video.")
        assert "Show transcript" in MANUAL_TRANSCRIPT_MESSAGE
        assert "paste it here instead of the URL" in MANUAL_TRANSCRIPT_MESSAGE
