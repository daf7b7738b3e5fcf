"""
Pytest Configuration and Test Fixtures for the Truth Checker Backend

This module provides shared fixtures including:
- Settings instances isolated from the local .env file
- A recording fake fetcher standing in for outbound HTTP
- Sample YouTube watch/embed pages and timed-text caption documents
- Sample webpages
- FastAPI TestClient with dependency overrides for the verify endpoint

No test touches the network: services receive the fake fetcher, and the
HTTP client tests patch requests.get.
"""

import json

from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest

from fastapi.testclient import TestClient

from truth_checker.api.v1.verify import get_content_router, get_fact_check_service
from truth_checker.config import Settings, get_settings
from truth_checker.core.http_client import UpstreamStatusError
from truth_checker.main import app
from truth_checker.services.content_router_service import ContentRouterService
from truth_checker.services.fact_check_service import FactCheckService


# ==============================================================================
# Pytest Configuration
# ==============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """
    Register custom markers for test categorization.

    Markers defined:
    - unit: isolated tests with no external dependencies
    - integration: tests exercising the FastAPI application end to end
    """
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ==============================================================================
# Constants
# ==============================================================================

VIDEO_ID = "dQw4w9WgXcQ"
WATCH_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"
EMBED_URL = f"https://www.youtube.com/embed/{VIDEO_ID}"
TIMEDTEXT_URL = f"https://www.youtube.com/api/timedtext?v={VIDEO_ID}&lang=en"
EMBED_TIMEDTEXT_URL = f"https://www.youtube.com/api/timedtext?v={VIDEO_ID}&lang=en&embed=1"

CAPTION_TEXT = (
    "The Eiffel Tower was completed in 1889 and it's 330 metres tall & made of wrought iron."
)

VIDEO_DESCRIPTION = (
    "In this video we look at the history of the Eiffel Tower.\n"
    "Sources are listed below."
)


# ==============================================================================
# Fake Fetcher
# ==============================================================================


class FakeFetcher:
    """
    Async stand-in for http_client.fetch_text.

    Responses are looked up by exact URL. A value that is an exception is
    raised instead of returned; unknown URLs answer with HTTP 404. Every
    call is recorded with its headers and timeout.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[dict[str, Any]] = []

    async def __call__(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        response = self.responses.get(url)
        if response is None:
            raise UpstreamStatusError(url, 404, "Not Found")
        if isinstance(response, Exception):
            raise response
        return response

    def call_count(self, url: str) -> int:
        return sum(1 for call in self.calls if call["url"] == url)


# ==============================================================================
# Page Builders
# ==============================================================================


def build_watch_page(
    *,
    title: str | None = "Eiffel Tower Facts - YouTube",
    caption_url: str | None = TIMEDTEXT_URL,
    description: str | None = VIDEO_DESCRIPTION,
    initial_data: dict[str, Any] | None = None,
) -> str:
    """Build a minimal YouTube watch page with embedded player JSON."""
    player_response: dict[str, Any] = {"videoDetails": {"videoId": VIDEO_ID}}
    if caption_url is not None:
        player_response["captions"] = {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": [{"baseUrl": caption_url, "languageCode": "en"}]
            }
        }
    if description is not None:
        player_response["videoDetails"]["shortDescription"] = description

    head = f"<title>{title}</title>" if title is not None else ""
    scripts = [f"<script>var ytInitialPlayerResponse = {json.dumps(player_response)};</script>"]
    if initial_data is not None:
        scripts.append(f"<script>var ytInitialData = {json.dumps(initial_data)};</script>")

    return f"<html><head>{head}</head><body>{''.join(scripts)}</body></html>"


def build_embed_page(caption_url: str | None = EMBED_TIMEDTEXT_URL) -> str:
    """Build a minimal YouTube embed page."""
    if caption_url is None:
        return "<html><head><title>YouTube</title></head><body></body></html>"
    tracks = json.dumps([{"baseUrl": caption_url, "languageCode": "en"}])
    return (
        "<html><head><title>YouTube</title></head><body>"
        f'<script>ytcfg.set({{"PLAYER_VARS": {{"captionTracks":{tracks}}}}});</script>'
        "</body></html>"
    )


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """
    Create a Settings instance with test-specific configuration values.

    The .env file is ignored so local developer configuration cannot leak
    into test results.
    """
    return Settings(
        _env_file=None,
        app_env="testing",
        google_api_key="test-google-key",
        default_ai_provider="google",
        default_ai_model="gemini-2.0-flash-exp",
    )


@pytest.fixture
def development_settings(test_settings: Settings) -> Settings:
    """Settings with app_env=development (error details exposed)."""
    return test_settings.model_copy(update={"app_env": "development"})


# ==============================================================================
# Fetch Fixtures
# ==============================================================================


@pytest.fixture
def timedtext_xml() -> str:
    """Timed-text caption document with double-encoded entities."""
    return (
        '<?xml version="1.0" encoding="utf-8" ?><transcript>'
        '<text start="0" dur="2.5">The Eiffel Tower was completed in 1889</text>'
        '<text start="2.5" dur="3">and it&amp;#39;s 330 metres tall &amp;amp; made</text>'
        '<text start="5.5" dur="1.5">\n  of wrought iron.  </text>'
        "</transcript>"
    )


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    """Empty fake fetcher; every URL answers 404 until responses are added."""
    return FakeFetcher()


@pytest.fixture
def sample_webpage() -> str:
    """Article page with page chrome and scripts around the content."""
    return """<!DOCTYPE html>
<html>
<head>
  <title>  Moon Landing Facts  </title>
  <style>body { color: red; }</style>
  <script>evil()</script>
</head>
<body>
  <header><h1>Site Header</h1></header>
  <nav><a href="/">Home</a> <a href="/about">About</a></nav>
  <main>
    <article>
      <p>Apollo 11 landed on the Moon on   July 20, 1969.</p>
      <p>Neil Armstrong was the <b>first</b> person to walk on its surface.</p>
    </article>
  </main>
  <aside>Related stories</aside>
  <footer>Copyright 2024</footer>
</body>
</html>"""


# ==============================================================================
# FastAPI Fixtures
# ==============================================================================


@pytest.fixture
def mock_content_router() -> AsyncMock:
    """Content router whose route() is an AsyncMock."""
    return AsyncMock(spec=ContentRouterService)


@pytest.fixture
def mock_fact_check_service() -> AsyncMock:
    """Fact check service whose verify() is an AsyncMock."""
    service = AsyncMock(spec=FactCheckService)
    service.verify.return_value = "## VERDICT\nTRUE\n\n## CONFIDENCE_SCORE\n95"
    return service


@pytest.fixture
def test_client(
    test_settings: Settings,
    mock_content_router: AsyncMock,
    mock_fact_check_service: AsyncMock,
) -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient with the verify endpoint's dependencies overridden.

    Overrides are removed after each test.
    """
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_content_router] = lambda: mock_content_router
    app.dependency_overrides[get_fact_check_service] = lambda: mock_fact_check_service
    yield TestClient(app)
    app.dependency_overrides.clear()
