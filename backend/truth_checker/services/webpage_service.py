"""
Webpage Extraction Service Module for Truth Checker

Fetches an HTTP(S) page and reduces it to bounded plain text plus its title
for inclusion in a fact-checking query.
"""

import logging

from truth_checker.config import Settings, get_settings
from truth_checker.core.http_client import (
    FetchError,
    TextFetcher,
    UpstreamStatusError,
    fetch_text,
)
from truth_checker.models.content import WebpageContent
from truth_checker.utils.html_text import extract_title, html_to_text


class WebpageFetchError(Exception):
    """Raised when a webpage cannot be fetched."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)


class WebpageExtractorService:
    """
    Service that fetches webpages and extracts readable text.

    Script, style and page-chrome elements are discarded, whitespace is
    collapsed and the text is cut to ``webpage_max_chars``. The title is
    read from the raw document, so it survives removal of <header>.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fetcher: TextFetcher | None = None,
    ) -> None:
        self.logger = logging.getLogger(__name__)
        self.settings = settings or get_settings()
        self._fetcher = fetcher or fetch_text

    async def extract(self, url: str) -> WebpageContent:
        """
        Fetch a webpage and extract its text and title.

        Args:
            url: Absolute HTTP(S) URL

        Returns:
            WebpageContent with collapsed text and trimmed title

        Raises:
            WebpageFetchError: On timeout, network failure or non-2xx status
        """
        self.logger.info(f"Fetching webpage content from: {url[:100]}")

        try:
            html = await self._fetcher(
                url,
                headers=self.settings.fetch_headers,
                timeout=self.settings.webpage_request_timeout,
            )
        except UpstreamStatusError as e:
            raise WebpageFetchError(url, e.reason, status_code=e.status_code) from e
        except FetchError as e:
            raise WebpageFetchError(url, e.reason) from e

        text = html_to_text(html)[: self.settings.webpage_max_chars]
        title = extract_title(html)

        self.logger.info(f"Extracted {len(text)} characters from webpage (title: {title[:80]!r})")
        return WebpageContent(url=url, text=text, title=title)


__all__ = [
    "WebpageExtractorService",
    "WebpageFetchError",
]
