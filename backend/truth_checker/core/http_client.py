"""
HTTP Fetch Client for Truth Checker

Thin async wrapper around ``requests`` used by every content extractor.
Blocking requests calls run in a worker thread through asyncio.to_thread so
a slow upstream never stalls the event loop. Each call opens and releases
its own connection; no session or pool is shared between requests.

Failures are reported through a small exception hierarchy:
- FetchError: base class, network-level failure
- FetchTimeoutError: the configured timeout elapsed
- UpstreamStatusError: the server answered with a non-2xx status
"""

import asyncio
import logging

from collections.abc import Awaitable, Callable, Mapping

import requests


logger = logging.getLogger(__name__)

# Signature shared by fetch_text and the fakes injected in tests
TextFetcher = Callable[..., Awaitable[str]]


class FetchError(Exception):
    """Raised when a URL cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(reason)


class FetchTimeoutError(FetchError):
    """Raised when a fetch exceeds its timeout."""


class UpstreamStatusError(FetchError):
    """Raised when the upstream server responds with a non-2xx status."""

    def __init__(self, url: str, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        message = f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}"
        super().__init__(url, message)


def _get(url: str, headers: Mapping[str, str] | None, timeout: float | None) -> requests.Response:
    return requests.get(url, headers=dict(headers or {}), timeout=timeout)


async def fetch_text(
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> str:
    """
    Fetch a URL and return its decoded body.

    Args:
        url: Absolute HTTP(S) URL to fetch
        headers: Request headers (User-Agent, Accept-Language, ...)
        timeout: Seconds to wait for the server, None to wait indefinitely

    Returns:
        Response body as text

    Raises:
        FetchTimeoutError: If the timeout elapsed
        UpstreamStatusError: If the response status is not 2xx
        FetchError: For any other network-level failure
    """
    logger.debug(f"Fetching {url[:100]} (timeout={timeout})")

    try:
        response = await asyncio.to_thread(_get, url, headers, timeout)
    except requests.exceptions.Timeout as e:
        raise FetchTimeoutError(url, f"Request timed out after {timeout}s") from e
    except requests.exceptions.ConnectionError as e:
        raise FetchError(url, f"Could not connect to {url}") from e
    except requests.exceptions.RequestException as e:
        raise FetchError(url, f"Request failed: {e!s}") from e

    if not response.ok:
        logger.warning(f"HTTP {response.status_code} for: {url[:100]}")
        raise UpstreamStatusError(url, response.status_code, response.reason or "")

    return response.text


__all__ = [
    "FetchError",
    "FetchTimeoutError",
    "TextFetcher",
    "UpstreamStatusError",
    "fetch_text",
]
