#!/usr/bin/env python3
"""
Query Normalization Script for Truth Checker.

Runs the content router on a single input and prints the source label and
the normalized query that would be sent to the chat model. No model call
is made, so no API key is needed.

Usage:
    python normalize_input.py [options] QUERY

Options:
    --verbose       Display pipeline logs
    --max-chars N   Print at most N characters of the normalized query
    --help          Show this help message and exit

Environment Variables:
    USER_AGENT                  User-Agent sent with outbound fetches
    WEBPAGE_REQUEST_TIMEOUT     Webpage fetch timeout in seconds (default: 10)
    YOUTUBE_REQUEST_TIMEOUT     YouTube fetch timeout in seconds (default: none)
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from truth_checker.config import Settings
from truth_checker.services.content_router_service import (
    ContentRouterService,
    ContentRoutingError,
)
from truth_checker.utils.logger import setup_logging


def parse_arguments() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Normalize a Truth Checker query without calling the chat model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python normalize_input.py "The Great Wall is visible from space"
  python normalize_input.py https://youtu.be/dQw4w9WgXcQ --verbose
  python normalize_input.py https://example.com/article --max-chars 500
        """,
    )

    parser.add_argument("query", help="Plain text, a YouTube link or a webpage URL")

    parser.add_argument("--verbose", "-v", action="store_true", help="Display pipeline logs")

    parser.add_argument(
        "--max-chars",
        type=int,
        default=None,
        help="Print at most this many characters of the normalized query",
    )

    return parser.parse_args()


async def normalize(query: str, max_chars: int | None = None) -> int:
    router = ContentRouterService(settings=Settings())

    try:
        content = await router.route(query)
    except ContentRoutingError as e:
        print(f"Error [{e.error_code}]:\n{e.message}", file=sys.stderr)
        return 1

    normalized = content.query if max_chars is None else content.query[:max_chars]

    print(f"Content type: {content.content_type.value}")
    print(f"Source: {content.source_info}")
    if content.transcript_strategy is not None:
        print(f"Transcript strategy: {content.transcript_strategy.value}")
    print("-" * 60)
    print(normalized)
    return 0


def main() -> int:
    """
    Main entry point for the normalization script.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    args = parse_arguments()

    load_dotenv()
    setup_logging(log_level="debug" if args.verbose else "warning")

    try:
        return asyncio.run(normalize(args.query, args.max_chars))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
