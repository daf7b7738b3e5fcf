"""
Logging Configuration Module for Truth Checker

Provides application-wide logging setup with either human-readable or
structured JSON output, Uvicorn integration, third-party noise reduction
and request-scoped context enrichment via LoggerAdapter.

Usage:
    from truth_checker.utils.logger import add_log_context, setup_logging

    # Initialize logging at application startup
    setup_logging(log_level="info", json_logs=True)

    # Stamp every record of a request with its identifier
    request_logger = add_log_context(logging.getLogger(__name__), request_id="abc123")
    request_logger.info("Routing query")
"""

import json
import logging
import sys
import traceback

from datetime import UTC, datetime
from typing import Any


# =============================================================================
# Constants
# =============================================================================

LOG_LEVEL_MAP: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Third-party loggers held at a quieter level than the application
THIRD_PARTY_LOGGERS: tuple[str, ...] = (
    "urllib3",
    "requests",
    "httpx",
    "httpcore",
    "langchain",
    "langchain_google_genai",
    "google",
    "asyncio",
)

# LogRecord attributes that are not user-supplied context
RESERVED_ATTRS: frozenset[str] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """
    Logging formatter that renders each record as a single JSON object.

    Output contains timestamp, level, logger name and message, plus an
    ``exception`` block when exc_info is set and an ``extra`` block holding
    any context passed through ``extra=`` or a LoggerAdapter.

    Example output:
        {"timestamp":"2025-01-15T10:30:45.123456+00:00","level":"INFO",
         "logger":"truth_checker.services.content_router_service",
         "message":"Detected YouTube URL","extra":{"request_id":"abc123"}}
    """

    def __init__(self, include_source_location: bool = False) -> None:
        super().__init__()
        self.include_source_location = include_source_location

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(
                timespec="microseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_source_location:
            log_entry["source"] = {
                "filename": record.filename,
                "lineno": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            log_entry["exception"] = {
                "type": exc_type.__name__ if exc_type else "Unknown",
                "message": str(exc_value) if exc_value else "",
                "traceback": "".join(traceback.format_exception(*record.exc_info)),
            }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if not key.startswith("_") and key not in RESERVED_ATTRS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        # default=str keeps non-serializable context values from breaking output
        return json.dumps(log_entry, default=str, ensure_ascii=False, separators=(",", ":"))


class StandardFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    DEFAULT_FORMAT: str = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
    DEFAULT_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt or self.DEFAULT_FORMAT, datefmt=datefmt or self.DEFAULT_DATE_FORMAT)


# =============================================================================
# Application Logging Setup
# =============================================================================


def get_log_level_from_string(level_str: str) -> int:
    """Convert a log level string to its logging constant (INFO if unknown)."""
    return LOG_LEVEL_MAP.get(level_str.upper(), logging.INFO)


def setup_logging(
    log_level: str = "info",
    json_logs: bool = False,
    third_party_level: str = "warning",
) -> None:
    """
    Configure the root logger, Uvicorn loggers and third-party log levels.

    Called once from the FastAPI lifespan. Existing root handlers are
    replaced so repeated calls (e.g. in tests) do not duplicate output.

    Args:
        log_level: Application log level name
        json_logs: Use JSONFormatter instead of StandardFormatter
        third_party_level: Level applied to noisy library loggers
    """
    level = get_log_level_from_string(log_level)

    formatter: logging.Formatter
    if json_logs:
        formatter = JSONFormatter(include_source_location=level <= logging.DEBUG)
    else:
        formatter = StandardFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for uvicorn_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(uvicorn_name)
        uvicorn_logger.setLevel(level)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    third_party_log_level = get_log_level_from_string(third_party_level)
    for logger_name in THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(third_party_log_level)

    logging.getLogger(__name__).info(
        f"Logging configured: level={log_level.upper()}, json={json_logs}"
    )


# =============================================================================
# Context Enrichment
# =============================================================================


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its context into per-call ``extra`` values."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        for key, value in self.extra.items():
            extra.setdefault(key, value)
        kwargs["extra"] = extra
        return msg, kwargs


def add_log_context(logger: logging.Logger, **context: Any) -> ContextLoggerAdapter:
    """
    Wrap a logger so every record carries the given context fields.

    Example:
        request_logger = add_log_context(logger, request_id="abc-123")
        request_logger.info("Fetching webpage", extra={"url": url})
        # record extra: {"request_id": "abc-123", "url": "..."}
    """
    return ContextLoggerAdapter(logger, context)


__all__ = [
    "LOG_LEVEL_MAP",
    "ContextLoggerAdapter",
    "JSONFormatter",
    "StandardFormatter",
    "add_log_context",
    "get_log_level_from_string",
    "setup_logging",
]
