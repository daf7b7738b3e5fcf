"""
Truth Checker API - FastAPI Application Entry Point.

Initializes the FastAPI application with logging, CORS and request-timing
middleware, and registers the versioned API routers.

Endpoints:
- GET /: API information
- GET /health: Liveness check
- /api/v1/*: Versioned API (POST /api/v1/verify)

Run locally with:
    uvicorn truth_checker.main:app --reload --port 3000
"""

import logging
import time
import uuid

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import uvicorn

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from truth_checker import __app_name__, __version__
from truth_checker.api.v1 import api_router, get_loaded_routers
from truth_checker.config import get_settings
from truth_checker.utils.logger import setup_logging


logger = logging.getLogger(__name__)

# Responses at or above this status are logged as warnings
HTTP_ERROR_THRESHOLD = 400


# =============================================================================
# Application Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Configure logging on startup and log the effective configuration.

    The service holds no connections or pools, so shutdown only logs.
    """
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

    logger.info("=" * 60)
    logger.info(f"{__app_name__} API v{__version__} Starting...")
    logger.info("=" * 60)
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug Mode: {settings.debug}")
    logger.info(f"AI Provider: {settings.default_ai_provider} ({settings.default_ai_model})")
    logger.info(f"Routers: {', '.join(get_loaded_routers()) or 'none'}")
    logger.info(f"Health check: http://localhost:{settings.port}/health")

    yield

    logger.info(f"{__app_name__} API Shutdown Complete")


# =============================================================================
# FastAPI Application Instance
# =============================================================================

_settings = get_settings()

app = FastAPI(
    title="Truth Checker API",
    description=(
        "AI-powered fact checking for claims, YouTube videos and webpages. "
        "Links are normalized into transcripts or page text before being "
        "verified against current sources."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    debug=_settings.debug,
)


# =============================================================================
# Middleware Configuration
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next) -> Response:
    """
    Log each request with its timing and tag the response.

    Adds X-Request-ID and X-Process-Time headers. The request ID is also
    stored on ``request.state`` for handlers that log with context.
    """
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id

    start_time = time.perf_counter()
    logger.debug(f"Request started: {request.method} {request.url.path} [Request-ID: {request_id}]")

    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "Request failed: %s %s [Request-ID: %s]",
            request.method,
            request.url.path,
            request_id,
        )
        raise

    process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
    response.headers["X-Process-Time"] = f"{process_time_ms}ms"
    response.headers["X-Request-ID"] = request_id

    log_level = logging.DEBUG if response.status_code < HTTP_ERROR_THRESHOLD else logging.WARNING
    logger.log(
        log_level,
        f"Request completed: {request.method} {request.url.path} "
        f"[Status: {response.status_code}] [Time: {process_time_ms}ms] "
        f"[Request-ID: {request_id}]",
    )

    return response


# =============================================================================
# API Router Registration
# =============================================================================

app.include_router(api_router, prefix="/api/v1")


# =============================================================================
# Core Endpoints
# =============================================================================


@app.get("/", tags=["root"])
async def root() -> dict[str, Any]:
    """API information and documentation links."""
    return {
        "name": "Truth Checker API",
        "version": __version__,
        "description": "AI-powered fact checking for claims, YouTube videos and webpages",
        "docs": "/docs",
        "verify": "/api/v1/verify",
    }


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, Any]:
    """
    Liveness check.

    Returns immediately without touching the chat model or the network.

    Example Response:
        {
            "status": "healthy",
            "timestamp": "2025-01-15T10:30:00.000000+00:00",
            "version": "2.0.0"
        }
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": __version__,
    }


# =============================================================================
# Main Execution Block
# =============================================================================

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "truth_checker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level,
    )
