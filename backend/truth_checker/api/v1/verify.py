"""
FastAPI Router for the Verification Endpoint.

Endpoints:
    POST /verify - Fact-check a claim, a YouTube video or a webpage

The raw query is normalized by the content router (YouTube links become
transcripts, webpage URLs become extracted text) and the result is sent to
the fact check service. The model's report is returned verbatim together
with provenance metadata.

Error responses:
    400 - The query could not be routed (bad YouTube link, no captions,
          unreachable webpage)
    422 - Empty or missing query
    503 - The chat model could not be initialized
    500 - The chat model call failed
"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status

from truth_checker.config import Settings, get_settings
from truth_checker.models.verification import (
    ErrorResponse,
    VerifyMetadata,
    VerifyRequest,
    VerifyResponse,
)
from truth_checker.services.content_router_service import (
    ContentRouterService,
    ContentRoutingError,
    create_content_router,
)
from truth_checker.services.fact_check_service import (
    FactCheckError,
    FactCheckService,
    ProviderInitializationError,
    create_fact_check_service,
)
from truth_checker.utils.logger import add_log_context


logger = logging.getLogger(__name__)

router = APIRouter()

# =============================================================================
# Constants
# =============================================================================

API_KEY_ERROR_MESSAGE = "API configuration error. Please check your Google AI API key."
QUOTA_ERROR_MESSAGE = "API usage limit exceeded. Please try again later."
NETWORK_ERROR_MESSAGE = "Network error. Please check your internet connection and try again."
GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


# =============================================================================
# Dependencies
# =============================================================================


def get_content_router(settings: Settings = Depends(get_settings)) -> ContentRouterService:
    """Dependency providing a ContentRouterService."""
    return create_content_router(settings)


def get_fact_check_service(settings: Settings = Depends(get_settings)) -> FactCheckService:
    """Dependency providing a FactCheckService."""
    return create_fact_check_service(settings)


# =============================================================================
# Helpers
# =============================================================================


def classify_error_message(error: Exception) -> tuple[str, str]:
    """
    Map a model failure onto an error code and a user-facing message.

    Classification is by keywords in the underlying error message.
    """
    text = str(error).lower()
    if "api key" in text or "api_key" in text:
        return "api_configuration_error", API_KEY_ERROR_MESSAGE
    if "quota" in text or "limit" in text:
        return "api_limit_exceeded", QUOTA_ERROR_MESSAGE
    if "network" in text or "fetch" in text:
        return "network_error", NETWORK_ERROR_MESSAGE
    return "processing_error", GENERIC_ERROR_MESSAGE


def build_error_detail(error: Exception, settings: Settings) -> dict[str, str]:
    """Build the HTTPException detail for a model failure."""
    error_code, message = classify_error_message(error)
    detail = {"error": error_code, "message": message}
    if settings.is_development:
        detail["details"] = str(error)
    return detail


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/verify",
    response_model=VerifyResponse,
    status_code=status.HTTP_200_OK,
    summary="Fact-check a claim, YouTube video or webpage",
    responses={
        400: {"model": ErrorResponse, "description": "Query could not be routed"},
        500: {"model": ErrorResponse, "description": "Fact check failed"},
        503: {"model": ErrorResponse, "description": "Chat model unavailable"},
    },
)
async def verify(
    body: VerifyRequest,
    request: Request,
    content_router: ContentRouterService = Depends(get_content_router),
    fact_check_service: FactCheckService = Depends(get_fact_check_service),
    settings: Settings = Depends(get_settings),
) -> VerifyResponse:
    """
    Verify a user query.

    Args:
        body: Request body holding the raw query
        request: Incoming request (carries the request ID)
        content_router: Injected content router
        fact_check_service: Injected fact check service
        settings: Application settings

    Returns:
        VerifyResponse with the model's report and provenance metadata

    Raises:
        HTTPException: 400 for routing failures, 503/500 for model failures
    """
    start_time = time.perf_counter()
    request_logger = add_log_context(
        logger, request_id=getattr(request.state, "request_id", None)
    )
    request_logger.info(f"Received query: {body.query[:100]}")

    try:
        content = await content_router.route(body.query)
    except ContentRoutingError as e:
        request_logger.warning(f"Routing failed [{e.error_code}]: {e.message[:200]}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": e.error_code, "message": e.message},
        ) from e

    request_logger.info(f"Routed as {content.content_type.value}: {content.source_info}")

    try:
        result = await fact_check_service.verify(content.query)
    except ProviderInitializationError as e:
        request_logger.error(f"Chat model initialization failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=build_error_detail(e, settings),
        ) from e
    except FactCheckError as e:
        request_logger.error(f"Fact check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=build_error_detail(e, settings),
        ) from e

    processing_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
    request_logger.info(f"Verification completed in {processing_time_ms}ms")

    return VerifyResponse(
        result=result,
        metadata=VerifyMetadata(
            content_type=content.content_type,
            source_info=content.source_info,
            video_id=content.video_id,
            processing_time_ms=processing_time_ms,
        ),
    )


__all__ = ["classify_error_message", "get_content_router", "get_fact_check_service", "router"]
