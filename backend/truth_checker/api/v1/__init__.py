"""
Truth Checker API v1 Router Aggregator.

Combines all v1 endpoint routers into a single APIRouter for registration
with the main FastAPI application under the /api/v1 prefix.

Router Structure:
    - /verify: Fact-check a claim, YouTube video or webpage

Each router module is imported conditionally so a broken endpoint module
is reported in the logs instead of taking the whole API down.
"""

import logging

from fastapi import APIRouter


logger = logging.getLogger(__name__)

api_router = APIRouter()

# Track which routers were successfully loaded
loaded_routers: list[str] = []


# Verification Router
try:
    from truth_checker.api.v1.verify import router as verify_router

    api_router.include_router(verify_router, tags=["verification"])
    loaded_routers.append("verify")
    logger.debug("Loaded verify router")
except ImportError as e:
    logger.warning("Verify router not available: %s", e)


def get_loaded_routers() -> list[str]:
    """Return the names of routers that were successfully loaded."""
    return loaded_routers.copy()


__all__ = ["api_router", "get_loaded_routers"]
