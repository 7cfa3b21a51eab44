"""Health check routes."""

import logging
from datetime import datetime

from fastapi import APIRouter

from household.core.config import settings
from household.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse, response_model_exclude_none=True)
def health() -> HealthResponse:
    """Simple liveness check."""
    logger.debug("Health check endpoint called")
    return HealthResponse(
        status="UP",
        message=f"{settings.PROJECT_NAME} backend is running",
        timestamp=datetime.now(),
        version=settings.VERSION,
    )


@router.get("/status", response_model=HealthResponse)
def health_status() -> HealthResponse:
    """Detailed application status."""
    logger.debug("Status endpoint called")
    return HealthResponse(
        status="UP",
        message="Application is healthy and ready to serve requests",
        timestamp=datetime.now(),
        version=settings.VERSION,
        application_name=settings.PROJECT_NAME,
    )
