"""Health check schemas."""

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Application health status."""

    status: str
    message: str
    timestamp: datetime
    version: str
    application_name: str | None = None
