"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from household.api.routes import health, prices, readings
from household.core.config import settings
from household.core.database import Base, SessionLocal, engine
from household.core.log import configure_logging

# Import models for Base.metadata.create_all
from household.models import meter_reading, utility_price  # noqa: F401
from household.services import importer

logger = logging.getLogger(__name__)


def run_startup_import(csv_path: str) -> int:
    """Load the configured CSV export once at startup."""
    logger.info("Starting CSV import from %s", csv_path)
    db = SessionLocal()
    try:
        created = importer.import_from_path(db, csv_path)
    finally:
        db.close()
    logger.info("CSV import completed. Created %d meter readings.", created)
    return created


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    configure_logging(settings.LOG_LEVEL)
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    if settings.IMPORT_CSV.strip():
        run_startup_import(settings.IMPORT_CSV.strip())
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Household utility meter readings and prices",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api/v1")
app.include_router(readings.router, prefix="/api/v1")
app.include_router(prices.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "household.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
