"""MeterReading routes for ledger operations."""

import io
import logging

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from household.api.outcomes import unwrap_or_raise
from household.core.database import get_db
from household.models.enums import MeterType
from household.schemas.meter_reading import (
    ConsumptionResponse,
    MeterReadingCreate,
    MeterReadingImportResponse,
    MeterReadingResponse,
)
from household.services import importer
from household.services import meter_reading as reading_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meter-readings", tags=["meter-readings"])


@router.post(
    "",
    response_model=MeterReadingResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_reading(
    reading_data: MeterReadingCreate,
    db: Session = Depends(get_db),
) -> MeterReadingResponse:
    """Record a single meter reading.

    Rejected with 400 if the value is lower than the latest reading of the
    same meter type.
    """
    return unwrap_or_raise(reading_service.create_reading(db, reading_data))


@router.get("", response_model=list[MeterReadingResponse], response_model_exclude_none=True)
def list_readings(db: Session = Depends(get_db)) -> list[MeterReadingResponse]:
    """Get all meter readings across all meter types."""
    return reading_service.list_readings(db)


@router.post("/import", response_model=MeterReadingImportResponse)
async def import_readings(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Import meter readings from an uploaded CSV export."""
    logger.info("Received CSV import request: %s", file.filename)
    content = await file.read()
    if not content:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=MeterReadingImportResponse(created_count=0).model_dump(),
        )

    # Malformed lines are skipped by the importer; only an undecodable upload fails
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        logger.exception("CSV upload is not valid UTF-8: %s", file.filename)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=MeterReadingImportResponse(created_count=0).model_dump(),
        )

    created = importer.import_from_reader(db, io.StringIO(text))
    return MeterReadingImportResponse(created_count=created)


@router.get(
    "/{meter_type}",
    response_model=list[MeterReadingResponse],
    response_model_exclude_none=True,
)
def list_readings_by_type(
    meter_type: MeterType,
    db: Session = Depends(get_db),
) -> list[MeterReadingResponse]:
    """Get all readings of one meter type, newest first."""
    return reading_service.list_readings_by_type(db, meter_type)


@router.get(
    "/{meter_type}/latest",
    response_model=MeterReadingResponse,
    response_model_exclude_none=True,
)
def get_latest_reading(
    meter_type: MeterType,
    db: Session = Depends(get_db),
) -> MeterReadingResponse:
    """Get the most recent reading of a meter type."""
    return unwrap_or_raise(reading_service.get_latest_reading(db, meter_type))


@router.get(
    "/{meter_type}/consumption",
    response_model=ConsumptionResponse,
    response_model_exclude_none=True,
)
def calculate_consumption(
    meter_type: MeterType,
    db: Session = Depends(get_db),
) -> ConsumptionResponse:
    """
    Calculate consumption between the two most recent readings.

    Includes the days between the readings and, when they are at least a
    day apart, the average daily consumption.
    """
    return unwrap_or_raise(reading_service.calculate_consumption(db, meter_type))
