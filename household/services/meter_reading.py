"""MeterReading service for business logic - the core ledger operations."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from household.core.outcome import Ok, Outcome, not_found, validation_failure
from household.models.enums import MeterType
from household.models.meter_reading import MeterReading
from household.repositories import meter_reading as reading_store
from household.schemas.meter_reading import (
    ConsumptionResponse,
    MeterReadingCreate,
    MeterReadingResponse,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class ConsumptionPair:
    """The newest reading of a meter type and its immediate predecessor."""

    current: MeterReading
    previous: MeterReading

    @property
    def consumption(self) -> Decimal:
        # Negative only if the ledger was edited behind the service; surfaced as-is
        return self.current.reading_value - self.previous.reading_value

    @property
    def days_between(self) -> int:
        return whole_days_between(self.previous.reading_date, self.current.reading_date)

    @property
    def average_daily_consumption(self) -> Decimal | None:
        days = self.days_between
        if days <= 0:
            return None
        return (self.consumption / Decimal(days)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Number of complete days from ``start`` to ``end``; the time-of-day remainder is dropped."""
    return (end - start).days


def derive_reading_week(reading_date: datetime) -> int:
    """ISO calendar week (weeks start on Monday)."""
    return reading_date.isocalendar()[1]


def get_consumption_pair(db: Session, meter_type: MeterType) -> ConsumptionPair | None:
    """Get the two most recent readings of a meter type, if there are two."""
    readings = reading_store.find_top_by_type(db, meter_type, limit=2)
    if len(readings) < 2:
        return None
    return ConsumptionPair(current=readings[0], previous=readings[1])


def to_response(
    reading: MeterReading,
    pair: ConsumptionPair | None = None,
) -> MeterReadingResponse:
    """Convert a reading to a response, adding consumption if it is the pair's newest reading."""
    response = MeterReadingResponse.model_validate(reading)
    if pair is not None and pair.current.id == reading.id:
        response.consumption = pair.consumption
        response.days_since_last_reading = pair.days_between
    return response


def _annotate(db: Session, readings: list[MeterReading]) -> list[MeterReadingResponse]:
    """Convert readings, looking up the consumption pair once per meter type."""
    pairs: dict[MeterType, ConsumptionPair | None] = {}
    responses: list[MeterReadingResponse] = []
    for reading in readings:
        meter_type = MeterType(reading.meter_type)
        if meter_type not in pairs:
            pairs[meter_type] = get_consumption_pair(db, meter_type)
        responses.append(to_response(reading, pairs[meter_type]))
    return responses


def create_reading(db: Session, reading_data: MeterReadingCreate) -> Outcome[MeterReadingResponse]:
    """Record a new meter reading.

    A reading may not be lower than the latest reading of the same meter
    type. Meter resets are not corrected automatically; they are rejected so
    the user can add an explanatory note instead.
    """
    meter_type = reading_data.meter_type
    logger.info("Creating new meter reading for type: %s", meter_type.value)

    if reading_data.reading_value is None or reading_data.reading_value <= 0:
        return validation_failure("Reading value must be greater than zero")

    previous = reading_store.find_latest_by_type(db, meter_type)
    if previous is not None and reading_data.reading_value < previous.reading_value:
        logger.warning(
            "New reading value %s is less than previous reading %s for meter type %s",
            reading_data.reading_value,
            previous.reading_value,
            meter_type.value,
        )
        return validation_failure(
            f"New reading value ({reading_data.reading_value}) cannot be less than previous "
            f"reading ({previous.reading_value}). If the meter was reset, please add a note "
            "explaining this."
        )

    reading_week = reading_data.reading_week
    if reading_week is None:
        reading_week = derive_reading_week(reading_data.reading_date)

    db_reading = MeterReading(
        meter_type=meter_type,
        reading_value=reading_data.reading_value,
        reading_week=reading_week,
        reading_date=reading_data.reading_date,
        notes=reading_data.notes,
    )
    try:
        reading_store.add_reading(db, db_reading)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(
            "Duplicate reading for meter type %s at %s",
            meter_type.value,
            reading_data.reading_date,
        )
        return validation_failure(
            f"A {meter_type.value} reading already exists for {reading_data.reading_date.isoformat()}"
        )
    db.refresh(db_reading)
    logger.info("Successfully created meter reading with ID: %s", db_reading.id)

    return Ok(to_response(db_reading, get_consumption_pair(db, meter_type)))


def list_readings(db: Session) -> list[MeterReadingResponse]:
    """Get all readings across meter types."""
    logger.debug("Retrieving all meter readings")
    return _annotate(db, reading_store.find_all(db))


def list_readings_by_type(db: Session, meter_type: MeterType) -> list[MeterReadingResponse]:
    """Get the readings of one meter type, newest first."""
    logger.debug("Retrieving meter readings for type: %s", meter_type.value)
    return _annotate(db, reading_store.find_by_type(db, meter_type))


def get_latest_reading(db: Session, meter_type: MeterType) -> Outcome[MeterReadingResponse]:
    """Get the most recent reading of a meter type."""
    logger.debug("Retrieving latest reading for type: %s", meter_type.value)
    reading = reading_store.find_latest_by_type(db, meter_type)
    if reading is None:
        return not_found(f"No readings found for meter type: {meter_type.value}")
    return Ok(to_response(reading, get_consumption_pair(db, meter_type)))


def calculate_consumption(db: Session, meter_type: MeterType) -> Outcome[ConsumptionResponse]:
    """Calculate consumption between the two most recent readings of a meter type."""
    logger.debug("Calculating consumption for type: %s", meter_type.value)
    pair = get_consumption_pair(db, meter_type)
    if pair is None:
        return not_found(
            f"Insufficient readings to calculate consumption for meter type: {meter_type.value}. "
            "At least two readings are required."
        )

    return Ok(
        ConsumptionResponse(
            meter_type=meter_type,
            current_reading=pair.current.reading_value,
            previous_reading=pair.previous.reading_value,
            consumption=pair.consumption,
            current_reading_date=pair.current.reading_date,
            previous_reading_date=pair.previous.reading_date,
            days_between_readings=pair.days_between,
            average_daily_consumption=pair.average_daily_consumption,
        )
    )
