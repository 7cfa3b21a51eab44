"""Record store queries for the meter_readings table."""

from datetime import UTC, datetime

from sqlalchemy import and_
from sqlalchemy.orm import Session

from household.models.enums import MeterType
from household.models.meter_reading import MeterReading


def add_reading(db: Session, reading: MeterReading) -> MeterReading:
    """Stamp audit timestamps and stage a reading in the current transaction."""
    now = datetime.now(UTC)
    reading.created_at = now
    reading.updated_at = now
    db.add(reading)
    db.flush()
    return reading


def find_all(db: Session) -> list[MeterReading]:
    """All readings across meter types in insertion order."""
    return db.query(MeterReading).order_by(MeterReading.id).all()


def find_by_type(db: Session, meter_type: MeterType) -> list[MeterReading]:
    """Readings of one meter type, newest first."""
    return (
        db.query(MeterReading)
        .filter(MeterReading.meter_type == meter_type)
        .order_by(MeterReading.reading_date.desc())
        .all()
    )


def find_latest_by_type(db: Session, meter_type: MeterType) -> MeterReading | None:
    """Most recent reading of a meter type by reading date."""
    return (
        db.query(MeterReading)
        .filter(MeterReading.meter_type == meter_type)
        .order_by(MeterReading.reading_date.desc())
        .first()
    )


def find_top_by_type(db: Session, meter_type: MeterType, limit: int = 2) -> list[MeterReading]:
    """The ``limit`` most recent readings of a meter type, newest first."""
    return (
        db.query(MeterReading)
        .filter(MeterReading.meter_type == meter_type)
        .order_by(MeterReading.reading_date.desc())
        .limit(limit)
        .all()
    )


def exists_by_type_and_date(db: Session, meter_type: MeterType, reading_date: datetime) -> bool:
    """Whether a reading already exists for the natural key (meter_type, reading_date)."""
    return (
        db.query(MeterReading.id)
        .filter(
            and_(
                MeterReading.meter_type == meter_type,
                MeterReading.reading_date == reading_date,
            )
        )
        .first()
        is not None
    )
