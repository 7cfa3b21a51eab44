"""Bulk import of historical meter readings from the weekly CSV export.

Each row of the export covers one week and holds the readings of all three
meters side by side:

    0  date (dd.MM.yyyy)     7  gas reading
    1  calendar week        12  water reading
    2  electricity reading  13+ free-text remarks
    5  electricity notes

Rows are appended without the monotonicity check of the ledger, since
historical data may contain meter resets. Re-importing the same file creates
nothing new because readings are deduplicated on (meter type, date).
"""

import csv
import logging
from collections.abc import Iterable, Iterator, Sequence
from datetime import date, datetime, time
from pathlib import Path
from typing import TextIO

from sqlalchemy.orm import Session

from household.models.enums import MeterType
from household.models.meter_reading import MeterReading
from household.repositories import meter_reading as reading_store
from household.services.meter_reading import derive_reading_week
from household.services.normalizer import normalize_date, normalize_decimal, normalize_integer

logger = logging.getLogger(__name__)

COL_DATE = 0
COL_WEEK = 1
COL_ELECTRICITY_READING = 2
COL_ELECTRICITY_NOTES = 5
COL_GAS_READING = 7
COL_WATER_READING = 12
COL_EXTRA_NOTES_START = 13

MIN_WEEK = 1
MAX_WEEK = 53

NOTE_SEPARATOR = " | "

READING_COLUMNS = (
    (MeterType.ELECTRICITY, COL_ELECTRICITY_READING),
    (MeterType.GAS, COL_GAS_READING),
    (MeterType.WATER, COL_WATER_READING),
)


def _cell(row: Sequence[str], index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    return (row[index] or "").strip()


def _has_letters(value: str) -> bool:
    return any(ch.isalpha() for ch in value)


def find_extra_note(row: Sequence[str], start_index: int = COL_EXTRA_NOTES_START) -> str:
    """Join the trailing free-text cells that contain at least one letter."""
    notes = [
        value
        for value in (_cell(row, i) for i in range(start_index, len(row)))
        if value and _has_letters(value)
    ]
    return NOTE_SEPARATOR.join(notes)


def combine_notes(first: str, second: str) -> str:
    if not first:
        return second
    if not second:
        return first
    return f"{first}{NOTE_SEPARATOR}{second}"


def _append_if_present(
    db: Session,
    meter_type: MeterType,
    raw_value: str,
    reading_date: datetime,
    reading_week: int | None,
    notes: str,
) -> int:
    """Append one reading unless the value is missing or already imported."""
    value = normalize_decimal(raw_value)
    if value is None:
        return 0
    if reading_store.exists_by_type_and_date(db, meter_type, reading_date):
        return 0

    reading_store.add_reading(
        db,
        MeterReading(
            meter_type=meter_type,
            reading_value=value,
            reading_week=reading_week if reading_week is not None else derive_reading_week(reading_date),
            reading_date=reading_date,
            notes=notes or None,
        ),
    )
    return 1


def import_row(db: Session, row: Sequence[str]) -> int:
    """Import a single export row and return the number of readings created."""
    day: date | None = normalize_date(_cell(row, COL_DATE))
    if day is None:
        return 0

    reading_date = datetime.combine(day, time.min)
    reading_week = normalize_integer(_cell(row, COL_WEEK))
    if reading_week is not None and not MIN_WEEK <= reading_week <= MAX_WEEK:
        reading_week = None

    extra_note = find_extra_note(row)
    notes = {
        MeterType.ELECTRICITY: combine_notes(_cell(row, COL_ELECTRICITY_NOTES), extra_note),
        MeterType.GAS: extra_note,
        MeterType.WATER: extra_note,
    }

    created = 0
    for meter_type, column in READING_COLUMNS:
        created += _append_if_present(
            db, meter_type, _cell(row, column), reading_date, reading_week, notes[meter_type]
        )
    return created


def import_rows(db: Session, rows: Iterable[Sequence[str]]) -> int:
    """Import rows sequentially, committing after each row."""
    created_count = 0
    for row in rows:
        if not row:
            continue
        created = import_row(db, row)
        if created:
            db.commit()
            created_count += created
    logger.info("CSV import finished. Created %d meter readings.", created_count)
    return created_count


def _parsed_rows(reader: TextIO) -> Iterator[list[str]]:
    """Yield CSV records, skipping lines the csv module cannot parse."""
    records = csv.reader(reader, quotechar='"')
    while True:
        try:
            yield next(records)
        except StopIteration:
            return
        except csv.Error:
            logger.warning("Skipping malformed CSV line %d", records.line_num, exc_info=True)


def import_from_reader(db: Session, reader: TextIO) -> int:
    """Import readings from an open CSV text stream."""
    return import_rows(db, _parsed_rows(reader))


def import_from_path(db: Session, csv_path: Path | str) -> int:
    """Import readings from a CSV file; a missing or unreadable file imports nothing."""
    path = Path(csv_path)
    if not path.is_file():
        logger.error("CSV file not found: %s", path)
        return 0

    try:
        # Undecodable bytes become U+FFFD so Latin-1 exports still import
        with path.open(encoding="utf-8", errors="replace", newline="") as f:
            return import_from_reader(db, f)
    except OSError:
        logger.exception("Could not read CSV file: %s", path)
        return 0
