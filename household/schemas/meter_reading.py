"""MeterReading Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from household.models.enums import MeterType


class MeterReadingCreate(BaseModel):
    """Schema for recording a single meter reading.

    Units depend on the meter type: kWh for electricity, m³ for gas and water.
    """

    meter_type: MeterType
    reading_value: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    reading_date: datetime
    reading_week: int | None = Field(default=None, ge=1, le=53)  # Derived when omitted
    notes: str | None = None


class MeterReadingResponse(BaseModel):
    """Schema for meter reading response.

    ``consumption`` and ``days_since_last_reading`` are only set on the most
    recent reading of each meter type.
    """

    id: int
    meter_type: MeterType
    reading_value: Decimal
    reading_week: int | None
    reading_date: datetime
    notes: str | None
    created_at: datetime
    updated_at: datetime
    consumption: Decimal | None = None
    days_since_last_reading: int | None = None

    model_config = {"from_attributes": True}


class ConsumptionResponse(BaseModel):
    """Consumption between the two most recent readings of a meter type."""

    meter_type: MeterType
    current_reading: Decimal
    previous_reading: Decimal
    consumption: Decimal  # current_reading - previous_reading
    current_reading_date: datetime
    previous_reading_date: datetime
    days_between_readings: int
    average_daily_consumption: Decimal | None = None  # Omitted for same-day pairs


class MeterReadingImportResponse(BaseModel):
    """Result of a CSV import."""

    created_count: int
