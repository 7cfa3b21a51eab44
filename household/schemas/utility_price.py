"""UtilityPrice Pydantic schemas for request/response validation."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from household.models.enums import MeterType


class UtilityPriceCreate(BaseModel):
    """Schema for creating a utility price (ELECTRICITY or WATER only)."""

    meter_type: MeterType
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=4)
    valid_from: date  # Inclusive
    valid_to: date | None = None  # Exclusive, None means indefinite


class UtilityPriceResponse(BaseModel):
    """Schema for utility price response."""

    id: int
    meter_type: MeterType
    price: Decimal
    valid_from: date
    valid_to: date | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
