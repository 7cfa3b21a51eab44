"""MeterReading database model - the central ledger."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Enum, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from household.core.database import Base
from household.models.enums import MeterType


class MeterReading(Base):
    """Meter reading ledger entry."""

    __tablename__ = "meter_readings"
    __table_args__ = (
        UniqueConstraint("meter_type", "reading_date", name="uq_meter_type_reading_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    meter_type: Mapped[MeterType] = mapped_column(
        Enum(MeterType, native_enum=False, length=20), index=True
    )

    # The actual reading value (using Decimal for precision)
    reading_value: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2))
    reading_week: Mapped[int | None] = mapped_column(nullable=True)  # Calendar week (KW)
    reading_date: Mapped[datetime] = mapped_column(index=True)  # When reading was taken
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Stamped by the repository on write
    created_at: Mapped[datetime]
    updated_at: Mapped[datetime]
