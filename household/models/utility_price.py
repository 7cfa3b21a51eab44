"""UtilityPrice database model."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Enum, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from household.core.database import Base
from household.models.enums import MeterType


class UtilityPrice(Base):
    """Unit price in force for a meter type over a half-open date interval.

    ``valid_from`` is inclusive, ``valid_to`` is exclusive. A missing
    ``valid_to`` means the price stays valid indefinitely.
    """

    __tablename__ = "utility_prices"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    meter_type: Mapped[MeterType] = mapped_column(
        Enum(MeterType, native_enum=False, length=20), index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=4))
    valid_from: Mapped[date] = mapped_column(index=True)
    valid_to: Mapped[date | None] = mapped_column(nullable=True)

    # Stamped by the repository on write
    created_at: Mapped[datetime]
    updated_at: Mapped[datetime]
