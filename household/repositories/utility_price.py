"""Record store queries for the utility_prices table."""

from datetime import UTC, date, datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from household.models.enums import MeterType
from household.models.utility_price import UtilityPrice


def add_price(db: Session, price: UtilityPrice) -> UtilityPrice:
    """Stamp audit timestamps and stage a price in the current transaction."""
    now = datetime.now(UTC)
    price.created_at = now
    price.updated_at = now
    db.add(price)
    db.flush()
    return price


def find_all(db: Session) -> list[UtilityPrice]:
    """All prices, latest validity start first."""
    return db.query(UtilityPrice).order_by(UtilityPrice.valid_from.desc()).all()


def find_by_type(db: Session, meter_type: MeterType) -> list[UtilityPrice]:
    """Prices of one meter type, latest validity start first."""
    return (
        db.query(UtilityPrice)
        .filter(UtilityPrice.meter_type == meter_type)
        .order_by(UtilityPrice.valid_from.desc())
        .all()
    )


def find_current(db: Session, meter_type: MeterType, on_date: date) -> UtilityPrice | None:
    """Price whose interval [valid_from, valid_to) contains ``on_date``."""
    return (
        db.query(UtilityPrice)
        .filter(
            and_(
                UtilityPrice.meter_type == meter_type,
                UtilityPrice.valid_from <= on_date,
                or_(UtilityPrice.valid_to.is_(None), UtilityPrice.valid_to > on_date),
            )
        )
        .order_by(UtilityPrice.valid_from.desc())
        .first()
    )


def find_overlapping(
    db: Session,
    meter_type: MeterType,
    valid_from: date,
    valid_to: date,
    exclude_id: int | None = None,
) -> list[UtilityPrice]:
    """Prices of a meter type whose interval intersects [valid_from, valid_to).

    ``valid_to`` must already be concrete; callers substitute a far-future
    date for open-ended intervals.
    """
    query = db.query(UtilityPrice).filter(
        and_(
            UtilityPrice.meter_type == meter_type,
            UtilityPrice.valid_from < valid_to,
            or_(UtilityPrice.valid_to.is_(None), UtilityPrice.valid_to > valid_from),
        )
    )
    if exclude_id is not None:
        query = query.filter(UtilityPrice.id != exclude_id)
    return query.order_by(UtilityPrice.valid_from).all()


def exists_by_id(db: Session, price_id: int) -> bool:
    return db.query(UtilityPrice.id).filter(UtilityPrice.id == price_id).first() is not None


def delete_by_id(db: Session, price_id: int) -> None:
    db.query(UtilityPrice).filter(UtilityPrice.id == price_id).delete()
