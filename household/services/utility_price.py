"""UtilityPrice service: validity periods and current price resolution."""

import logging
from datetime import date

from sqlalchemy.orm import Session

from household.core.outcome import Failure, Ok, Outcome, not_found, validation_failure
from household.models.enums import PRICED_METER_TYPES, MeterType
from household.models.utility_price import UtilityPrice
from household.repositories import utility_price as price_store
from household.schemas.utility_price import UtilityPriceCreate, UtilityPriceResponse

logger = logging.getLogger(__name__)

# Stand-in end date for open-ended periods during overlap checks; never stored
FAR_FUTURE = date(9999, 12, 31)


def _check_meter_type(meter_type: MeterType) -> Failure | None:
    if meter_type not in PRICED_METER_TYPES:
        logger.warning("Invalid meter type for utility price: %s", meter_type.value)
        return validation_failure(
            "Utility prices are only supported for ELECTRICITY and WATER meter types. "
            f"Provided: {meter_type.value}"
        )
    return None


def _check_validity_period(valid_from: date, valid_to: date | None) -> Failure | None:
    if valid_to is not None and not valid_from < valid_to:
        logger.warning("Invalid validity period: valid_from=%s, valid_to=%s", valid_from, valid_to)
        return validation_failure(
            f"Valid from date ({valid_from}) must be before valid to date ({valid_to})"
        )
    return None


def _check_no_overlap(
    db: Session,
    meter_type: MeterType,
    valid_from: date,
    valid_to: date | None,
    exclude_id: int | None = None,
) -> Failure | None:
    effective_valid_to = valid_to if valid_to is not None else FAR_FUTURE
    overlapping = price_store.find_overlapping(
        db, meter_type, valid_from, effective_valid_to, exclude_id=exclude_id
    )
    if not overlapping:
        return None

    logger.warning(
        "Found %d overlapping price periods for meter type %s", len(overlapping), meter_type.value
    )
    conflicts = ", ".join(
        f"{p.valid_from} to {p.valid_to or 'indefinite'}" for p in overlapping
    )
    return validation_failure(
        f"The validity period ({valid_from} to {valid_to or 'indefinite'}) overlaps with "
        f"existing price periods for {meter_type.value}: {conflicts}. "
        "Please ensure validity periods do not overlap."
    )


def create_price(db: Session, price_data: UtilityPriceCreate) -> Outcome[UtilityPriceResponse]:
    """Create a utility price after checking type, amount, period and overlaps."""
    meter_type = price_data.meter_type
    logger.info("Creating new utility price for type: %s", meter_type.value)

    failure = _check_meter_type(meter_type)
    if failure is None and (price_data.price is None or price_data.price <= 0):
        failure = validation_failure(f"Price must be greater than zero. Provided: {price_data.price}")
    if failure is None:
        failure = _check_validity_period(price_data.valid_from, price_data.valid_to)
    if failure is None:
        failure = _check_no_overlap(db, meter_type, price_data.valid_from, price_data.valid_to)
    if failure is not None:
        db.rollback()
        return failure

    db_price = UtilityPrice(
        meter_type=meter_type,
        price=price_data.price,
        valid_from=price_data.valid_from,
        valid_to=price_data.valid_to,
    )
    price_store.add_price(db, db_price)
    db.commit()
    db.refresh(db_price)
    logger.info("Successfully created utility price with ID: %s", db_price.id)
    return Ok(UtilityPriceResponse.model_validate(db_price))


def list_prices(db: Session) -> list[UtilityPriceResponse]:
    """Get all utility prices."""
    logger.debug("Retrieving all utility prices")
    return [UtilityPriceResponse.model_validate(p) for p in price_store.find_all(db)]


def list_prices_by_type(
    db: Session, meter_type: MeterType
) -> Outcome[list[UtilityPriceResponse]]:
    """Get the prices of one meter type, latest validity start first."""
    logger.debug("Retrieving utility prices for type: %s", meter_type.value)
    failure = _check_meter_type(meter_type)
    if failure is not None:
        return failure
    return Ok([UtilityPriceResponse.model_validate(p) for p in price_store.find_by_type(db, meter_type)])


def get_current_price(
    db: Session,
    meter_type: MeterType,
    as_of: date | None = None,
) -> Outcome[UtilityPriceResponse]:
    """Get the price whose validity period contains ``as_of`` (default: today)."""
    on_date = as_of or date.today()
    logger.debug("Retrieving price for type %s on %s", meter_type.value, on_date)
    failure = _check_meter_type(meter_type)
    if failure is not None:
        return failure

    price = price_store.find_current(db, meter_type, on_date)
    if price is None:
        return not_found(f"No current price found for meter type: {meter_type.value} on {on_date}")
    return Ok(UtilityPriceResponse.model_validate(price))


def delete_price(db: Session, price_id: int) -> Outcome[None]:
    """Delete a utility price by ID."""
    logger.info("Deleting utility price with ID: %s", price_id)
    if not price_store.exists_by_id(db, price_id):
        return not_found(f"Utility price not found with ID: {price_id}")

    price_store.delete_by_id(db, price_id)
    db.commit()
    logger.info("Successfully deleted utility price with ID: %s", price_id)
    return Ok(None)
