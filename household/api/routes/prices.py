"""UtilityPrice routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from household.api.outcomes import unwrap_or_raise
from household.core.database import get_db
from household.models.enums import MeterType
from household.schemas.utility_price import UtilityPriceCreate, UtilityPriceResponse
from household.services import utility_price as price_service

router = APIRouter(prefix="/utility-prices", tags=["utility-prices"])


@router.post(
    "",
    response_model=UtilityPriceResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_price(
    price_data: UtilityPriceCreate,
    db: Session = Depends(get_db),
) -> UtilityPriceResponse:
    """Create a utility price for ELECTRICITY or WATER."""
    return unwrap_or_raise(price_service.create_price(db, price_data))


@router.get("", response_model=list[UtilityPriceResponse])
def list_prices(db: Session = Depends(get_db)) -> list[UtilityPriceResponse]:
    """Get all utility prices."""
    return price_service.list_prices(db)


@router.get("/{meter_type}", response_model=list[UtilityPriceResponse])
def list_prices_by_type(
    meter_type: MeterType,
    db: Session = Depends(get_db),
) -> list[UtilityPriceResponse]:
    """Get the utility prices of one meter type."""
    return unwrap_or_raise(price_service.list_prices_by_type(db, meter_type))


@router.get("/{meter_type}/current", response_model=UtilityPriceResponse)
def get_current_price(
    meter_type: MeterType,
    as_of: date | None = Query(None, description="Date to resolve the price for (default: today)"),
    db: Session = Depends(get_db),
) -> UtilityPriceResponse:
    """Get the price valid on a given date."""
    return unwrap_or_raise(price_service.get_current_price(db, meter_type, as_of))


@router.delete("/{price_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_price(
    price_id: int,
    db: Session = Depends(get_db),
) -> None:
    """Delete a utility price."""
    unwrap_or_raise(price_service.delete_price(db, price_id))
