"""Tests for meter reading ledger functionality."""

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from household.core.outcome import ErrorKind, Failure, Ok, ValidationError
from household.models.enums import MeterType
from household.models.meter_reading import MeterReading
from household.repositories import meter_reading as reading_store
from household.schemas.meter_reading import MeterReadingCreate
from household.services.meter_reading import (
    calculate_consumption,
    create_reading,
    derive_reading_week,
    get_latest_reading,
    list_readings,
    list_readings_by_type,
    whole_days_between,
)


def _reading(
    meter_type: MeterType,
    value: str,
    when: datetime,
    notes: str | None = None,
) -> MeterReadingCreate:
    return MeterReadingCreate(
        meter_type=meter_type,
        reading_value=Decimal(value),
        reading_date=when,
        notes=notes,
    )


class TestDateHelpers:
    """Unit tests for whole-day and calendar week helpers."""

    def test_whole_days_drop_time_of_day(self) -> None:
        """Test that the time-of-day remainder is truncated."""
        assert whole_days_between(datetime(2024, 1, 1, 8), datetime(2024, 1, 11, 7)) == 9
        assert whole_days_between(datetime(2024, 1, 1), datetime(2024, 1, 11)) == 10

    def test_same_day_is_zero(self) -> None:
        """Test that readings on the same day are zero days apart."""
        assert whole_days_between(datetime(2024, 1, 1, 6), datetime(2024, 1, 1, 22)) == 0

    def test_iso_week(self) -> None:
        """Test ISO week numbers around the turn of the year."""
        # 2024-01-01 is a Monday, 2023-01-01 a Sunday belonging to week 52 of 2022
        assert derive_reading_week(datetime(2024, 1, 1)) == 1
        assert derive_reading_week(datetime(2023, 1, 1)) == 52
        assert derive_reading_week(datetime(2020, 12, 31)) == 53


class TestCreateReading:
    """Service-level tests for the monotonic insert path."""

    def test_first_reading_is_accepted(self, test_db) -> None:
        """Test that the first reading of a meter is always accepted."""
        outcome = create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1)))

        assert isinstance(outcome, Ok)
        created = outcome.value
        assert created.id is not None
        assert created.meter_type == MeterType.GAS
        assert created.reading_value == Decimal("100.00")
        assert created.created_at is not None
        assert created.updated_at is not None
        assert created.consumption is None

    def test_week_is_derived_when_missing(self, test_db) -> None:
        """Test that a missing week is derived from the reading date."""
        outcome = create_reading(
            test_db, _reading(MeterType.WATER, "10.00", datetime(2024, 3, 14, 9, 30))
        )
        assert outcome.value.reading_week == 11

    def test_explicit_week_is_kept(self, test_db) -> None:
        """Test that a given week number is stored as is."""
        data = _reading(MeterType.WATER, "10.00", datetime(2024, 3, 14))
        data.reading_week = 2
        assert create_reading(test_db, data).value.reading_week == 2

    def test_lower_value_is_rejected(self, test_db) -> None:
        """Test that a value below the latest reading is rejected."""
        create_reading(test_db, _reading(MeterType.ELECTRICITY, "500.00", datetime(2024, 1, 1)))

        outcome = create_reading(
            test_db, _reading(MeterType.ELECTRICITY, "499.99", datetime(2024, 1, 8))
        )

        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.VALIDATION
        assert "499.99" in outcome.reason
        assert "500.00" in outcome.reason
        assert "note" in outcome.reason
        assert len(reading_store.find_by_type(test_db, MeterType.ELECTRICITY)) == 1

    def test_equal_value_is_accepted(self, test_db) -> None:
        """Test that a value equal to the latest reading is accepted."""
        create_reading(test_db, _reading(MeterType.ELECTRICITY, "500.00", datetime(2024, 1, 1)))
        outcome = create_reading(
            test_db, _reading(MeterType.ELECTRICITY, "500.00", datetime(2024, 1, 8))
        )
        assert isinstance(outcome, Ok)

    def test_monotonicity_is_per_meter_type(self, test_db) -> None:
        """Test that each meter type is checked against its own history."""
        create_reading(test_db, _reading(MeterType.ELECTRICITY, "500.00", datetime(2024, 1, 1)))
        outcome = create_reading(test_db, _reading(MeterType.GAS, "1.00", datetime(2024, 1, 8)))
        assert isinstance(outcome, Ok)

    def test_duplicate_timestamp_is_rejected(self, test_db) -> None:
        """Test that a second reading at the same timestamp is rejected."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1)))
        outcome = create_reading(test_db, _reading(MeterType.GAS, "120.00", datetime(2024, 1, 1)))

        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.VALIDATION
        assert len(reading_store.find_by_type(test_db, MeterType.GAS)) == 1

    def test_failure_can_be_raised(self, test_db) -> None:
        """Test converting a failed outcome into an exception."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1)))
        outcome = create_reading(test_db, _reading(MeterType.GAS, "50.00", datetime(2024, 1, 2)))

        with pytest.raises(ValidationError):
            outcome.unwrap()

    def test_new_latest_reading_carries_consumption(self, test_db) -> None:
        """Test that a new reading reports consumption since the previous one."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1)))
        outcome = create_reading(test_db, _reading(MeterType.GAS, "150.00", datetime(2024, 1, 11)))

        assert outcome.value.consumption == Decimal("50.00")
        assert outcome.value.days_since_last_reading == 10


class TestConsumption:
    """Tests for consumption between the two newest readings."""

    def test_consumption_arithmetic(self, test_db) -> None:
        """Test consumption, days and daily average between two readings."""
        create_reading(test_db, _reading(MeterType.WATER, "100.00", datetime(2024, 1, 1)))
        create_reading(test_db, _reading(MeterType.WATER, "150.00", datetime(2024, 1, 11)))

        result = calculate_consumption(test_db, MeterType.WATER).unwrap()

        assert result.current_reading == Decimal("150.00")
        assert result.previous_reading == Decimal("100.00")
        assert result.consumption == Decimal("50.00")
        assert result.days_between_readings == 10
        assert result.average_daily_consumption == Decimal("5.00")

    def test_average_rounds_half_up(self, test_db) -> None:
        """Test that the daily average is rounded half up."""
        create_reading(test_db, _reading(MeterType.WATER, "0.01", datetime(2024, 1, 1)))
        create_reading(test_db, _reading(MeterType.WATER, "0.06", datetime(2024, 1, 11)))

        result = calculate_consumption(test_db, MeterType.WATER).unwrap()

        # 0.05 / 10 = 0.005
        assert result.average_daily_consumption == Decimal("0.01")

    def test_same_day_omits_average(self, test_db) -> None:
        """Test that readings less than a day apart have no average."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1, 7)))
        create_reading(test_db, _reading(MeterType.GAS, "101.50", datetime(2024, 1, 1, 19)))

        result = calculate_consumption(test_db, MeterType.GAS).unwrap()

        assert result.consumption == Decimal("1.50")
        assert result.days_between_readings == 0
        assert result.average_daily_consumption is None

    def test_uses_only_two_newest_readings(self, test_db) -> None:
        """Test that only the two newest readings are compared."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1)))
        create_reading(test_db, _reading(MeterType.GAS, "130.00", datetime(2024, 1, 8)))
        create_reading(test_db, _reading(MeterType.GAS, "144.00", datetime(2024, 1, 15)))

        result = calculate_consumption(test_db, MeterType.GAS).unwrap()

        assert result.consumption == Decimal("14.00")
        assert result.average_daily_consumption == Decimal("2.00")

    def test_decrease_from_direct_store_write_is_not_clamped(self, test_db) -> None:
        """Test that a negative consumption is reported unchanged."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1)))
        reading_store.add_reading(
            test_db,
            MeterReading(
                meter_type=MeterType.GAS,
                reading_value=Decimal("90.00"),
                reading_date=datetime(2024, 1, 5),
            ),
        )
        test_db.commit()

        result = calculate_consumption(test_db, MeterType.GAS).unwrap()

        assert result.consumption == Decimal("-10.00")
        assert result.average_daily_consumption == Decimal("-2.50")

    def test_insufficient_readings(self, test_db) -> None:
        """Test that fewer than two readings is not found."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 1)))

        outcome = calculate_consumption(test_db, MeterType.GAS)

        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NOT_FOUND
        assert "Insufficient readings" in outcome.reason


class TestListings:
    """Tests for listings and the derived fields on the newest reading."""

    def test_latest_not_found(self, test_db) -> None:
        """Test that a meter without readings has no latest reading."""
        outcome = get_latest_reading(test_db, MeterType.ELECTRICITY)
        assert isinstance(outcome, Failure)
        assert outcome.kind == ErrorKind.NOT_FOUND

    def test_latest_is_by_reading_date(self, test_db) -> None:
        """Test that the latest reading is chosen by reading date."""
        create_reading(test_db, _reading(MeterType.GAS, "100.00", datetime(2024, 1, 8)))
        # Older date inserted afterwards with a higher value
        create_reading(test_db, _reading(MeterType.GAS, "120.00", datetime(2024, 1, 1)))

        latest = get_latest_reading(test_db, MeterType.GAS).unwrap()

        assert latest.reading_date == datetime(2024, 1, 8)
        assert latest.consumption == Decimal("-20.00")

    def test_by_type_is_newest_first_and_only_newest_is_annotated(self, test_db) -> None:
        """Test listing by type in date order with derived fields on the newest only."""
        for value, day in (("100.00", 1), ("110.00", 8), ("125.00", 15)):
            create_reading(test_db, _reading(MeterType.ELECTRICITY, value, datetime(2024, 1, day)))

        readings = list_readings_by_type(test_db, MeterType.ELECTRICITY)

        assert [r.reading_value for r in readings] == [
            Decimal("125.00"),
            Decimal("110.00"),
            Decimal("100.00"),
        ]
        assert readings[0].consumption == Decimal("15.00")
        assert readings[0].days_since_last_reading == 7
        assert all(r.consumption is None for r in readings[1:])
        assert all(r.days_since_last_reading is None for r in readings[1:])

    def test_list_all_annotates_newest_per_type(self, test_db) -> None:
        """Test that the full listing annotates the newest reading of each type."""
        create_reading(test_db, _reading(MeterType.ELECTRICITY, "100.00", datetime(2024, 1, 1)))
        create_reading(test_db, _reading(MeterType.GAS, "10.00", datetime(2024, 1, 1)))
        create_reading(test_db, _reading(MeterType.ELECTRICITY, "140.00", datetime(2024, 1, 5)))
        create_reading(test_db, _reading(MeterType.WATER, "3.00", datetime(2024, 1, 5)))

        readings = list_readings(test_db)
        annotated = [r for r in readings if r.consumption is not None]

        assert len(readings) == 4
        assert len(annotated) == 1
        assert annotated[0].meter_type == MeterType.ELECTRICITY
        assert annotated[0].consumption == Decimal("40.00")
        assert annotated[0].days_since_last_reading == 4


class TestMeterReadingEndpoints:
    """Tests for meter reading API endpoints."""

    def test_create_reading(self, client: TestClient) -> None:
        """Test creating a reading through the API."""
        response = client.post(
            "/api/v1/meter-readings",
            json={
                "meter_type": "ELECTRICITY",
                "reading_value": "1234.50",
                "reading_date": "2024-01-15T10:00:00",
                "notes": "Basement meter",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["meter_type"] == "ELECTRICITY"
        assert Decimal(data["reading_value"]) == Decimal("1234.50")
        assert data["reading_week"] == 3
        assert data["notes"] == "Basement meter"
        assert "consumption" not in data
        assert "id" in data
        assert "created_at" in data

    def test_non_positive_value_rejected(self, client: TestClient) -> None:
        """Test that a zero reading value is rejected with 422."""
        response = client.post(
            "/api/v1/meter-readings",
            json={"meter_type": "GAS", "reading_value": "0", "reading_date": "2024-01-15T10:00:00"},
        )
        assert response.status_code == 422

    def test_decreasing_value_returns_400(self, client: TestClient) -> None:
        """Test that a decreasing value is rejected with 400."""
        client.post(
            "/api/v1/meter-readings",
            json={"meter_type": "GAS", "reading_value": "200", "reading_date": "2024-01-01T00:00:00"},
        )
        response = client.post(
            "/api/v1/meter-readings",
            json={"meter_type": "GAS", "reading_value": "150", "reading_date": "2024-01-08T00:00:00"},
        )
        assert response.status_code == 400
        assert "cannot be less than previous reading" in response.json()["detail"]

    def test_unknown_meter_type(self, client: TestClient) -> None:
        """Test that an unknown meter type is rejected with 422."""
        response = client.get("/api/v1/meter-readings/HEAT")
        assert response.status_code == 422

    def test_latest_and_consumption(self, client: TestClient) -> None:
        """Test the latest and consumption endpoints."""
        for value, day in (("100.00", "01"), ("150.00", "11")):
            client.post(
                "/api/v1/meter-readings",
                json={
                    "meter_type": "WATER",
                    "reading_value": value,
                    "reading_date": f"2024-01-{day}T00:00:00",
                },
            )

        latest = client.get("/api/v1/meter-readings/WATER/latest")
        assert latest.status_code == 200
        assert Decimal(latest.json()["consumption"]) == Decimal("50")
        assert latest.json()["days_since_last_reading"] == 10

        consumption = client.get("/api/v1/meter-readings/WATER/consumption")
        assert consumption.status_code == 200
        data = consumption.json()
        assert Decimal(data["consumption"]) == Decimal("50")
        assert data["days_between_readings"] == 10
        assert Decimal(data["average_daily_consumption"]) == Decimal("5")

        listing = client.get("/api/v1/meter-readings/WATER")
        assert listing.status_code == 200
        assert len(listing.json()) == 2
        assert "consumption" not in listing.json()[1]

    def test_not_found_responses(self, client: TestClient) -> None:
        """Test 404 responses for meters without enough readings."""
        assert client.get("/api/v1/meter-readings/GAS/latest").status_code == 404
        assert client.get("/api/v1/meter-readings/GAS/consumption").status_code == 404

    def test_list_all_empty(self, client: TestClient) -> None:
        """Test listing readings on an empty ledger."""
        response = client.get("/api/v1/meter-readings")
        assert response.status_code == 200
        assert response.json() == []
