"""Enum definitions for meter types."""

from enum import Enum


class MeterType(str, Enum):
    """Utility meter kinds tracked by the household ledger."""

    ELECTRICITY = "ELECTRICITY"  # kWh
    GAS = "GAS"  # m³
    WATER = "WATER"  # m³


# Meter types that may carry a unit price
PRICED_METER_TYPES = frozenset({MeterType.ELECTRICITY, MeterType.WATER})
