"""Normalization of free-form spreadsheet values.

Meter exports mix German number formatting ("1.234,56 €") with plain
dot-decimal values ("12.5"). These helpers turn such text into ``Decimal``,
``int`` and ``date`` values and return ``None`` instead of raising when a
value cannot be understood, so callers can skip the field.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

DATE_PATTERN = "%d.%m.%Y"

# Header cell of the date column in the German export
DATE_HEADER_PLACEHOLDER = "datum"

# Currency markers and mis-decoded UTF-8 leftovers
_STRIP_TOKENS = ("€", "EUR", "Â", " ", "\u00a0")


def normalize_decimal(text: str | None) -> Decimal | None:
    """Parse a decimal written with either German or English separators.

    - both ``,`` and ``.`` present: ``.`` groups thousands, ``,`` is decimal
    - only ``,`` present: ``,`` is decimal
    - otherwise the value is parsed as-is
    """
    if text is None:
        return None
    value = text.strip()
    if not value:
        return None

    for token in _STRIP_TOKENS:
        value = value.replace(token, "")

    has_comma = "," in value
    has_dot = "." in value
    if has_comma and has_dot:
        value = value.replace(".", "").replace(",", ".")
    elif has_comma:
        value = value.replace(",", ".")

    try:
        result = Decimal(value)
    except InvalidOperation:
        return None
    if not result.is_finite():
        return None
    return result


def normalize_integer(text: str | None) -> int | None:
    """Parse a plain integer such as a calendar week number."""
    if text is None:
        return None
    value = text.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def normalize_date(text: str | None, pattern: str = DATE_PATTERN) -> date | None:
    """Parse a ``dd.MM.yyyy`` date; header placeholders and mismatches give None."""
    if text is None:
        return None
    value = text.strip()
    if not value or value.lower() == DATE_HEADER_PLACEHOLDER:
        return None
    try:
        return datetime.strptime(value, pattern).date()
    except ValueError:
        return None
