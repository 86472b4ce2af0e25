"""Day-quantity and date primitives shared by the calculators.

Day amounts are Decimals. Consumption figures come in half-day steps and are
checked at the boundary; derived figures (ratios, prorated accruals) are
rounded with explicit half-up rules.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from leave_engine.exceptions import InvalidDate, InvalidDayAmount

ZERO = Decimal(0)
HALF_DAY = Decimal("0.5")
CENTS = Decimal("0.01")
TOLERANCE = Decimal("0.01")

DayAmount = Decimal | int | float | str


def parse_date(value: date | datetime | str) -> date:
    """Return a date from a date, a datetime, or an ISO ``YYYY-MM-DD`` string.

    A datetime is reduced to its calendar day. Strings must hold nothing but
    the date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        raise InvalidDate(value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidDate(value) from None


def to_days(value: DayAmount) -> Decimal:
    """Convert a day amount to Decimal without imposing a granularity."""
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps 0.1 as 0.1 instead of the float's binary expansion
        return Decimal(str(value))
    except InvalidOperation:
        raise InvalidDayAmount(value) from None


def to_half_days(value: DayAmount, field: str = "days") -> Decimal:
    """Convert a consumption figure, rejecting anything finer than half a day."""
    days = to_days(value)
    if not days.is_finite() or (days * 2) % 1 != 0:
        raise InvalidDayAmount(value, field)
    return days


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def round_half_day(value: Decimal) -> Decimal:
    """Round to the nearest 0.5 day, ties away from zero."""
    return (value * 2).quantize(Decimal(1), rounding=ROUND_HALF_UP) / 2


def clamp_zero(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO


def close_enough(a: Decimal, b: Decimal) -> bool:
    return abs(a - b) <= TOLERANCE
