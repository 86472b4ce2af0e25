from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from leave_engine.calculators.days import parse_date

if TYPE_CHECKING:
    from collections.abc import Collection

# Weekday indexes are Sunday-first: 0 = Sunday ... 6 = Saturday.
SUNDAY = 0
SATURDAY = 6

# Fixed-date national holidays keyed by "MM-DD". Religious holidays follow the
# lunar calendar and are not modelled.
MOROCCAN_FIXED_HOLIDAYS: frozenset[str] = frozenset(
    {
        "01-01",  # New Year
        "01-11",  # Independence Manifesto
        "01-14",  # Amazigh New Year
        "05-01",  # Labour Day
        "07-30",  # Throne Day
        "08-14",  # Oued Ed-Dahab Day
        "08-20",  # Revolution of the King and the People
        "08-21",  # Youth Day
        "11-06",  # Green March
        "11-18",  # Independence Day
    }
)


def sunday_first_weekday(day: date) -> int:
    return day.isoweekday() % 7


def is_business_day(
    day: date,
    *,
    holidays: Collection[str] = MOROCCAN_FIXED_HOLIDAYS,
    rest_weekday: int = SUNDAY,
) -> bool:
    """Saturday is a working day; only the weekly rest day and fixed holidays are excluded."""
    if sunday_first_weekday(day) == rest_weekday:
        return False
    return f"{day.month:02d}-{day.day:02d}" not in holidays


def count_business_days(
    start: date | str,
    end: date | str,
    *,
    holidays: Collection[str] = MOROCCAN_FIXED_HOLIDAYS,
    rest_weekday: int = SUNDAY,
) -> int:
    """Count working days between two dates, both inclusive.

    An inverted range (start after end) counts as zero days.
    """
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date > end_date:
        return 0

    count = 0
    current = start_date
    one_day = timedelta(days=1)
    while current <= end_date:
        if is_business_day(current, holidays=holidays, rest_weekday=rest_weekday):
            count += 1
        current += one_day
    return count
