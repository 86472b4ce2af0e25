"""Accrual engine: seniority, yearly entitlement, prorated accrual, carryover expiry."""

from __future__ import annotations

import math
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from leave_engine.calculators.days import ZERO, parse_date, round_half_day

if TYPE_CHECKING:
    from leave_engine.calculators.rules import AccrualRule

DAYS_PER_YEAR = Decimal("365.25")
DAYS_PER_MONTH = Decimal("30.4375")  # 365.25 / 12
MONTHS_PER_YEAR = 12


def years_of_service(hire_date: date | str, reference_date: date | str) -> Decimal:
    """Decimal years elapsed between hire and reference, never negative."""
    hire = parse_date(hire_date)
    reference = parse_date(reference_date)
    if hire > reference:
        return ZERO
    return Decimal((reference - hire).days) / DAYS_PER_YEAR


def seniority_periods(years: Decimal, rule: AccrualRule) -> int:
    """Completed bonus periods; a partial period counts for nothing."""
    if years <= 0:
        return 0
    return math.floor(years / rule.seniority_bonus_period_years)


def annual_entitlement(years: Decimal, rule: AccrualRule) -> Decimal:
    """Yearly entitlement: base plus seniority bonus, capped after the bonus is added."""
    entitlement = rule.annual_base_days + seniority_periods(years, rule) * rule.seniority_bonus_days
    return min(entitlement, rule.max_annual_days)


def _months_between(start: date, end: date) -> Decimal:
    """Months covered by [start, end].

    Whole months when the span runs from a 1st to a month end, otherwise the
    day count over the average month length.
    """
    if start.day == 1 and (end + timedelta(days=1)).day == 1:
        return Decimal((end.year - start.year) * MONTHS_PER_YEAR + (end.month - start.month) + 1)
    return Decimal((end - start).days + 1) / DAYS_PER_MONTH


def prorata_accrual(
    hire_date: date | str,
    period_start: date | str,
    period_end: date | str,
    rule: AccrualRule,
) -> Decimal:
    """Entitlement earned over a partial period, rounded to the nearest half day.

    Used for the first or last year of employment. Seniority is evaluated at
    ``period_end``.
    """
    hire = parse_date(hire_date)
    start = parse_date(period_start)
    end = parse_date(period_end)

    if hire > end:
        return ZERO

    effective_start = max(hire, start)
    if effective_start > end:
        return ZERO

    months = _months_between(effective_start, end)
    entitlement = annual_entitlement(years_of_service(hire, end), rule)
    return round_half_day(entitlement / MONTHS_PER_YEAR * months)


def carryover_expiry_date(year: int, rule: AccrualRule) -> date:
    """Last moment carried-over days from ``year`` can be used (Jan 1 of N+1 plus the grace period)."""
    months = rule.carryover_expiry_months
    target_year = year + 1 + months // MONTHS_PER_YEAR
    target_month = 1 + months % MONTHS_PER_YEAR
    return date(target_year, target_month, 1)


def is_carryover_expired(year: int, current_date: date | str, rule: AccrualRule) -> bool:
    return parse_date(current_date) > carryover_expiry_date(year, rule)
