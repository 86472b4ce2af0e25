"""Yearly balance engine.

A YearlyBalance is always derived from its inputs; recomputing with the same
inputs yields the same record.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, computed_field

from leave_engine.calculators.accrual import annual_entitlement, years_of_service
from leave_engine.calculators.days import (
    ZERO,
    DayAmount,
    clamp_zero,
    round_cents,
    to_days,
    to_half_days,
)

if TYPE_CHECKING:
    from leave_engine.calculators.rules import AccrualRule


class YearlyBalance(BaseModel):
    """Entitlement, consumption and carryover for one employee-year."""

    model_config = ConfigDict(frozen=True)

    year: int
    rule_id: str
    years_of_service: Decimal
    annual_rate: Decimal
    seniority_bonus: Decimal
    balance_adjustment: Decimal = ZERO
    previous_carryover: Decimal = ZERO
    used: Decimal = ZERO
    used_adjustment: Decimal = ZERO
    remaining: Decimal
    max_carryover: Decimal
    next_carryover: Decimal
    forfeited: Decimal

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_available(self) -> Decimal:
        return self.annual_rate + self.previous_carryover

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_used(self) -> Decimal:
        return self.used + self.used_adjustment


def max_carryover(entitlement: Decimal, rule: AccrualRule) -> Decimal:
    """Share of the yearly entitlement allowed into the next year, to the cent."""
    return round_cents(entitlement * rule.max_carryover_ratio)


def compute_yearly_balance(
    hire_date: date | str,
    year: int,
    used: DayAmount,
    *,
    rule: AccrualRule,
    used_adjustment: DayAmount = 0,
    previous_carryover: DayAmount = 0,
    balance_adjustment: DayAmount = 0,
) -> YearlyBalance:
    """Compute the balance of ``year`` with seniority frozen at December 31.

    ``used_adjustment`` corrects consumption. ``balance_adjustment`` is a
    manual override added to the entitlement; the carryover ceiling stays
    derived from the rule's own rate.
    """
    used_days = to_half_days(used, "used")
    used_correction = to_half_days(used_adjustment, "used_adjustment")
    entitlement_correction = to_half_days(balance_adjustment, "balance_adjustment")
    carried_in = clamp_zero(to_days(previous_carryover))

    years = years_of_service(hire_date, date(year, 12, 31))
    entitlement = annual_entitlement(years, rule)
    bonus = clamp_zero(entitlement - rule.annual_base_days)
    ceiling = max_carryover(entitlement, rule)

    annual_rate = entitlement + entitlement_correction
    remaining = clamp_zero(annual_rate + carried_in - (used_days + used_correction))

    return YearlyBalance(
        year=year,
        rule_id=rule.id,
        years_of_service=round_cents(years),
        annual_rate=annual_rate,
        seniority_bonus=bonus,
        balance_adjustment=entitlement_correction,
        previous_carryover=carried_in,
        used=used_days,
        used_adjustment=used_correction,
        remaining=remaining,
        max_carryover=ceiling,
        next_carryover=min(remaining, ceiling),
        forfeited=clamp_zero(remaining - ceiling),
    )


def compute_current_balance(
    hire_date: date | str,
    used: DayAmount,
    *,
    rule: AccrualRule,
    today: date | None = None,
    used_adjustment: DayAmount = 0,
    previous_carryover: DayAmount = 0,
    balance_adjustment: DayAmount = 0,
) -> YearlyBalance:
    """Balance of the calendar year containing ``today``."""
    if today is None:
        today = date.today()
    return compute_yearly_balance(
        hire_date,
        today.year,
        used,
        rule=rule,
        used_adjustment=used_adjustment,
        previous_carryover=previous_carryover,
        balance_adjustment=balance_adjustment,
    )
