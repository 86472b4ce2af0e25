from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from leave_engine.calculators.balance import YearlyBalance, compute_yearly_balance
from leave_engine.calculators.days import ZERO, DayAmount
from leave_engine.exceptions import AppError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from leave_engine.calculators.rules import AccrualRule


class YearlyUsage(BaseModel):
    """Consumption figures for one year of a projection."""

    year: int = Field(ge=1900, le=9999)
    used: Decimal = ZERO
    used_adjustment: Decimal = ZERO


def project_history(
    hire_date: date | str,
    yearly_usage: Iterable[YearlyUsage],
    rule: AccrualRule,
    *,
    initial_carryover: DayAmount = 0,
) -> list[YearlyBalance]:
    """Chain yearly balances in ascending year order.

    Each year inherits the previous year's ``next_carryover``; the first year
    starts from ``initial_carryover``. Gaps between years are not filled.
    """
    ordered = sorted(yearly_usage, key=lambda u: u.year)
    years = [u.year for u in ordered]
    if len(set(years)) != len(years):
        raise AppError("Each year may appear only once in a projection", status_code=422)

    history: list[YearlyBalance] = []
    carry: DayAmount = initial_carryover
    for usage in ordered:
        balance = compute_yearly_balance(
            hire_date,
            usage.year,
            usage.used,
            rule=rule,
            used_adjustment=usage.used_adjustment,
            previous_carryover=carry,
        )
        history.append(balance)
        carry = balance.next_carryover
    return history
