from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from leave_engine.calculators.accrual import (
    annual_entitlement,
    carryover_expiry_date,
    is_carryover_expired,
    prorata_accrual,
    seniority_periods,
    years_of_service,
)
from leave_engine.calculators.rules import (
    IT_DEPARTMENT_RULE,
    MOROCCAN_LABOR_LAW_RULE,
    NEW_EMPLOYEE_RULE,
    SENIOR_MANAGEMENT_RULE,
)
from leave_engine.exceptions import InvalidDate

RULE = MOROCCAN_LABOR_LAW_RULE

# ---------------------------------------------------------------------------
# Seniority
# ---------------------------------------------------------------------------


def test_years_of_service_uses_julian_year() -> None:
    assert years_of_service(date(2024, 1, 1), date(2025, 1, 1)) == Decimal(366) / Decimal("365.25")


def test_years_of_service_is_zero_before_hire() -> None:
    assert years_of_service(date(2025, 6, 1), date(2025, 1, 1)) == 0


def test_years_of_service_accepts_iso_strings() -> None:
    assert years_of_service("2020-01-01", "2020-01-01") == 0


def test_years_of_service_rejects_garbage() -> None:
    with pytest.raises(InvalidDate):
        years_of_service("01/02/2020", date(2025, 1, 1))


def test_seniority_periods_are_floored() -> None:
    assert seniority_periods(Decimal("4.99"), RULE) == 0
    assert seniority_periods(Decimal(5), RULE) == 1
    assert seniority_periods(Decimal("14.9"), RULE) == 2
    assert seniority_periods(Decimal(8), IT_DEPARTMENT_RULE) == 2


# ---------------------------------------------------------------------------
# Entitlement
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("years", "expected"),
    [
        (0, Decimal(18)),
        (3, Decimal(18)),
        (5, Decimal("19.5")),
        (10, Decimal(21)),
        (15, Decimal("22.5")),
        (20, Decimal(24)),
        (40, Decimal(30)),
        (60, Decimal(30)),
    ],
)
def test_annual_entitlement(years: int, expected: Decimal) -> None:
    assert annual_entitlement(Decimal(years), RULE) == expected


def test_entitlement_is_monotone_and_capped() -> None:
    previous = Decimal(0)
    for years in range(61):
        entitlement = annual_entitlement(Decimal(years), RULE)
        assert entitlement >= previous
        assert entitlement <= RULE.max_annual_days
        assert entitlement >= RULE.annual_base_days
        previous = entitlement


def test_new_employee_rule_has_no_bonus() -> None:
    assert annual_entitlement(Decimal(10), NEW_EMPLOYEE_RULE) == Decimal(18)


def test_senior_management_base() -> None:
    assert annual_entitlement(Decimal(5), SENIOR_MANAGEMENT_RULE) == Decimal("23.5")


# ---------------------------------------------------------------------------
# Prorated accrual
# ---------------------------------------------------------------------------


def test_prorata_second_half_year() -> None:
    assert prorata_accrual(date(2025, 7, 1), date(2025, 7, 1), date(2025, 12, 31), RULE) == Decimal(9)


def test_prorata_last_quarter() -> None:
    assert prorata_accrual(date(2025, 10, 1), date(2025, 10, 1), date(2025, 12, 31), RULE) == Decimal("4.5")


def test_prorata_full_year() -> None:
    assert prorata_accrual(date(2024, 1, 1), date(2025, 1, 1), date(2025, 12, 31), RULE) == Decimal(18)


def test_prorata_hire_after_period_is_zero() -> None:
    assert prorata_accrual(date(2026, 1, 1), date(2025, 1, 1), date(2025, 12, 31), RULE) == 0


def test_prorata_partial_month_uses_average_month() -> None:
    # 170 days / 30.4375 * 1.5 = 8.38 -> 8.5
    assert prorata_accrual(date(2025, 7, 15), date(2025, 1, 1), date(2025, 12, 31), RULE) == Decimal("8.5")


def test_prorata_is_a_multiple_of_half_a_day() -> None:
    for month in range(1, 13):
        accrued = prorata_accrual(date(2025, month, 10), date(2025, 1, 1), date(2025, 12, 31), RULE)
        assert (accrued * 2) % 1 == 0


def test_prorata_seniority_as_of_period_end() -> None:
    # Ten years of service at the end of the period: 21 days a year.
    assert prorata_accrual(date(2015, 1, 1), date(2025, 1, 1), date(2025, 6, 30), RULE) == Decimal("10.5")


# ---------------------------------------------------------------------------
# Carryover expiry
# ---------------------------------------------------------------------------


def test_standard_carryover_expires_after_three_months() -> None:
    assert carryover_expiry_date(2025, RULE) == date(2026, 4, 1)


def test_expiry_follows_rule_grace_period() -> None:
    assert carryover_expiry_date(2025, SENIOR_MANAGEMENT_RULE) == date(2026, 7, 1)
    assert carryover_expiry_date(2025, NEW_EMPLOYEE_RULE) == date(2026, 1, 1)
    twelve_months = RULE.model_copy(update={"carryover_expiry_months": 12})
    assert carryover_expiry_date(2025, twelve_months) == date(2027, 1, 1)


def test_is_carryover_expired_is_strict() -> None:
    assert is_carryover_expired(2025, date(2026, 3, 31), RULE) is False
    assert is_carryover_expired(2025, date(2026, 4, 1), RULE) is False
    assert is_carryover_expired(2025, "2026-04-02", RULE) is True
