from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from leave_engine.calculators.balance import compute_yearly_balance
from leave_engine.calculators.rules import MOROCCAN_LABOR_LAW_RULE, SENIOR_MANAGEMENT_RULE
from leave_engine.calculators.validator import validate_carryover

if TYPE_CHECKING:
    from leave_engine.calculators.balance import YearlyBalance

RULE = MOROCCAN_LABOR_LAW_RULE


def _balance(used: int = 10, **kwargs: object) -> YearlyBalance:
    return compute_yearly_balance(date(2020, 1, 1), 2025, used, rule=RULE, **kwargs)  # type: ignore[arg-type]


def test_engine_output_is_consistent() -> None:
    for used in (0, 5, 10, 19):
        result = validate_carryover(_balance(used), RULE)
        assert result.is_valid, result.errors
        assert result.errors == []


def test_carryover_above_ceiling_is_flagged() -> None:
    tampered = _balance().model_copy(update={"next_carryover": Decimal(8), "forfeited": Decimal("1.5")})
    result = validate_carryover(tampered)
    assert not result.is_valid
    assert any("exceeds the allowed limit" in e for e in result.errors)


def test_over_consumption_is_flagged() -> None:
    result = validate_carryover(_balance(25))
    assert not result.is_valid
    assert any("Consumption exceeds availability" in e for e in result.errors)


def test_remaining_mismatch_is_flagged() -> None:
    tampered = _balance().model_copy(update={"remaining": Decimal(12)})
    result = validate_carryover(tampered)
    assert any("does not match available minus consumed" in e for e in result.errors)


def test_forfeited_mismatch_is_flagged() -> None:
    tampered = _balance().model_copy(update={"forfeited": Decimal(0)})
    result = validate_carryover(tampered)
    assert result.errors == ["Forfeited days (0) should be 3.00"]


def test_differences_within_a_cent_are_tolerated() -> None:
    tampered = _balance().model_copy(update={"remaining": Decimal("9.51"), "forfeited": Decimal("3.01")})
    assert validate_carryover(tampered).is_valid


def test_checks_are_independent() -> None:
    tampered = _balance().model_copy(
        update={"next_carryover": Decimal(9), "remaining": Decimal(1), "forfeited": Decimal(5)}
    )
    result = validate_carryover(tampered)
    assert len(result.errors) == 3


def test_rule_ceiling_check() -> None:
    senior_balance = compute_yearly_balance(date(2022, 1, 1), 2025, 0, rule=SENIOR_MANAGEMENT_RULE)
    assert validate_carryover(senior_balance, SENIOR_MANAGEMENT_RULE).is_valid

    result = validate_carryover(senior_balance, RULE)
    assert not result.is_valid
    assert any("exceeds the rule limit" in e for e in result.errors)


def test_rule_ceiling_ignores_manual_adjustment() -> None:
    balance = _balance(0, balance_adjustment=4)
    assert validate_carryover(balance, RULE).is_valid
