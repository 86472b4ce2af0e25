from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from leave_engine.calculators.days import ZERO, close_enough, round_cents

if TYPE_CHECKING:
    from leave_engine.calculators.balance import YearlyBalance
    from leave_engine.calculators.rules import AccrualRule


class CarryoverValidation(BaseModel):
    """Diagnostic outcome; never blocks a computation by itself."""

    is_valid: bool
    errors: list[str] = []


def validate_carryover(balance: YearlyBalance, rule: AccrualRule | None = None) -> CarryoverValidation:
    """Cross-check a balance record for internal consistency.

    Every check runs independently and contributes its own message. With a
    rule, the carryover ceiling is also checked against the rule's ratio.
    """
    errors: list[str] = []

    if balance.next_carryover > balance.max_carryover:
        errors.append(
            f"Carryover ({balance.next_carryover} days) exceeds the allowed limit ({balance.max_carryover} days)"
        )

    available = balance.annual_rate + balance.previous_carryover
    consumed = balance.used + balance.used_adjustment
    if consumed > available:
        errors.append(f"Consumption exceeds availability: {consumed} days used for {available} days available")

    if not close_enough(balance.remaining, available - consumed):
        errors.append(
            f"Remaining balance ({balance.remaining} days) does not match available minus consumed "
            f"({available - consumed} days)"
        )

    expected_forfeited = max(ZERO, balance.remaining - balance.max_carryover)
    if not close_enough(balance.forfeited, expected_forfeited):
        errors.append(f"Forfeited days ({balance.forfeited}) should be {expected_forfeited}")

    if rule is not None:
        # Manual balance adjustments do not raise the ceiling.
        rule_rate = balance.annual_rate - balance.balance_adjustment
        ceiling = round_cents(rule_rate * rule.max_carryover_ratio)
        if balance.max_carryover > ceiling:
            errors.append(
                f"Carryover limit ({balance.max_carryover} days) exceeds the rule limit ({ceiling} days) "
                f"for rule {rule.id}"
            )

    return CarryoverValidation(is_valid=not errors, errors=errors)
