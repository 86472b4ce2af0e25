# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel

from leave_engine.calculators.rules import (
    LEGAL_MIN_ANNUAL_DAYS,
    STANDARD_CARRYOVER_EXPIRY_MONTHS,
    STANDARD_CARRYOVER_RATIO,
    STANDARD_MAX_ANNUAL_DAYS,
    STANDARD_SENIORITY_BONUS_DAYS,
    AccrualRule,
)


class RuleListResponse(BaseModel):
    default_rule_id: str
    rules: list[AccrualRule]


class RuleCandidate(BaseModel):
    """Rule parameters submitted for a legality check; not constrained by the legal floor."""

    annual_base_days: Decimal = LEGAL_MIN_ANNUAL_DAYS
    seniority_bonus_days: Decimal = STANDARD_SENIORITY_BONUS_DAYS
    seniority_bonus_period_years: int = 5
    max_annual_days: Decimal = STANDARD_MAX_ANNUAL_DAYS
    max_carryover_ratio: Decimal = STANDARD_CARRYOVER_RATIO
    carryover_expiry_months: int = STANDARD_CARRYOVER_EXPIRY_MONTHS


class EmployeeRuleResponse(BaseModel):
    employee_id: uuid.UUID
    rule: AccrualRule
