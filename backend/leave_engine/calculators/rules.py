"""Accrual rules, their legal validation, and per-employee rule selection.

Legal references (Dahir n° 1-03-194):
- Art. 231: 1.5 days per month of service, 18 days per year.
- Art. 241: +1.5 days per 5 years of seniority, 30 days per year at most.
- Art. 242: unused leave may be carried over, customarily a third of the
  yearly entitlement, to be used within 3 months.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Protocol, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from leave_engine.calculators.accrual import years_of_service
from leave_engine.exceptions import RuleRegistryError, RuleViolatesMinimumLaw
from leave_engine.models.enums import EmployeeRole, RuleScope

logger = logging.getLogger(__name__)

LEGAL_MIN_ANNUAL_DAYS = Decimal(18)
STANDARD_SENIORITY_BONUS_DAYS = Decimal("1.5")
STANDARD_MAX_ANNUAL_DAYS = Decimal(30)
STANDARD_CARRYOVER_RATIO = Decimal(1) / Decimal(3)
STANDARD_CARRYOVER_EXPIRY_MONTHS = 3

DEFAULT_SELECTION_ORDER: tuple[RuleScope, ...] = (RuleScope.FIRST_YEAR, RuleScope.DEPARTMENT, RuleScope.ROLE)


class RuleValidation(BaseModel):
    """Outcome of checking a rule against the labor code."""

    is_valid: bool
    errors: list[str] = []
    warnings: list[str] = []


def check_rule_parameters(values: dict[str, Any]) -> RuleValidation:
    errors: list[str] = []
    warnings: list[str] = []

    base = Decimal(values["annual_base_days"])
    bonus = Decimal(values["seniority_bonus_days"])
    period = int(values["seniority_bonus_period_years"])
    cap = Decimal(values["max_annual_days"])
    ratio = Decimal(values["max_carryover_ratio"])
    expiry = int(values["carryover_expiry_months"])

    if base < LEGAL_MIN_ANNUAL_DAYS:
        errors.append(f"Annual base ({base} days) is below the legal minimum ({LEGAL_MIN_ANNUAL_DAYS} days)")
    if bonus < 0:
        errors.append("Seniority bonus cannot be negative")
    elif bonus < STANDARD_SENIORITY_BONUS_DAYS:
        warnings.append(f"Seniority bonus ({bonus} days) is below the standard ({STANDARD_SENIORITY_BONUS_DAYS} days)")
    if period < 1:
        errors.append(f"Seniority bonus period ({period} years) must be at least one year")
    if cap < LEGAL_MIN_ANNUAL_DAYS:
        errors.append(f"Annual cap ({cap} days) is below the legal minimum ({LEGAL_MIN_ANNUAL_DAYS} days)")
    elif cap < base:
        warnings.append(f"Annual cap ({cap} days) is below the annual base ({base} days)")
    elif cap > STANDARD_MAX_ANNUAL_DAYS:
        warnings.append(f"Annual cap ({cap} days) exceeds the standard ({STANDARD_MAX_ANNUAL_DAYS} days)")
    if ratio < 0 or ratio > 1:
        errors.append(f"Carryover ratio ({ratio}) must be between 0 and 1")
    elif ratio < STANDARD_CARRYOVER_RATIO:
        warnings.append(f"Carryover ratio ({ratio * 100:.0f}%) is below the standard (33%)")
    if expiry < 0:
        errors.append("Carryover expiry cannot be negative")
    elif expiry < STANDARD_CARRYOVER_EXPIRY_MONTHS:
        warnings.append(
            f"Carryover expiry ({expiry} months) is below the standard ({STANDARD_CARRYOVER_EXPIRY_MONTHS} months)"
        )

    return RuleValidation(is_valid=not errors, errors=errors, warnings=warnings)


class AccrualRule(BaseModel):
    """Immutable accrual and carryover parameters.

    Constructing a rule below the legal floor raises RuleViolatesMinimumLaw.
    Legal but below-standard values only produce warnings (see validate_rule).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, max_length=100)
    is_default: bool = False

    annual_base_days: Decimal = LEGAL_MIN_ANNUAL_DAYS
    seniority_bonus_days: Decimal = STANDARD_SENIORITY_BONUS_DAYS
    seniority_bonus_period_years: int = 5
    max_annual_days: Decimal = STANDARD_MAX_ANNUAL_DAYS
    max_carryover_ratio: Decimal = STANDARD_CARRYOVER_RATIO
    carryover_expiry_months: int = STANDARD_CARRYOVER_EXPIRY_MONTHS

    # Applicability
    roles: tuple[str, ...] = ()
    department: str | None = None
    first_year_only: bool = False
    effective_from: date | None = None
    effective_until: date | None = None

    legal_reference: str | None = None
    notes: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _enforce_legal_floor(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = {name: data.get(name, field.default) for name, field in cls.model_fields.items()}
        try:
            result = check_rule_parameters(values)
        except (ArithmeticError, TypeError, ValueError):
            # Malformed numbers are reported by field validation.
            return data
        if not result.is_valid:
            raise RuleViolatesMinimumLaw(str(data.get("id", "?")), result.errors)
        return data

    @model_validator(mode="after")
    def _validate_window(self) -> Self:
        if self.effective_from and self.effective_until and self.effective_until < self.effective_from:
            msg = "effective_until must be on or after effective_from"
            raise ValueError(msg)
        return self

    def is_effective_on(self, day: date) -> bool:
        if self.effective_from is not None and day < self.effective_from:
            return False
        return not (self.effective_until is not None and day > self.effective_until)


def validate_rule(rule: AccrualRule) -> RuleValidation:
    """Check a rule against the legal floor and the customary standard."""
    return check_rule_parameters(rule.model_dump())


def create_custom_rule(base: AccrualRule, **overrides: Any) -> AccrualRule:
    """Derive a non-default rule from ``base``.

    Raises RuleViolatesMinimumLaw when the result is unlawful; warnings are
    logged and the rule is returned.
    """
    data = base.model_dump()
    data.update(overrides)
    data["id"] = overrides.get("id") or f"custom-{uuid.uuid4().hex[:8]}"
    data["is_default"] = False
    rule = AccrualRule.model_validate(data)

    validation = validate_rule(rule)
    for warning in validation.warnings:
        logger.warning("Custom rule %s: %s", rule.id, warning)
    return rule


# ---------------------------------------------------------------------------
# Built-in rules
# ---------------------------------------------------------------------------

MOROCCAN_LABOR_LAW_RULE = AccrualRule(
    id="moroccan-labor-law",
    is_default=True,
    effective_from=date(2020, 1, 1),
    legal_reference="Code du Travail Marocain - Dahir n° 1-03-194",
    notes="Standard rule for every employee without a specific arrangement",
)

SENIOR_MANAGEMENT_RULE = AccrualRule(
    id="senior-management",
    roles=(EmployeeRole.MANAGER.value, EmployeeRole.ADMIN.value),
    annual_base_days=Decimal(22),
    max_carryover_ratio=Decimal("0.5"),
    carryover_expiry_months=6,
    effective_from=date(2025, 1, 1),
    legal_reference="Company agreement - senior management",
)

IT_DEPARTMENT_RULE = AccrualRule(
    id="it-department",
    department="IT",
    seniority_bonus_days=Decimal(2),
    seniority_bonus_period_years=4,
    effective_from=date(2025, 1, 1),
    effective_until=date(2026, 12, 31),
    legal_reference="Company agreement - IT department",
)

NEW_EMPLOYEE_RULE = AccrualRule(
    id="new-employee",
    first_year_only=True,
    seniority_bonus_days=Decimal(0),
    max_annual_days=Decimal(18),
    max_carryover_ratio=Decimal(0),
    carryover_expiry_months=0,
    effective_from=date(2025, 1, 1),
    legal_reference="HR policy - first year of employment",
)


# ---------------------------------------------------------------------------
# Registry and selection
# ---------------------------------------------------------------------------


class RuleRegistry(BaseModel):
    """The set of rules in force and the order used to pick one per employee."""

    model_config = ConfigDict(frozen=True)

    rules: tuple[AccrualRule, ...]
    selection_order: tuple[RuleScope, ...] = DEFAULT_SELECTION_ORDER

    @model_validator(mode="after")
    def _check_consistency(self) -> Self:
        defaults = [r.id for r in self.rules if r.is_default]
        if len(defaults) != 1:
            raise RuleRegistryError(f"Exactly one default rule is required, found {len(defaults)}")
        ids = [r.id for r in self.rules]
        if len(set(ids)) != len(ids):
            raise RuleRegistryError("Rule ids must be unique")
        return self

    @property
    def default(self) -> AccrualRule:
        return next(r for r in self.rules if r.is_default)

    def get(self, rule_id: str) -> AccrualRule:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        raise RuleRegistryError(f"Unknown rule {rule_id!r}", status_code=404)


class RuleSubject(Protocol):
    """What the selector needs to know about an employee."""

    role: str | None
    department: str | None
    hire_date: date


def build_default_registry() -> RuleRegistry:
    return RuleRegistry(
        rules=(MOROCCAN_LABOR_LAW_RULE, SENIOR_MANAGEMENT_RULE, IT_DEPARTMENT_RULE, NEW_EMPLOYEE_RULE),
    )


def _match(scope: RuleScope, subject: RuleSubject, candidates: list[AccrualRule], today: date) -> AccrualRule | None:
    if scope == RuleScope.FIRST_YEAR:
        if years_of_service(subject.hire_date, today) >= 1:
            return None
        return next((r for r in candidates if r.first_year_only), None)

    if scope == RuleScope.DEPARTMENT:
        if not subject.department:
            return None
        return next(
            (r for r in candidates if not r.first_year_only and r.department == subject.department),
            None,
        )

    # ROLE
    if not subject.role:
        return None
    return next(
        (r for r in candidates if not r.first_year_only and r.department is None and subject.role in r.roles),
        None,
    )


def select_rule(subject: RuleSubject, registry: RuleRegistry, *, today: date | None = None) -> AccrualRule:
    """Pick the rule applying to an employee.

    Scopes are tried in ``registry.selection_order`` (first year, department,
    role by default) among the rules effective on ``today``; the registry's
    default rule applies when none matches.
    """
    if today is None:
        today = date.today()

    candidates = [r for r in registry.rules if not r.is_default and r.is_effective_on(today)]
    for scope in registry.selection_order:
        rule = _match(scope, subject, candidates, today)
        if rule is not None:
            return rule
    return registry.default
