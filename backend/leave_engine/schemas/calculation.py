# ruff: noqa: TC003
"""Request/response schemas for the stateless calculation endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from leave_engine.calculators.balance import YearlyBalance
from leave_engine.calculators.projector import YearlyUsage


class RuleReference(BaseModel):
    """Select a registered rule by id; the registry default when omitted."""

    rule_id: str | None = None


class BusinessDaysRequest(BaseModel):
    start_date: date
    end_date: date


class BusinessDaysResponse(BaseModel):
    start_date: date
    end_date: date
    business_days: int


class EntitlementRequest(RuleReference):
    hire_date: date
    reference_date: date


class EntitlementResponse(BaseModel):
    rule_id: str
    years_of_service: Decimal
    seniority_periods: int
    annual_entitlement: Decimal
    carryover_expires_on: date


class YearlyBalanceRequest(RuleReference):
    hire_date: date
    year: int = Field(ge=1900, le=9999)
    used: Decimal = Decimal(0)
    used_adjustment: Decimal = Decimal(0)
    previous_carryover: Decimal = Field(default=Decimal(0), ge=0)
    balance_adjustment: Decimal = Decimal(0)


class ProrataRequest(RuleReference):
    hire_date: date
    period_start: date
    period_end: date


class ProrataResponse(BaseModel):
    rule_id: str
    accrued_days: Decimal


class HistoryRequest(RuleReference):
    hire_date: date
    yearly_usage: list[YearlyUsage] = Field(min_length=1)
    initial_carryover: Decimal = Field(default=Decimal(0), ge=0)


class ValidateBalanceRequest(RuleReference):
    balance: YearlyBalance
