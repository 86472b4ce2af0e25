# ruff: noqa: TC001
"""Stateless calculation endpoints: every result is derived from the request body alone."""

from __future__ import annotations

from fastapi import APIRouter

from leave_engine.api.deps import RegistryDep, resolve_rule
from leave_engine.calculators.accrual import (
    annual_entitlement,
    carryover_expiry_date,
    prorata_accrual,
    seniority_periods,
    years_of_service,
)
from leave_engine.calculators.balance import YearlyBalance, compute_yearly_balance
from leave_engine.calculators.business_days import MOROCCAN_FIXED_HOLIDAYS, count_business_days
from leave_engine.calculators.days import round_cents
from leave_engine.calculators.projector import project_history
from leave_engine.calculators.validator import CarryoverValidation, validate_carryover
from leave_engine.config import get_settings
from leave_engine.schemas.calculation import (
    BusinessDaysRequest,
    BusinessDaysResponse,
    EntitlementRequest,
    EntitlementResponse,
    HistoryRequest,
    ProrataRequest,
    ProrataResponse,
    ValidateBalanceRequest,
    YearlyBalanceRequest,
)

calculations_router = APIRouter(prefix="/calculations", tags=["calculations"])


@calculations_router.post("/business-days", response_model=BusinessDaysResponse)
async def business_days(payload: BusinessDaysRequest) -> BusinessDaysResponse:
    """Count working days in an inclusive date range."""
    count = count_business_days(
        payload.start_date,
        payload.end_date,
        holidays=MOROCCAN_FIXED_HOLIDAYS,
        rest_weekday=get_settings().weekly_rest_day,
    )
    return BusinessDaysResponse(start_date=payload.start_date, end_date=payload.end_date, business_days=count)


@calculations_router.post("/entitlement", response_model=EntitlementResponse)
async def entitlement(payload: EntitlementRequest, registry: RegistryDep) -> EntitlementResponse:
    """Seniority and yearly entitlement as of a reference date."""
    rule = resolve_rule(registry, payload.rule_id)
    years = years_of_service(payload.hire_date, payload.reference_date)
    return EntitlementResponse(
        rule_id=rule.id,
        years_of_service=round_cents(years),
        seniority_periods=seniority_periods(years, rule),
        annual_entitlement=annual_entitlement(years, rule),
        carryover_expires_on=carryover_expiry_date(payload.reference_date.year, rule),
    )


@calculations_router.post("/yearly-balance", response_model=YearlyBalance)
async def yearly_balance(payload: YearlyBalanceRequest, registry: RegistryDep) -> YearlyBalance:
    """Compute one year's balance."""
    rule = resolve_rule(registry, payload.rule_id)
    return compute_yearly_balance(
        payload.hire_date,
        payload.year,
        payload.used,
        rule=rule,
        used_adjustment=payload.used_adjustment,
        previous_carryover=payload.previous_carryover,
        balance_adjustment=payload.balance_adjustment,
    )


@calculations_router.post("/prorata", response_model=ProrataResponse)
async def prorata(payload: ProrataRequest, registry: RegistryDep) -> ProrataResponse:
    """Days accrued over a partial period."""
    rule = resolve_rule(registry, payload.rule_id)
    accrued = prorata_accrual(payload.hire_date, payload.period_start, payload.period_end, rule)
    return ProrataResponse(rule_id=rule.id, accrued_days=accrued)


@calculations_router.post("/history", response_model=list[YearlyBalance])
async def history(payload: HistoryRequest, registry: RegistryDep) -> list[YearlyBalance]:
    """Chain yearly balances over several years."""
    rule = resolve_rule(registry, payload.rule_id)
    return project_history(
        payload.hire_date,
        payload.yearly_usage,
        rule,
        initial_carryover=payload.initial_carryover,
    )


@calculations_router.post("/validate", response_model=CarryoverValidation)
async def validate(payload: ValidateBalanceRequest, registry: RegistryDep) -> CarryoverValidation:
    """Cross-check a balance record; the rule check runs only when a rule id is given."""
    rule = registry.get(payload.rule_id) if payload.rule_id is not None else None
    return validate_carryover(payload.balance, rule)
