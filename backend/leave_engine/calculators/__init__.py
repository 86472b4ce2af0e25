from leave_engine.calculators.accrual import (
    annual_entitlement,
    carryover_expiry_date,
    is_carryover_expired,
    prorata_accrual,
    seniority_periods,
    years_of_service,
)
from leave_engine.calculators.balance import (
    YearlyBalance,
    compute_current_balance,
    compute_yearly_balance,
    max_carryover,
)
from leave_engine.calculators.business_days import (
    MOROCCAN_FIXED_HOLIDAYS,
    SUNDAY,
    count_business_days,
    is_business_day,
)
from leave_engine.calculators.projector import YearlyUsage, project_history
from leave_engine.calculators.rules import (
    IT_DEPARTMENT_RULE,
    MOROCCAN_LABOR_LAW_RULE,
    NEW_EMPLOYEE_RULE,
    SENIOR_MANAGEMENT_RULE,
    AccrualRule,
    RuleRegistry,
    RuleValidation,
    build_default_registry,
    create_custom_rule,
    select_rule,
    validate_rule,
)
from leave_engine.calculators.validator import CarryoverValidation, validate_carryover

__all__ = [
    "IT_DEPARTMENT_RULE",
    "MOROCCAN_FIXED_HOLIDAYS",
    "MOROCCAN_LABOR_LAW_RULE",
    "NEW_EMPLOYEE_RULE",
    "SENIOR_MANAGEMENT_RULE",
    "SUNDAY",
    "AccrualRule",
    "CarryoverValidation",
    "RuleRegistry",
    "RuleValidation",
    "YearlyBalance",
    "YearlyUsage",
    "annual_entitlement",
    "build_default_registry",
    "carryover_expiry_date",
    "compute_current_balance",
    "compute_yearly_balance",
    "count_business_days",
    "create_custom_rule",
    "is_business_day",
    "is_carryover_expired",
    "max_carryover",
    "project_history",
    "prorata_accrual",
    "select_rule",
    "seniority_periods",
    "validate_carryover",
    "validate_rule",
    "years_of_service",
]
