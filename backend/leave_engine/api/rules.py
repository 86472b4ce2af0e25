# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from leave_engine.api.deps import RegistryDep, StoreDep
from leave_engine.calculators.rules import RuleValidation, check_rule_parameters, select_rule
from leave_engine.exceptions import EmployeeNotFound
from leave_engine.schemas.rule import EmployeeRuleResponse, RuleCandidate, RuleListResponse

rules_router = APIRouter(prefix="/rules", tags=["rules"])

employee_rule_router = APIRouter(prefix="/employees/{employee_id}/rule", tags=["rules"])


@rules_router.get("", response_model=RuleListResponse)
async def list_rules(registry: RegistryDep) -> RuleListResponse:
    """List the rules in force."""
    return RuleListResponse(default_rule_id=registry.default.id, rules=list(registry.rules))


@rules_router.post("/validate", response_model=RuleValidation)
async def validate_rule_parameters(payload: RuleCandidate) -> RuleValidation:
    """Check rule parameters against the labor code without registering them."""
    return check_rule_parameters(payload.model_dump())


@employee_rule_router.get("", response_model=EmployeeRuleResponse)
async def get_employee_rule(
    employee_id: uuid.UUID,
    registry: RegistryDep,
    store: StoreDep,
) -> EmployeeRuleResponse:
    """The rule currently applying to an employee."""
    employee = await store.get_employee(employee_id)
    if employee is None:
        raise EmployeeNotFound(employee_id)
    return EmployeeRuleResponse(employee_id=employee_id, rule=select_rule(employee, registry))
