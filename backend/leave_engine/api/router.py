from fastapi import APIRouter

from leave_engine.api.calculations import calculations_router
from leave_engine.api.carryovers import employee_carryovers_router, year_carryovers_router
from leave_engine.api.rules import employee_rule_router, rules_router

api_router = APIRouter()
api_router.include_router(calculations_router)
api_router.include_router(rules_router)
api_router.include_router(employee_rule_router)
api_router.include_router(year_carryovers_router)
api_router.include_router(employee_carryovers_router)
