# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header, status

from leave_engine.calculators.rules import AccrualRule, RuleRegistry
from leave_engine.exceptions import AppError
from leave_engine.models.enums import EmployeeRole
from leave_engine.schemas.auth import ActorContext
from leave_engine.services.records import RecordStore, get_record_store
from leave_engine.services.rules import get_rule_registry


async def get_actor_context(
    x_user_id: uuid.UUID = Header(),
    x_role: EmployeeRole = Header(default=EmployeeRole.EMPLOYEE),
) -> ActorContext:
    """Extract the dev actor from request headers."""
    return ActorContext(user_id=x_user_id, role=x_role)


ActorDep = Annotated[ActorContext, Depends(get_actor_context)]


async def require_admin(
    actor: ActorDep,
) -> ActorContext:
    """Require an administrative role (ADMIN or HR) for the request."""
    if not actor.is_admin:
        raise AppError("Admin access required", status_code=status.HTTP_403_FORBIDDEN)
    return actor


AdminDep = Annotated[ActorContext, Depends(require_admin)]
RegistryDep = Annotated[RuleRegistry, Depends(get_rule_registry)]
StoreDep = Annotated[RecordStore, Depends(get_record_store)]


def resolve_rule(registry: RuleRegistry, rule_id: str | None) -> AccrualRule:
    """The registered rule named ``rule_id``, or the default one."""
    if rule_id is None:
        return registry.default
    return registry.get(rule_id)
