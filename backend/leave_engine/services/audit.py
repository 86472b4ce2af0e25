from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from leave_engine.models.audit import CarryoverAudit

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from leave_engine.models.enums import AuditAction

# Bookkeeping columns left out of before/after values.
_AUDIT_EXCLUDED = frozenset({"created_at", "updated_at"})


def _json_safe(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for audit logging."""
    return {key: _json_safe(value) for key, value in model.model_dump().items() if key not in _AUDIT_EXCLUDED}


def write_audit_log(
    session: AsyncSession,
    *,
    year: int,
    performed_by: uuid.UUID,
    action: AuditAction,
    carryover_id: uuid.UUID | None = None,
    employee_id: uuid.UUID | None = None,
    old_values: dict[str, Any] | None = None,
    new_values: dict[str, Any] | None = None,
    reason: str | None = None,
) -> CarryoverAudit:
    """Append an audit entry within the caller's transaction."""
    entry = CarryoverAudit(
        carryover_id=carryover_id,
        employee_id=employee_id,
        year=year,
        action=action.value,
        performed_by=performed_by,
        old_values=old_values,
        new_values=new_values,
        reason=reason,
    )
    session.add(entry)
    return entry


async def list_audit_entries(
    session: AsyncSession,
    *,
    employee_id: uuid.UUID | None = None,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[CarryoverAudit], int]:
    """Audit entries, newest first, with the total count of matching entries."""
    filters = []
    if employee_id is not None:
        filters.append(col(CarryoverAudit.employee_id) == employee_id)
    if year is not None:
        filters.append(col(CarryoverAudit.year) == year)

    count_result = await session.execute(select(func.count()).select_from(CarryoverAudit).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(CarryoverAudit)
        .where(*filters)
        .order_by(col(CarryoverAudit.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total
