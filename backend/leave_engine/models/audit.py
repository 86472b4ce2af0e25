# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from leave_engine.models.base import UUIDBase


def _now_utc() -> datetime:
    return datetime.now(UTC)


class CarryoverAudit(UUIDBase, table=True):
    """Append-only record of every action taken on a carryover snapshot."""

    __tablename__ = "carryover_audit"
    __table_args__ = (sa.Index("ix_carryover_audit_employee_year", "employee_id", "year"),)

    carryover_id: uuid.UUID | None = Field(default=None, index=True)
    employee_id: uuid.UUID | None = None
    year: int
    action: str = Field(max_length=50)
    performed_by: uuid.UUID
    old_values: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    new_values: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    reason: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(
        default_factory=_now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
