# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from leave_engine.models.base import TimestampMixin, UUIDBase
from leave_engine.models.enums import CarryoverStatus


def _days_field(default: Decimal = Decimal(0)) -> Any:
    return Field(default=default, sa_type=sa.Numeric(7, 2), sa_column_kwargs={"server_default": "0"})


class AnnualCarryover(UUIDBase, TimestampMixin, table=True):
    """Persisted snapshot of one employee-year balance.

    Always overwritten by recalculation; ``used_days_adjustment`` and the
    validation fields are the only values set by hand.
    """

    __tablename__ = "annual_carryover"
    __table_args__ = (sa.UniqueConstraint("employee_id", "year", name="uq_carryover_employee_year"),)

    employee_id: uuid.UUID = Field(index=True)
    year: int = Field(index=True)
    rule_id: str = Field(max_length=100)

    accrued_days: Decimal = _days_field()
    used_days: Decimal = _days_field()
    used_days_adjustment: Decimal = _days_field()
    balance_adjustment: Decimal = _days_field()
    remaining_days: Decimal = _days_field()
    previous_carryover: Decimal = _days_field()
    next_carryover: Decimal = _days_field()
    max_carryover_allowed: Decimal = _days_field()
    forfeited_days: Decimal = _days_field()

    status: str = Field(default=CarryoverStatus.DRAFT.value, max_length=20)
    validation_errors: list[str] | None = Field(default=None, sa_type=sa.JSON)
    calculation_details: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)

    validated_by: uuid.UUID | None = None
    validated_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    admin_notes: str | None = Field(default=None, max_length=2000)
