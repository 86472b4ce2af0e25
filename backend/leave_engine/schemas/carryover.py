# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from leave_engine.models.enums import AuditAction, CarryoverStatus

# ---------------------------------------------------------------------------
# Snapshot response schemas
# ---------------------------------------------------------------------------


class CarryoverResponse(BaseModel):
    """A persisted yearly balance snapshot."""

    id: uuid.UUID
    employee_id: uuid.UUID
    year: int
    rule_id: str
    accrued_days: Decimal
    used_days: Decimal
    used_days_adjustment: Decimal
    balance_adjustment: Decimal
    remaining_days: Decimal
    previous_carryover: Decimal
    next_carryover: Decimal
    max_carryover_allowed: Decimal
    forfeited_days: Decimal
    status: CarryoverStatus
    validation_errors: list[str] | None
    calculation_details: dict[str, Any] | None
    validated_by: uuid.UUID | None
    validated_at: datetime | None
    admin_notes: str | None
    updated_at: datetime


class CarryoverListResponse(BaseModel):
    """Paginated snapshots for a year."""

    items: list[CarryoverResponse]
    total: int


class CarryoverSummaryResponse(BaseModel):
    """Human-readable summary of a snapshot's computation."""

    employee_id: uuid.UUID
    year: int
    summary: str


# ---------------------------------------------------------------------------
# Audit schemas
# ---------------------------------------------------------------------------


class AuditEntryResponse(BaseModel):
    id: uuid.UUID
    carryover_id: uuid.UUID | None
    employee_id: uuid.UUID | None
    year: int
    action: AuditAction
    performed_by: uuid.UUID
    old_values: dict[str, Any] | None
    new_values: dict[str, Any] | None
    reason: str | None
    created_at: datetime


class AuditEntryListResponse(BaseModel):
    items: list[AuditEntryResponse]
    total: int


# ---------------------------------------------------------------------------
# Action request schemas
# ---------------------------------------------------------------------------


class ValidateCarryoverRequest(BaseModel):
    """Request body for validating a snapshot."""

    notes: str | None = Field(default=None, max_length=2000)


class AdjustUsedDaysRequest(BaseModel):
    """Request body for correcting recorded consumption."""

    adjustment: Decimal = Field(description="Signed day amount in half-day steps; replaces the previous correction")
    reason: str = Field(min_length=1, max_length=1000)


class BulkRecalculationFailure(BaseModel):
    employee_id: uuid.UUID
    error: str


class BulkRecalculationResponse(BaseModel):
    """Outcome of recalculating every active employee for a year."""

    year: int
    succeeded: int
    failed: int
    skipped: int
    cancelled: bool
    failures: list[BulkRecalculationFailure]


class LockYearResponse(BaseModel):
    year: int
    locked: int
