# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, Response

from leave_engine.api.deps import ActorDep, AdminDep, RegistryDep, StoreDep
from leave_engine.db import SessionDep
from leave_engine.exceptions import EmployeeNotFound
from leave_engine.models.enums import CarryoverStatus
from leave_engine.schemas.carryover import (
    AdjustUsedDaysRequest,
    AuditEntryListResponse,
    AuditEntryResponse,
    BulkRecalculationFailure,
    BulkRecalculationResponse,
    CarryoverListResponse,
    CarryoverResponse,
    CarryoverSummaryResponse,
    LockYearResponse,
    ValidateCarryoverRequest,
)
from leave_engine.services import carryover as carryover_service
from leave_engine.services.audit import list_audit_entries
from leave_engine.services.export import export_carryovers_csv, render_calculation_summary

year_carryovers_router = APIRouter(prefix="/carryovers/{year}", tags=["carryovers"])

employee_carryovers_router = APIRouter(
    prefix="/employees/{employee_id}/carryovers/{year}",
    tags=["carryovers"],
)


# ---------------------------------------------------------------------------
# Year-wide operations
# ---------------------------------------------------------------------------


@year_carryovers_router.post("/recalculate", response_model=BulkRecalculationResponse)
async def recalculate_year(
    year: int,
    session: SessionDep,
    store: StoreDep,
    registry: RegistryDep,
    actor: AdminDep,
) -> BulkRecalculationResponse:
    """Recalculate every active employee for a year (admin only)."""
    result = await carryover_service.bulk_recalculate(session, store, registry, year, actor.user_id)
    return BulkRecalculationResponse(
        year=result.year,
        succeeded=result.succeeded,
        failed=result.failed,
        skipped=result.skipped,
        cancelled=result.cancelled,
        failures=[BulkRecalculationFailure.model_validate(f) for f in result.failures],
    )


@year_carryovers_router.get("", response_model=CarryoverListResponse)
async def list_year_carryovers(
    year: int,
    session: SessionDep,
    actor: ActorDep,
    status: CarryoverStatus | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> CarryoverListResponse:
    """List the snapshots of a year."""
    items, total = await carryover_service.list_carryovers(session, year, status=status, offset=offset, limit=limit)
    return CarryoverListResponse(
        items=[carryover_service.build_carryover_response(s) for s in items],
        total=total,
    )


@year_carryovers_router.get("/export")
async def export_year_carryovers(
    year: int,
    session: SessionDep,
    actor: AdminDep,
    status: CarryoverStatus | None = Query(default=None),
) -> Response:
    """Download every snapshot of a year as CSV (admin only)."""
    items, _total = await carryover_service.list_carryovers(session, year, status=status, limit=None)
    return Response(
        content=export_carryovers_csv(items),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="carryovers_{year}.csv"'},
    )


@year_carryovers_router.post("/lock", response_model=LockYearResponse)
async def lock_year(
    year: int,
    session: SessionDep,
    actor: AdminDep,
) -> LockYearResponse:
    """Close a year; its snapshots become read-only (admin only)."""
    locked = await carryover_service.lock_year(session, year, actor.user_id)
    return LockYearResponse(year=year, locked=locked)


# ---------------------------------------------------------------------------
# Per-employee operations
# ---------------------------------------------------------------------------


@employee_carryovers_router.get("", response_model=CarryoverResponse)
async def get_employee_carryover(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    actor: ActorDep,
) -> CarryoverResponse:
    snapshot = await carryover_service.get_carryover(session, employee_id, year)
    return carryover_service.build_carryover_response(snapshot)


@employee_carryovers_router.get("/summary", response_model=CarryoverSummaryResponse)
async def get_employee_carryover_summary(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    store: StoreDep,
    actor: ActorDep,
) -> CarryoverSummaryResponse:
    """Plain-text account of how the snapshot was computed."""
    employee = await store.get_employee(employee_id)
    if employee is None:
        raise EmployeeNotFound(employee_id)
    snapshot = await carryover_service.get_carryover(session, employee_id, year)
    summary = render_calculation_summary(carryover_service.snapshot_to_balance(snapshot), employee.full_name)
    return CarryoverSummaryResponse(employee_id=employee_id, year=year, summary=summary)


@employee_carryovers_router.post("/recalculate", response_model=CarryoverResponse)
async def recalculate_employee_carryover(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    store: StoreDep,
    registry: RegistryDep,
    actor: ActorDep,
) -> CarryoverResponse:
    snapshot = await carryover_service.recalculate_carryover(
        session, store, registry, employee_id, year, actor.user_id
    )
    return carryover_service.build_carryover_response(snapshot)


@employee_carryovers_router.post("/validate", response_model=CarryoverResponse)
async def validate_employee_carryover(
    employee_id: uuid.UUID,
    year: int,
    payload: ValidateCarryoverRequest,
    session: SessionDep,
    actor: AdminDep,
) -> CarryoverResponse:
    """Validate a consistent snapshot (admin only)."""
    snapshot = await carryover_service.validate_carryover_record(
        session, employee_id, year, actor.user_id, payload.notes
    )
    return carryover_service.build_carryover_response(snapshot)


@employee_carryovers_router.post("/adjust", response_model=CarryoverResponse)
async def adjust_employee_carryover(
    employee_id: uuid.UUID,
    year: int,
    payload: AdjustUsedDaysRequest,
    session: SessionDep,
    store: StoreDep,
    registry: RegistryDep,
    actor: AdminDep,
) -> CarryoverResponse:
    """Correct recorded consumption and recalculate (admin only)."""
    snapshot = await carryover_service.adjust_used_days(
        session, store, registry, employee_id, year, payload.adjustment, payload.reason, actor.user_id
    )
    return carryover_service.build_carryover_response(snapshot)


@employee_carryovers_router.get("/audit", response_model=AuditEntryListResponse)
async def get_employee_carryover_audit(
    employee_id: uuid.UUID,
    year: int,
    session: SessionDep,
    actor: AdminDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditEntryListResponse:
    """Audit trail of a snapshot, newest first (admin only)."""
    entries, total = await list_audit_entries(session, employee_id=employee_id, year=year, offset=offset, limit=limit)
    return AuditEntryListResponse(
        items=[AuditEntryResponse.model_validate(e, from_attributes=True) for e in entries],
        total=total,
    )
