"""Carryover snapshot processing.

Recalculation reads the record store, runs the pure engine, and persists the
result as an AnnualCarryover snapshot with an audit entry. Bulk runs isolate
each employee: one failure is rolled back, logged and counted while the loop
moves on.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from leave_engine.calculators.accrual import carryover_expiry_date
from leave_engine.calculators.balance import YearlyBalance, compute_yearly_balance
from leave_engine.calculators.days import ZERO, to_half_days
from leave_engine.calculators.rules import select_rule
from leave_engine.calculators.validator import validate_carryover
from leave_engine.config import get_settings
from leave_engine.exceptions import AppError, CarryoverLocked, CarryoverNotFound, EmployeeNotFound
from leave_engine.models.carryover import AnnualCarryover
from leave_engine.models.enums import AuditAction, CarryoverStatus
from leave_engine.schemas.carryover import CarryoverResponse
from leave_engine.services.audit import model_to_audit_dict, write_audit_log
from leave_engine.services.records import sum_annual_consumption

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from leave_engine.calculators.rules import AccrualRule, RuleRegistry
    from leave_engine.calculators.validator import CarryoverValidation
    from leave_engine.services.records import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class BulkRecalculationResult:
    """Summary of a workforce-wide recalculation."""

    year: int
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: bool = False
    failures: list[dict[str, object]] = field(default_factory=list)


def build_carryover_response(snapshot: AnnualCarryover) -> CarryoverResponse:
    return CarryoverResponse(
        id=snapshot.id,
        employee_id=snapshot.employee_id,
        year=snapshot.year,
        rule_id=snapshot.rule_id,
        accrued_days=snapshot.accrued_days,
        used_days=snapshot.used_days,
        used_days_adjustment=snapshot.used_days_adjustment,
        balance_adjustment=snapshot.balance_adjustment,
        remaining_days=snapshot.remaining_days,
        previous_carryover=snapshot.previous_carryover,
        next_carryover=snapshot.next_carryover,
        max_carryover_allowed=snapshot.max_carryover_allowed,
        forfeited_days=snapshot.forfeited_days,
        status=CarryoverStatus(snapshot.status),
        validation_errors=snapshot.validation_errors,
        calculation_details=snapshot.calculation_details,
        validated_by=snapshot.validated_by,
        validated_at=snapshot.validated_at,
        admin_notes=snapshot.admin_notes,
        updated_at=snapshot.updated_at,
    )


def snapshot_to_balance(snapshot: AnnualCarryover) -> YearlyBalance:
    """Rebuild the engine record a snapshot was persisted from."""
    details = snapshot.calculation_details or {}
    return YearlyBalance(
        year=snapshot.year,
        rule_id=snapshot.rule_id,
        years_of_service=Decimal(details.get("years_of_service", "0")),
        annual_rate=snapshot.accrued_days,
        seniority_bonus=Decimal(details.get("seniority_bonus", "0")),
        balance_adjustment=snapshot.balance_adjustment,
        previous_carryover=snapshot.previous_carryover,
        used=snapshot.used_days,
        used_adjustment=snapshot.used_days_adjustment,
        remaining=snapshot.remaining_days,
        max_carryover=snapshot.max_carryover_allowed,
        next_carryover=snapshot.next_carryover,
        forfeited=snapshot.forfeited_days,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def _find_snapshot(session: AsyncSession, employee_id: uuid.UUID, year: int) -> AnnualCarryover | None:
    result = await session.execute(
        select(AnnualCarryover).where(
            col(AnnualCarryover.employee_id) == employee_id,
            col(AnnualCarryover.year) == year,
        )
    )
    return result.scalar_one_or_none()


async def get_carryover(session: AsyncSession, employee_id: uuid.UUID, year: int) -> AnnualCarryover:
    """Get a snapshot or raise 404."""
    snapshot = await _find_snapshot(session, employee_id, year)
    if snapshot is None:
        raise CarryoverNotFound(employee_id, year)
    return snapshot


async def list_carryovers(
    session: AsyncSession,
    year: int,
    *,
    status: CarryoverStatus | None = None,
    offset: int = 0,
    limit: int | None = 50,
) -> tuple[list[AnnualCarryover], int]:
    """Snapshots of a year, optionally filtered by status, with the total count.

    ``limit=None`` returns every matching snapshot.
    """
    filters = [col(AnnualCarryover.year) == year]
    if status is not None:
        filters.append(col(AnnualCarryover.status) == status.value)

    count_result = await session.execute(select(func.count()).select_from(AnnualCarryover).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AnnualCarryover)
        .where(*filters)
        .order_by(col(AnnualCarryover.employee_id))
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


# ---------------------------------------------------------------------------
# Recalculation
# ---------------------------------------------------------------------------


def _apply_balance(
    snapshot: AnnualCarryover,
    balance: YearlyBalance,
    validation: CarryoverValidation,
    rule: AccrualRule,
) -> None:
    snapshot.rule_id = rule.id
    snapshot.accrued_days = balance.annual_rate
    snapshot.used_days = balance.used
    snapshot.used_days_adjustment = balance.used_adjustment
    snapshot.balance_adjustment = balance.balance_adjustment
    snapshot.remaining_days = balance.remaining
    snapshot.previous_carryover = balance.previous_carryover
    snapshot.next_carryover = balance.next_carryover
    snapshot.max_carryover_allowed = balance.max_carryover
    snapshot.forfeited_days = balance.forfeited

    snapshot.status = (CarryoverStatus.PENDING if validation.is_valid else CarryoverStatus.DRAFT).value
    snapshot.validation_errors = validation.errors or None
    snapshot.validated_by = None
    snapshot.validated_at = None
    snapshot.calculation_details = {
        "years_of_service": str(balance.years_of_service),
        "annual_rate": str(balance.annual_rate),
        "seniority_bonus": str(balance.seniority_bonus),
        "carryover_expires_on": carryover_expiry_date(balance.year, rule).isoformat(),
        "calculated_at": datetime.now(UTC).isoformat(),
    }
    snapshot.updated_at = datetime.now(UTC)


async def recalculate_carryover(
    session: AsyncSession,
    store: RecordStore,
    registry: RuleRegistry,
    employee_id: uuid.UUID,
    year: int,
    actor_id: uuid.UUID,
    *,
    today: date | None = None,
    used_adjustment: Decimal | None = None,
    commit: bool = True,
) -> AnnualCarryover:
    """Recompute and persist one employee's balance for ``year``.

    The previous year's snapshot supplies the carryover. The employee's
    manual balance adjustment only applies to the current calendar year.
    ``used_adjustment`` replaces the snapshot's stored consumption correction.
    """
    if today is None:
        today = date.today()

    employee = await store.get_employee(employee_id)
    if employee is None:
        raise EmployeeNotFound(employee_id)

    snapshot = await _find_snapshot(session, employee_id, year)
    if snapshot is not None and snapshot.status == CarryoverStatus.LOCKED.value:
        raise CarryoverLocked(employee_id, year)

    previous = await _find_snapshot(session, employee_id, year - 1)
    previous_carryover = previous.next_carryover if previous is not None else ZERO

    leaves = await store.list_leaves(employee_id, year)
    used = sum_annual_consumption(leaves, year)

    if used_adjustment is None:
        used_adjustment = snapshot.used_days_adjustment if snapshot is not None else ZERO

    rule = select_rule(employee, registry, today=today)
    balance = compute_yearly_balance(
        employee.hire_date,
        year,
        used,
        rule=rule,
        used_adjustment=used_adjustment,
        previous_carryover=previous_carryover,
        balance_adjustment=employee.balance_adjustment if year == today.year else ZERO,
    )
    validation = validate_carryover(balance, rule)
    if not validation.is_valid:
        logger.warning(
            "Carryover for employee=%s year=%d failed consistency checks: %s",
            employee_id,
            year,
            "; ".join(validation.errors),
        )
        if get_settings().snapshot_block_invalid:
            raise AppError(f"Invalid calculation: {'; '.join(validation.errors)}", status_code=422)

    before = model_to_audit_dict(snapshot) if snapshot is not None else None
    if snapshot is None:
        snapshot = AnnualCarryover(employee_id=employee_id, year=year, rule_id=rule.id)
        session.add(snapshot)

    _apply_balance(snapshot, balance, validation, rule)
    await session.flush()

    write_audit_log(
        session,
        year=year,
        performed_by=actor_id,
        action=AuditAction.RECALCULATE,
        carryover_id=snapshot.id,
        employee_id=employee_id,
        old_values=before,
        new_values=model_to_audit_dict(snapshot),
        reason="Automatic recalculation",
    )

    if commit:
        await session.commit()
    return snapshot


async def bulk_recalculate(
    session: AsyncSession,
    store: RecordStore,
    registry: RuleRegistry,
    year: int,
    actor_id: uuid.UUID,
    *,
    today: date | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> BulkRecalculationResult:
    """Recalculate every active employee for ``year``, one transaction each.

    Employees hired after the year and locked snapshots are skipped.
    ``should_stop`` is polled between employees to cancel the run.
    """
    result = BulkRecalculationResult(year=year)
    year_end = date(year, 12, 31)

    employees = await store.list_active_employees()
    for employee in employees:
        if should_stop is not None and should_stop():
            result.cancelled = True
            logger.info("Bulk recalculation for %d cancelled after %d employees", year, result.succeeded)
            break

        if employee.hire_date > year_end:
            result.skipped += 1
            continue

        try:
            await recalculate_carryover(session, store, registry, employee.id, year, actor_id, today=today)
            result.succeeded += 1
        except CarryoverLocked:
            await session.rollback()
            result.skipped += 1
        except Exception as exc:
            await session.rollback()
            logger.exception("Carryover recalculation failed for employee=%s year=%d", employee.id, year)
            result.failed += 1
            result.failures.append({"employee_id": employee.id, "error": str(exc)})

    logger.info(
        "Bulk recalculation for %d: succeeded=%d failed=%d skipped=%d",
        year,
        result.succeeded,
        result.failed,
        result.skipped,
    )
    return result


# ---------------------------------------------------------------------------
# Manual actions
# ---------------------------------------------------------------------------


async def validate_carryover_record(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int,
    actor_id: uuid.UUID,
    notes: str | None = None,
) -> AnnualCarryover:
    """Mark a consistent snapshot as validated by an administrator."""
    snapshot = await get_carryover(session, employee_id, year)
    if snapshot.status == CarryoverStatus.LOCKED.value:
        raise CarryoverLocked(employee_id, year)
    if snapshot.validation_errors:
        raise AppError("Snapshot has consistency errors; recalculate or adjust it first", status_code=409)

    before = {"status": snapshot.status}
    snapshot.status = CarryoverStatus.VALIDATED.value
    snapshot.validated_by = actor_id
    snapshot.validated_at = datetime.now(UTC)
    snapshot.admin_notes = notes
    snapshot.updated_at = datetime.now(UTC)

    write_audit_log(
        session,
        year=year,
        performed_by=actor_id,
        action=AuditAction.VALIDATE,
        carryover_id=snapshot.id,
        employee_id=employee_id,
        old_values=before,
        new_values={"status": snapshot.status, "admin_notes": notes},
        reason=notes or "Administrative validation",
    )
    await session.commit()
    return snapshot


async def adjust_used_days(
    session: AsyncSession,
    store: RecordStore,
    registry: RuleRegistry,
    employee_id: uuid.UUID,
    year: int,
    adjustment: Decimal,
    reason: str,
    actor_id: uuid.UUID,
    *,
    today: date | None = None,
) -> AnnualCarryover:
    """Set the consumption correction of a snapshot, then recalculate it."""
    amount = to_half_days(adjustment, "adjustment")

    if await store.get_employee(employee_id) is None:
        raise EmployeeNotFound(employee_id)

    snapshot = await _find_snapshot(session, employee_id, year)
    if snapshot is not None and snapshot.status == CarryoverStatus.LOCKED.value:
        raise CarryoverLocked(employee_id, year)

    previous_amount = snapshot.used_days_adjustment if snapshot is not None else ZERO
    snapshot = await recalculate_carryover(
        session, store, registry, employee_id, year, actor_id, today=today, used_adjustment=amount, commit=False
    )

    write_audit_log(
        session,
        year=year,
        performed_by=actor_id,
        action=AuditAction.ADJUST,
        carryover_id=snapshot.id,
        employee_id=employee_id,
        old_values={"used_days_adjustment": str(previous_amount)},
        new_values={"used_days_adjustment": str(amount)},
        reason=reason,
    )
    await session.commit()
    return snapshot


async def lock_year(session: AsyncSession, year: int, actor_id: uuid.UUID) -> int:
    """Close a year: every snapshot of ``year`` becomes read-only. Returns how many were locked."""
    result = await session.execute(
        select(AnnualCarryover).where(
            col(AnnualCarryover.year) == year,
            col(AnnualCarryover.status) != CarryoverStatus.LOCKED.value,
        )
    )
    snapshots = list(result.scalars().all())

    for snapshot in snapshots:
        before = {"status": snapshot.status}
        snapshot.status = CarryoverStatus.LOCKED.value
        snapshot.updated_at = datetime.now(UTC)
        write_audit_log(
            session,
            year=year,
            performed_by=actor_id,
            action=AuditAction.LOCK,
            carryover_id=snapshot.id,
            employee_id=snapshot.employee_id,
            old_values=before,
            new_values={"status": snapshot.status},
            reason=f"Year {year} closed",
        )

    await session.commit()
    logger.info("Locked %d carryover snapshots for %d", len(snapshots), year)
    return len(snapshots)
