from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from leave_engine.exceptions import InvalidDayAmount
from leave_engine.models.enums import LeaveStatus, LeaveType
from leave_engine.services.records import (
    EmployeeRecord,
    InMemoryRecordStore,
    LeaveRecord,
    RecordStore,
    sum_annual_consumption,
)

EMPLOYEE_ID = uuid.uuid4()


def _leave(
    duration: str = "1",
    *,
    leave_type: LeaveType = LeaveType.ANNUAL,
    status: LeaveStatus = LeaveStatus.APPROVED,
    fiscal_year: int = 2025,
) -> LeaveRecord:
    return LeaveRecord(
        employee_id=EMPLOYEE_ID,
        type=leave_type,
        status=status,
        start_date=date(fiscal_year, 3, 3),
        end_date=date(fiscal_year, 3, 7),
        duration=duration,  # type: ignore[arg-type]
        fiscal_year=fiscal_year,
    )


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------


def test_leave_duration_must_be_half_days() -> None:
    assert _leave("2.5").duration == Decimal("2.5")
    with pytest.raises(InvalidDayAmount):
        _leave("1.25")


def test_leave_end_before_start_is_rejected() -> None:
    with pytest.raises(ValidationError):
        LeaveRecord(
            employee_id=EMPLOYEE_ID,
            type=LeaveType.ANNUAL,
            status=LeaveStatus.APPROVED,
            start_date=date(2025, 3, 7),
            end_date=date(2025, 3, 3),
            duration=Decimal(1),
            fiscal_year=2025,
        )


def test_leave_requires_every_field() -> None:
    with pytest.raises(ValidationError):
        LeaveRecord.model_validate({"employee_id": str(EMPLOYEE_ID), "type": "ANNUAL"})


def test_employee_balance_adjustment_must_be_half_days() -> None:
    with pytest.raises(InvalidDayAmount):
        EmployeeRecord(id=uuid.uuid4(), full_name="Y", hire_date=date(2020, 1, 1), balance_adjustment=Decimal("0.2"))


# ---------------------------------------------------------------------------
# Consumption
# ---------------------------------------------------------------------------


def test_only_approved_annual_leave_of_the_year_counts() -> None:
    leaves = [
        _leave("3"),
        _leave("1.5"),
        _leave("2", leave_type=LeaveType.SICK),
        _leave("4", status=LeaveStatus.PENDING),
        _leave("1", status=LeaveStatus.REJECTED),
        _leave("5", fiscal_year=2024),
    ]
    assert sum_annual_consumption(leaves, 2025) == Decimal("4.5")
    assert sum_annual_consumption(leaves, 2024) == Decimal(5)
    assert sum_annual_consumption([], 2025) == 0


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


async def test_in_memory_store() -> None:
    store = InMemoryRecordStore()
    assert isinstance(store, RecordStore)

    active = EmployeeRecord(id=uuid.uuid4(), full_name="Active", hire_date=date(2020, 1, 1))
    inactive = EmployeeRecord(id=uuid.uuid4(), full_name="Gone", hire_date=date(2020, 1, 1), is_active=False)
    store.seed_employee(active)
    store.seed_employee(inactive)
    store.seed_leave(_leave("2").model_copy(update={"employee_id": active.id}))

    assert await store.get_employee(inactive.id) == inactive
    assert await store.get_employee(uuid.uuid4()) is None
    assert await store.list_active_employees() == [active]
    assert len(await store.list_leaves(active.id, 2025)) == 1
    assert await store.list_leaves(active.id, 2024) == []
