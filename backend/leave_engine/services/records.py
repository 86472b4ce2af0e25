# ruff: noqa: TC003
"""Employee and leave-request record store.

The store belongs to the surrounding HR application; this module defines the
interface the carryover services read through and an in-memory stub.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

from pydantic import BaseModel, Field, field_validator, model_validator

from leave_engine.calculators.days import ZERO, to_half_days
from leave_engine.models.enums import LeaveStatus, LeaveType

if TYPE_CHECKING:
    from collections.abc import Iterable


class EmployeeRecord(BaseModel):
    """Employee profile fields the leave engine depends on."""

    id: uuid.UUID
    full_name: str
    role: str | None = None
    department: str | None = None
    hire_date: date
    # Manual +/- days on the entitlement, distinct from the consumption correction.
    balance_adjustment: Decimal = ZERO
    is_active: bool = True

    @field_validator("balance_adjustment", mode="before")
    @classmethod
    def _half_days(cls, v: object) -> Decimal:
        return to_half_days(v if v is not None else 0, "balance_adjustment")  # type: ignore[arg-type]


class LeaveRecord(BaseModel):
    """A leave request as stored upstream, with every field required."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    employee_id: uuid.UUID
    type: LeaveType
    status: LeaveStatus
    start_date: date
    end_date: date
    duration: Decimal = Field(ge=0)
    fiscal_year: int

    @field_validator("duration", mode="before")
    @classmethod
    def _half_days(cls, v: object) -> Decimal:
        return to_half_days(v, "duration")  # type: ignore[arg-type]

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must be >= start_date"
            raise ValueError(msg)
        return self


def sum_annual_consumption(leaves: Iterable[LeaveRecord], year: int) -> Decimal:
    """Approved annual-type leave charged to ``year``."""
    return sum(
        (
            leave.duration
            for leave in leaves
            if leave.fiscal_year == year and leave.status == LeaveStatus.APPROVED and leave.type == LeaveType.ANNUAL
        ),
        ZERO,
    )


@runtime_checkable
class RecordStore(Protocol):
    """Interface for the upstream employee/leave store."""

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeRecord | None:
        """Fetch an employee. Returns None if not found."""
        ...

    async def list_active_employees(self) -> list[EmployeeRecord]:
        """List employees whose balances should be maintained."""
        ...

    async def list_leaves(self, employee_id: uuid.UUID, fiscal_year: int) -> list[LeaveRecord]:
        """List leave requests charged to a fiscal year."""
        ...


class InMemoryRecordStore:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self._employees: dict[uuid.UUID, EmployeeRecord] = {}
        self._leaves: list[LeaveRecord] = []

    def seed_employee(self, employee: EmployeeRecord) -> None:
        self._employees[employee.id] = employee

    def seed_leave(self, leave: LeaveRecord) -> None:
        self._leaves.append(leave)

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeRecord | None:
        return self._employees.get(employee_id)

    async def list_active_employees(self) -> list[EmployeeRecord]:
        return [e for e in self._employees.values() if e.is_active]

    async def list_leaves(self, employee_id: uuid.UUID, fiscal_year: int) -> list[LeaveRecord]:
        return [lv for lv in self._leaves if lv.employee_id == employee_id and lv.fiscal_year == fiscal_year]


_record_store: RecordStore = InMemoryRecordStore()


def get_record_store() -> RecordStore:
    """FastAPI dependency for the record store."""
    return _record_store


def set_record_store(store: RecordStore) -> None:
    """Override the store (for testing or production wiring)."""
    global _record_store
    _record_store = store
