from sqlmodel import SQLModel

from leave_engine.models.audit import CarryoverAudit
from leave_engine.models.base import TimestampMixin, UUIDBase
from leave_engine.models.carryover import AnnualCarryover
from leave_engine.models.enums import (
    AuditAction,
    CarryoverStatus,
    EmployeeRole,
    LeaveStatus,
    LeaveType,
    RuleScope,
)

__all__ = [
    "AnnualCarryover",
    "AuditAction",
    "CarryoverAudit",
    "CarryoverStatus",
    "EmployeeRole",
    "LeaveStatus",
    "LeaveType",
    "RuleScope",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
