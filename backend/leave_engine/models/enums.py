from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Category of a leave request; only ANNUAL consumes the yearly entitlement."""

    ANNUAL = "ANNUAL"
    EXCEPTIONAL = "EXCEPTIONAL"
    SICK = "SICK"
    MATERNITY = "MATERNITY"
    RTT = "RTT"


class LeaveStatus(enum.StrEnum):
    """State of a leave request in the record store."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class EmployeeRole(enum.StrEnum):
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    HR = "HR"
    ADMIN = "ADMIN"


class RuleScope(enum.StrEnum):
    """Selection steps tried, in order, before falling back to the default rule."""

    FIRST_YEAR = "FIRST_YEAR"
    DEPARTMENT = "DEPARTMENT"
    ROLE = "ROLE"


class CarryoverStatus(enum.StrEnum):
    """Lifecycle of a persisted yearly balance snapshot."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    LOCKED = "LOCKED"


class AuditAction(enum.StrEnum):
    """Action recorded in the carryover audit trail."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    VALIDATE = "VALIDATE"
    LOCK = "LOCK"
    RECALCULATE = "RECALCULATE"
    ADJUST = "ADJUST"
