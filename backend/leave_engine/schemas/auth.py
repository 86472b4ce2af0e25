# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from leave_engine.models.enums import EmployeeRole


class ActorContext(BaseModel):
    """Dev actor context extracted from request headers, used for the audit trail."""

    user_id: uuid.UUID
    role: EmployeeRole = EmployeeRole.EMPLOYEE

    @property
    def is_admin(self) -> bool:
        return self.role in (EmployeeRole.ADMIN, EmployeeRole.HR)
