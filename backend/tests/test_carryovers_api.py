from __future__ import annotations

import csv
import io
import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from leave_engine.models.enums import LeaveStatus, LeaveType
from leave_engine.services.records import EmployeeRecord, LeaveRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

    from httpx import AsyncClient

    from leave_engine.calculators.rules import RuleRegistry
    from leave_engine.services.records import InMemoryRecordStore

USER_ID = uuid.uuid4()
EMPLOYEE_ID = uuid.uuid4()
YEAR = 2025

ADMIN_HEADERS = {"X-User-Id": str(USER_ID), "X-Role": "ADMIN"}
HR_HEADERS = {"X-User-Id": str(USER_ID), "X-Role": "HR"}
EMPLOYEE_HEADERS = {"X-User-Id": str(USER_ID), "X-Role": "EMPLOYEE"}

YEAR_URL = f"/carryovers/{YEAR}"
EMPLOYEE_URL = f"/employees/{EMPLOYEE_ID}/carryovers/{YEAR}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _seed_records(record_store: InMemoryRecordStore, registry: RuleRegistry) -> Iterator[None]:
    """Seed one long-serving employee with ten approved days in the year."""
    record_store.seed_employee(
        EmployeeRecord(
            id=EMPLOYEE_ID,
            full_name="Nadia Berrada",
            role="EMPLOYEE",
            hire_date=date(2020, 1, 1),
        )
    )
    record_store.seed_leave(
        LeaveRecord(
            employee_id=EMPLOYEE_ID,
            type=LeaveType.ANNUAL,
            status=LeaveStatus.APPROVED,
            start_date=date(YEAR, 7, 7),
            end_date=date(YEAR, 7, 18),
            duration=Decimal(10),
            fiscal_year=YEAR,
        )
    )
    yield


async def _recalculate(client: AsyncClient) -> dict:
    response = await client.post(f"{EMPLOYEE_URL}/recalculate", headers=EMPLOYEE_HEADERS)
    assert response.status_code == 200
    return response.json()


# ---------------------------------------------------------------------------
# Per-employee endpoints
# ---------------------------------------------------------------------------


async def test_recalculate_employee(async_client: AsyncClient) -> None:
    data = await _recalculate(async_client)
    assert data["employee_id"] == str(EMPLOYEE_ID)
    assert data["year"] == YEAR
    assert data["rule_id"] == "moroccan-labor-law"
    assert Decimal(data["remaining_days"]) == Decimal("9.5")
    assert Decimal(data["next_carryover"]) == Decimal("6.5")
    assert Decimal(data["forfeited_days"]) == Decimal(3)
    assert data["status"] == "PENDING"


async def test_recalculate_requires_actor(async_client: AsyncClient) -> None:
    response = await async_client.post(f"{EMPLOYEE_URL}/recalculate")
    assert response.status_code == 422


async def test_recalculate_unknown_employee(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"/employees/{uuid.uuid4()}/carryovers/{YEAR}/recalculate", headers=EMPLOYEE_HEADERS
    )
    assert response.status_code == 404
    assert response.json()["error"] == "EmployeeNotFound"


async def test_get_employee_carryover(async_client: AsyncClient) -> None:
    response = await async_client.get(EMPLOYEE_URL, headers=EMPLOYEE_HEADERS)
    assert response.status_code == 404
    assert response.json()["error"] == "CarryoverNotFound"

    await _recalculate(async_client)
    response = await async_client.get(EMPLOYEE_URL, headers=EMPLOYEE_HEADERS)
    assert response.status_code == 200
    assert Decimal(response.json()["accrued_days"]) == Decimal("19.5")


async def test_summary(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    response = await async_client.get(f"{EMPLOYEE_URL}/summary", headers=EMPLOYEE_HEADERS)
    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary.startswith(f"LEAVE BALANCE - {YEAR}")
    assert "Employee: Nadia Berrada" in summary
    assert "- Forfeited: 3.00 days" in summary


async def test_validate_requires_admin(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    response = await async_client.post(f"{EMPLOYEE_URL}/validate", json={}, headers=EMPLOYEE_HEADERS)
    assert response.status_code == 403


async def test_validate_by_hr(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    response = await async_client.post(f"{EMPLOYEE_URL}/validate", json={"notes": "ok"}, headers=HR_HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "VALIDATED"
    assert data["validated_by"] == str(USER_ID)
    assert data["admin_notes"] == "ok"


async def test_adjust(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{EMPLOYEE_URL}/adjust",
        json={"adjustment": "-1.5", "reason": "Day recorded twice"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["used_days_adjustment"]) == Decimal("-1.5")
    assert Decimal(data["remaining_days"]) == Decimal(11)


async def test_adjust_rejects_sub_half_day(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{EMPLOYEE_URL}/adjust",
        json={"adjustment": "0.75", "reason": "typo"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 422
    assert response.json()["error"] == "InvalidDayAmount"


async def test_audit_trail(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    await async_client.post(
        f"{EMPLOYEE_URL}/adjust",
        json={"adjustment": "1", "reason": "Unrecorded day"},
        headers=ADMIN_HEADERS,
    )
    response = await async_client.get(f"{EMPLOYEE_URL}/audit", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert sorted(e["action"] for e in data["items"]) == ["ADJUST", "RECALCULATE", "RECALCULATE"]
    assert all(e["performed_by"] == str(USER_ID) for e in data["items"])


async def test_audit_trail_total_counts_every_entry(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    await _recalculate(async_client)
    await _recalculate(async_client)
    response = await async_client.get(f"{EMPLOYEE_URL}/audit?limit=1", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert len(data["items"]) == 1
    assert data["total"] == 3


# ---------------------------------------------------------------------------
# Year-wide endpoints
# ---------------------------------------------------------------------------


async def test_bulk_recalculate_requires_admin(async_client: AsyncClient) -> None:
    response = await async_client.post(f"{YEAR_URL}/recalculate", headers=EMPLOYEE_HEADERS)
    assert response.status_code == 403


async def test_bulk_recalculate(async_client: AsyncClient) -> None:
    response = await async_client.post(f"{YEAR_URL}/recalculate", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert data == {
        "year": YEAR,
        "succeeded": 1,
        "failed": 0,
        "skipped": 0,
        "cancelled": False,
        "failures": [],
    }

    response = await async_client.get(YEAR_URL, headers=EMPLOYEE_HEADERS)
    assert response.status_code == 200
    listing = response.json()
    assert listing["total"] == 1
    assert listing["items"][0]["employee_id"] == str(EMPLOYEE_ID)


async def test_list_filters_by_status(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    response = await async_client.get(YEAR_URL, params={"status": "VALIDATED"}, headers=EMPLOYEE_HEADERS)
    assert response.json() == {"items": [], "total": 0}


async def test_export_csv(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    response = await async_client.get(f"{YEAR_URL}/export", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert f"carryovers_{YEAR}.csv" in response.headers["content-disposition"]
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert len(rows) == 1
    assert rows[0]["employee_id"] == str(EMPLOYEE_ID)
    assert Decimal(rows[0]["remaining_days"]) == Decimal("9.5")


async def test_lock_year(async_client: AsyncClient) -> None:
    await _recalculate(async_client)
    response = await async_client.post(f"{YEAR_URL}/lock", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json() == {"year": YEAR, "locked": 1}

    response = await async_client.post(f"{EMPLOYEE_URL}/recalculate", headers=EMPLOYEE_HEADERS)
    assert response.status_code == 409
    assert response.json()["error"] == "CarryoverLocked"
