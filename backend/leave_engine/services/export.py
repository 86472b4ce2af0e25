from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from leave_engine.calculators.balance import YearlyBalance
    from leave_engine.models.carryover import AnnualCarryover

CSV_COLUMNS = (
    "employee_id",
    "year",
    "rule_id",
    "accrued_days",
    "used_days",
    "used_days_adjustment",
    "balance_adjustment",
    "remaining_days",
    "previous_carryover",
    "next_carryover",
    "max_carryover_allowed",
    "forfeited_days",
    "status",
    "validated_at",
)


def export_carryovers_csv(snapshots: Iterable[AnnualCarryover]) -> str:
    """Serialize snapshots to CSV, one row per employee-year."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for snapshot in snapshots:
        writer.writerow(
            [
                snapshot.employee_id,
                snapshot.year,
                snapshot.rule_id,
                snapshot.accrued_days,
                snapshot.used_days,
                snapshot.used_days_adjustment,
                snapshot.balance_adjustment,
                snapshot.remaining_days,
                snapshot.previous_carryover,
                snapshot.next_carryover,
                snapshot.max_carryover_allowed,
                snapshot.forfeited_days,
                snapshot.status,
                snapshot.validated_at.isoformat() if snapshot.validated_at else "",
            ]
        )
    return buffer.getvalue()


def render_calculation_summary(balance: YearlyBalance, employee_name: str) -> str:
    """Plain-text statement of how a yearly balance was reached."""
    lines = [
        f"LEAVE BALANCE - {balance.year}",
        f"Employee: {employee_name}",
        f"Seniority: {balance.years_of_service:.2f} years",
        "",
        "ENTITLEMENT:",
        f"- Annual rate: {balance.annual_rate} days (rule {balance.rule_id})",
        f"- Seniority bonus: {balance.seniority_bonus} days",
    ]
    if balance.balance_adjustment:
        lines.append(f"- Manual adjustment: {balance.balance_adjustment:+} days")
    lines += [
        f"- Carried over from {balance.year - 1}: {balance.previous_carryover} days",
        f"- TOTAL AVAILABLE: {balance.total_available:.2f} days",
        "",
        "USAGE:",
        f"- Days taken: {balance.used} days",
    ]
    if balance.used_adjustment:
        lines.append(f"- Usage correction: {balance.used_adjustment:+} days")
    lines += [
        f"- Remaining: {balance.remaining:.2f} days",
        "",
        f"CARRYOVER TO {balance.year + 1}:",
        f"- Allowed: {balance.max_carryover} days",
        f"- Carried over: {balance.next_carryover} days",
        f"- Forfeited: {balance.forfeited} days",
        "",
        "Moroccan Labour Code (Art. 231, 241, 242)",
    ]
    return "\n".join(lines)
