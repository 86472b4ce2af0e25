"""Create carryover snapshot and audit tables

Revision ID: 0001_carryover_tables
Revises:
Create Date: 2025-11-03 09:00:00.000000
"""

import sqlalchemy as sa
from alembic import op

revision = "0001_carryover_tables"
down_revision = None
branch_labels = None
depends_on = None

DAY_COLUMNS = (
    "accrued_days",
    "used_days",
    "used_days_adjustment",
    "balance_adjustment",
    "remaining_days",
    "previous_carryover",
    "next_carryover",
    "max_carryover_allowed",
    "forfeited_days",
)


def upgrade() -> None:
    op.create_table(
        "annual_carryover",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("rule_id", sa.String(length=100), nullable=False),
        *(sa.Column(name, sa.Numeric(7, 2), server_default="0", nullable=False) for name in DAY_COLUMNS),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("validation_errors", sa.JSON(), nullable=True),
        sa.Column("calculation_details", sa.JSON(), nullable=True),
        sa.Column("validated_by", sa.Uuid(), nullable=True),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_notes", sa.String(length=2000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "year", name="uq_carryover_employee_year"),
    )
    op.create_index("ix_annual_carryover_employee_id", "annual_carryover", ["employee_id"])
    op.create_index("ix_annual_carryover_year", "annual_carryover", ["year"])

    op.create_table(
        "carryover_audit",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("carryover_id", sa.Uuid(), nullable=True),
        sa.Column("employee_id", sa.Uuid(), nullable=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("performed_by", sa.Uuid(), nullable=False),
        sa.Column("old_values", sa.JSON(), nullable=True),
        sa.Column("new_values", sa.JSON(), nullable=True),
        sa.Column("reason", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_carryover_audit_carryover_id", "carryover_audit", ["carryover_id"])
    op.create_index("ix_carryover_audit_created_at", "carryover_audit", ["created_at"])
    op.create_index("ix_carryover_audit_employee_year", "carryover_audit", ["employee_id", "year"])


def downgrade() -> None:
    op.drop_table("carryover_audit")
    op.drop_table("annual_carryover")
