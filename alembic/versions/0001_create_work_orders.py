"""create work_orders and diagnostics tables

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

STAGES = ("TRIAGE", "QUOTATION", "EXECUTION", "QA", "CLOSURE", "WARRANTY")

def upgrade():
    op.create_table(
        "work_orders",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("wo_id", sa.String(length=32), nullable=False, unique=True),
        sa.Column("customer_id", sa.String(length=36), nullable=False),
        sa.Column("device_id", sa.String(length=36), nullable=False),
        sa.Column("technician_id", sa.String(length=36), nullable=True),
        sa.Column("status", sa.Enum(*STAGES, name="workorderstage"), nullable=False),
        sa.Column("priority", sa.String(length=10), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("estimated_cost", sa.Float(), nullable=True),
        sa.Column("actual_cost", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        sa.Column("updated_by", sa.String(length=36), nullable=True),
    )
    op.create_table(
        "diagnostics",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("work_order_id", sa.String(length=36), sa.ForeignKey("work_orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("fault_type", sa.String(length=100), nullable=False),
        sa.Column("fault_description", sa.Text(), nullable=True),
        sa.Column("diagnosis_notes", sa.Text(), nullable=True),
        sa.Column("recommended_parts", sa.JSON(), nullable=False),
        sa.Column("estimated_repair_time", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=True),
    )
    op.create_index("ix_diagnostics_work_order_id", "diagnostics", ["work_order_id"])

def downgrade():
    op.drop_index("ix_diagnostics_work_order_id", table_name="diagnostics")
    op.drop_table("diagnostics")
    op.drop_table("work_orders")
    sa.Enum(name="workorderstage").drop(op.get_bind(), checkfirst=True)
