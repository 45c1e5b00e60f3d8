from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Enum, JSON, Text, Float, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.core.workflow import WorkOrderStage, INITIAL_STAGE


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp; the DateTime columns carry no timezone."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_wo_id() -> str:
    return f"WO-{utcnow():%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


class WorkOrder(Base):
    __tablename__ = "work_orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    wo_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, default=_new_wo_id)

    customer_id: Mapped[str] = mapped_column(String(36), nullable=False)
    device_id: Mapped[str] = mapped_column(String(36), nullable=False)
    technician_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    status: Mapped[WorkOrderStage] = mapped_column(Enum(WorkOrderStage), default=INITIAL_STAGE, nullable=False)
    priority: Mapped[str] = mapped_column(String(10), default="MEDIUM", nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    estimated_cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_cost: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)

    diagnostics: Mapped[list["Diagnostic"]] = relationship(
        back_populates="work_order",
        cascade="all, delete-orphan",
        order_by="Diagnostic.created_at",
    )


class Diagnostic(Base):
    __tablename__ = "diagnostics"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    work_order_id: Mapped[str] = mapped_column(String(36), ForeignKey("work_orders.id", ondelete="CASCADE"), nullable=False, index=True)

    fault_type: Mapped[str] = mapped_column(String(100), nullable=False)
    fault_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    diagnosis_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommended_parts: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    estimated_repair_time: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)

    work_order: Mapped[WorkOrder] = relationship(back_populates="diagnostics")
