from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session
from app.core.labels import stage_description, stage_label
from app.core.workflow import (
    PrerequisitesResult,
    WorkOrderSnapshot,
    WorkOrderStage,
    check_prerequisites,
    coerce_stage,
    next_possible_statuses,
)
from app.db.models import WorkOrder, utcnow

log = logging.getLogger(__name__)


class WorkflowError(Exception):
    pass

class WorkOrderNotFound(WorkflowError):
    def __init__(self, work_order_id: str):
        super().__init__(f"Work order not found: {work_order_id}")
        self.work_order_id = work_order_id

class TransitionRejected(WorkflowError):
    def __init__(self, current: WorkOrderStage, target: WorkOrderStage, reasons: tuple[str, ...]):
        super().__init__(", ".join(reasons))
        self.current = current
        self.target = target
        self.reasons = reasons


@dataclass(frozen=True)
class StatusOption:
    stage: WorkOrderStage
    label: str
    description: str
    prerequisites: PrerequisitesResult


def snapshot_of(work_order: WorkOrder) -> WorkOrderSnapshot:
    return WorkOrderSnapshot(
        estimated_cost=work_order.estimated_cost,
        actual_cost=work_order.actual_cost,
        technician_id=work_order.technician_id,
        diagnostics=tuple(d.id for d in work_order.diagnostics),
    )


class StatusTransitionEngine:
    """Validates and applies status changes for a single persisted work order."""

    def __init__(self, db: Session, work_order_id: str, notify=None):
        self.db = db
        self.work_order_id = work_order_id
        self.notify = notify

    def load(self) -> WorkOrder:
        work_order = self.db.get(WorkOrder, self.work_order_id)
        if work_order is None:
            raise WorkOrderNotFound(self.work_order_id)
        return work_order

    def options(self, locale: Optional[str] = None) -> list[StatusOption]:
        work_order = self.load()
        snapshot = snapshot_of(work_order)
        return [
            StatusOption(
                stage=stage,
                label=stage_label(stage, locale),
                description=stage_description(stage, locale),
                prerequisites=check_prerequisites(work_order.status, stage, snapshot),
            )
            for stage in next_possible_statuses(work_order.status)
        ]

    def check(self, target: WorkOrderStage | str) -> PrerequisitesResult:
        work_order = self.load()
        return check_prerequisites(work_order.status, target, snapshot_of(work_order))

    def apply(self, target: WorkOrderStage | str, notes: Optional[str] = None, updated_by: Optional[str] = None) -> WorkOrder:
        target = coerce_stage(target)
        work_order = self.load()
        previous = work_order.status
        result = check_prerequisites(previous, target, snapshot_of(work_order))

        if not result.allowed:
            log.info("Status change rejected: %s", "; ".join(result.reasons),
                     extra={"work_order_id": self.work_order_id, "stage": str(previous)})
            raise TransitionRejected(previous, target, result.reasons)

        now = utcnow()
        work_order.status = target
        work_order.updated_at = now
        work_order.updated_by = updated_by
        if notes:
            work_order.notes = notes
        if target is WorkOrderStage.CLOSURE:
            work_order.completed_at = now
        self.db.commit()

        log.info("Work order status updated: %s -> %s", previous, target,
                 extra={"work_order_id": self.work_order_id, "stage": str(target)})

        if self.notify is not None:
            self.notify(work_order, previous)
        return work_order
