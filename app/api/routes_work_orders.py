import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.db.models import Diagnostic, WorkOrder, utcnow
from app.core.engine import StatusTransitionEngine, TransitionRejected, WorkOrderNotFound
from app.core.labels import stage_label
from app.core.stepper import build_stepper
from app.core.workflow import INITIAL_STAGE, WorkOrderStage, stage_index
from app.schemas.work_orders import (
    DiagnosticCreateRequest,
    DiagnosticResponse,
    PrerequisitesResponse,
    StatusCheckRequest,
    StatusOptionResponse,
    StatusOptionsResponse,
    StatusUpdateRequest,
    StepperResponse,
    StepperStepResponse,
    TechnicianAssignmentRequest,
    WorkOrderCreateRequest,
    WorkOrderResponse,
    WorkOrderUpdateRequest,
)
from app.tasks.notifications import enqueue_status_notification

log = logging.getLogger(__name__)

router = APIRouter(prefix="/work-orders")


def _get_or_404(db: Session, work_order_id: str) -> WorkOrder:
    work_order = db.get(WorkOrder, work_order_id)
    if not work_order:
        raise HTTPException(status_code=404, detail="Work order not found")
    return work_order


@router.post("", response_model=WorkOrderResponse, status_code=201)
def create_work_order(req: WorkOrderCreateRequest, db: Session = Depends(get_db)):
    work_order = WorkOrder(
        customer_id=req.customer_id,
        device_id=req.device_id,
        description=req.description,
        priority=req.priority,
        status=INITIAL_STAGE,
        created_by=req.created_by,
    )
    db.add(work_order)
    db.commit()
    db.refresh(work_order)

    log.info("Work order created: %s", work_order.wo_id, extra={"work_order_id": work_order.id, "stage": str(work_order.status)})
    return WorkOrderResponse.model_validate(work_order)

@router.get("", response_model=list[WorkOrderResponse])
def list_work_orders(
    status: Optional[WorkOrderStage] = None,
    technician_id: Optional[str] = None,
    customer_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    stmt = select(WorkOrder).order_by(WorkOrder.created_at.desc())
    if status is not None:
        stmt = stmt.where(WorkOrder.status == status)
    if technician_id:
        stmt = stmt.where(WorkOrder.technician_id == technician_id)
    if customer_id:
        stmt = stmt.where(WorkOrder.customer_id == customer_id)
    return [WorkOrderResponse.model_validate(wo) for wo in db.scalars(stmt).all()]

@router.get("/{work_order_id}", response_model=WorkOrderResponse)
def get_work_order(work_order_id: str, db: Session = Depends(get_db)):
    return WorkOrderResponse.model_validate(_get_or_404(db, work_order_id))

@router.put("/{work_order_id}", response_model=WorkOrderResponse)
def update_work_order(work_order_id: str, req: WorkOrderUpdateRequest, db: Session = Depends(get_db)):
    work_order = _get_or_404(db, work_order_id)
    # status only moves through POST /status
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(work_order, field, value)
    work_order.updated_at = utcnow()
    db.commit()
    db.refresh(work_order)

    log.info("Work order updated: %s", work_order.wo_id, extra={"work_order_id": work_order.id, "stage": str(work_order.status)})
    return WorkOrderResponse.model_validate(work_order)

@router.delete("/{work_order_id}", status_code=204)
def delete_work_order(work_order_id: str, db: Session = Depends(get_db)):
    work_order = _get_or_404(db, work_order_id)
    if work_order.status is not WorkOrderStage.TRIAGE:
        raise HTTPException(status_code=400, detail="Cannot delete work order that is not in TRIAGE status")
    wo_id = work_order.wo_id
    db.delete(work_order)
    db.commit()

    log.info("Work order deleted: %s", wo_id, extra={"work_order_id": work_order_id, "stage": "-"})
    return Response(status_code=204)

@router.post("/{work_order_id}/assign", response_model=WorkOrderResponse)
def assign_technician(work_order_id: str, req: TechnicianAssignmentRequest, db: Session = Depends(get_db)):
    work_order = _get_or_404(db, work_order_id)
    # empty string or null unassigns
    work_order.technician_id = req.technician_id or None
    if req.notes:
        work_order.notes = req.notes
    work_order.updated_at = utcnow()
    db.commit()
    db.refresh(work_order)

    log.info("Technician %s on %s", "assigned" if work_order.technician_id else "unassigned", work_order.wo_id,
             extra={"work_order_id": work_order.id, "stage": str(work_order.status)})
    return WorkOrderResponse.model_validate(work_order)

@router.post("/{work_order_id}/diagnostics", response_model=DiagnosticResponse, status_code=201)
def create_diagnostic(work_order_id: str, req: DiagnosticCreateRequest, db: Session = Depends(get_db)):
    _get_or_404(db, work_order_id)
    diagnostic = Diagnostic(work_order_id=work_order_id, **req.model_dump())
    db.add(diagnostic)
    db.commit()
    db.refresh(diagnostic)

    log.info("Diagnostic created", extra={"work_order_id": work_order_id, "stage": "-"})
    return DiagnosticResponse.model_validate(diagnostic)

@router.get("/{work_order_id}/diagnostics", response_model=list[DiagnosticResponse])
def list_diagnostics(work_order_id: str, db: Session = Depends(get_db)):
    work_order = _get_or_404(db, work_order_id)
    return [DiagnosticResponse.model_validate(d) for d in work_order.diagnostics]


@router.get("/{work_order_id}/status-options", response_model=StatusOptionsResponse)
def status_options(work_order_id: str, locale: Optional[str] = None, db: Session = Depends(get_db)):
    engine = StatusTransitionEngine(db=db, work_order_id=work_order_id)
    try:
        work_order = engine.load()
        options = engine.options(locale)
    except WorkOrderNotFound:
        raise HTTPException(status_code=404, detail="Work order not found")
    return StatusOptionsResponse(
        work_order_id=work_order_id,
        current=work_order.status,
        current_label=stage_label(work_order.status, locale),
        options=[
            StatusOptionResponse(
                stage=o.stage,
                label=o.label,
                description=o.description,
                allowed=o.prerequisites.allowed,
                reasons=list(o.prerequisites.reasons),
            )
            for o in options
        ],
    )

@router.post("/{work_order_id}/status/check", response_model=PrerequisitesResponse)
def check_status(work_order_id: str, req: StatusCheckRequest, db: Session = Depends(get_db)):
    engine = StatusTransitionEngine(db=db, work_order_id=work_order_id)
    try:
        current = engine.load().status
        result = engine.check(req.status)
    except WorkOrderNotFound:
        raise HTTPException(status_code=404, detail="Work order not found")
    return PrerequisitesResponse(current=current, target=req.status, allowed=result.allowed, reasons=list(result.reasons))

@router.post("/{work_order_id}/status", response_model=WorkOrderResponse)
def update_status(work_order_id: str, req: StatusUpdateRequest, db: Session = Depends(get_db)):
    engine = StatusTransitionEngine(db=db, work_order_id=work_order_id, notify=enqueue_status_notification)
    try:
        work_order = engine.apply(req.status, notes=req.notes, updated_by=req.updated_by)
    except WorkOrderNotFound:
        raise HTTPException(status_code=404, detail="Work order not found")
    except TransitionRejected as e:
        raise HTTPException(status_code=422, detail={"message": "Status change rejected", "reasons": list(e.reasons)})
    db.refresh(work_order)
    return WorkOrderResponse.model_validate(work_order)

@router.get("/{work_order_id}/stepper", response_model=StepperResponse)
def stepper(work_order_id: str, locale: Optional[str] = None, db: Session = Depends(get_db)):
    work_order = _get_or_404(db, work_order_id)
    steps = build_stepper(work_order.status, locale)
    return StepperResponse(
        current=work_order.status,
        active_step=stage_index(work_order.status),
        steps=[
            StepperStepResponse(
                stage=s.stage,
                index=s.index,
                label=s.label,
                description=s.description,
                state=s.state,
                selectable=s.selectable,
            )
            for s in steps
        ],
    )
