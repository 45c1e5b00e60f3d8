from typing import Optional
from fastapi import APIRouter
from app.core.labels import stage_description, stage_label
from app.core.workflow import (
    ALLOWED_TRANSITIONS,
    INITIAL_STAGE,
    TERMINAL_STAGE,
    WORKFLOW_STAGES,
    WorkOrderSnapshot,
    check_prerequisites,
    next_possible_statuses,
    stage_index,
)
from app.schemas.work_orders import (
    PrerequisitesResponse,
    StageInfo,
    TransitionTableResponse,
    WorkflowCheckRequest,
)

router = APIRouter(prefix="/workflow")

@router.get("/stages", response_model=list[StageInfo])
def list_stages(locale: Optional[str] = None):
    return [
        StageInfo(
            stage=stage,
            index=stage_index(stage),
            label=stage_label(stage, locale),
            description=stage_description(stage, locale),
            next_statuses=next_possible_statuses(stage),
        )
        for stage in WORKFLOW_STAGES
    ]

@router.get("/transitions", response_model=TransitionTableResponse)
def transition_table():
    return TransitionTableResponse(
        initial=INITIAL_STAGE,
        terminal=TERMINAL_STAGE,
        transitions={stage: list(targets) for stage, targets in ALLOWED_TRANSITIONS.items()},
    )

@router.post("/check", response_model=PrerequisitesResponse)
def check_transition(req: WorkflowCheckRequest):
    """Stateless check against a caller-supplied snapshot."""
    snapshot = WorkOrderSnapshot.from_mapping(req.snapshot.model_dump())
    result = check_prerequisites(req.current, req.target, snapshot)
    return PrerequisitesResponse(
        current=req.current,
        target=req.target,
        allowed=result.allowed,
        reasons=list(result.reasons),
    )
