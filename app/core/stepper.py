from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional
from app.core.labels import stage_description, stage_label
from app.core.workflow import (
    WORKFLOW_STAGES,
    WorkOrderStage,
    coerce_stage,
    is_completed,
    is_current,
    stage_index,
)

StepState = Literal["completed", "current", "future"]

@dataclass(frozen=True)
class StepperStep:
    stage: WorkOrderStage
    index: int
    label: str
    description: str
    state: StepState
    selectable: bool


def step_state(stage: WorkOrderStage, current: WorkOrderStage) -> StepState:
    if is_current(stage, current):
        return "current"
    if is_completed(stage, current):
        return "completed"
    return "future"


def build_stepper(current: WorkOrderStage | str, locale: Optional[str] = None) -> list[StepperStep]:
    """One step per stage in pipeline order; future stages are not selectable."""
    current = coerce_stage(current)
    steps = []
    for stage in WORKFLOW_STAGES:
        state = step_state(stage, current)
        steps.append(StepperStep(
            stage=stage,
            index=stage_index(stage),
            label=stage_label(stage, locale),
            description=stage_description(stage, locale),
            state=state,
            selectable=state != "future",
        ))
    return steps
