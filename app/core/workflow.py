"""
Work-order workflow: stage catalog, transition graph and prerequisite rules.

Everything here is pure. The tables are module-level constants exposed through
read-only views; nothing in this module mutates a work order.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple


class WorkOrderStage(str, Enum):
    TRIAGE = "TRIAGE"
    QUOTATION = "QUOTATION"
    EXECUTION = "EXECUTION"
    QA = "QA"
    CLOSURE = "CLOSURE"
    WARRANTY = "WARRANTY"

    def __str__(self) -> str:
        return self.value


# Canonical pipeline order
WORKFLOW_STAGES: Tuple[WorkOrderStage, ...] = (
    WorkOrderStage.TRIAGE,
    WorkOrderStage.QUOTATION,
    WorkOrderStage.EXECUTION,
    WorkOrderStage.QA,
    WorkOrderStage.CLOSURE,
    WorkOrderStage.WARRANTY,
)

INITIAL_STAGE = WorkOrderStage.TRIAGE
TERMINAL_STAGE = WorkOrderStage.WARRANTY

_STAGE_INDEX = MappingProxyType({stage: i for i, stage in enumerate(WORKFLOW_STAGES)})

# Forward edge first, rework edge second
ALLOWED_TRANSITIONS: Mapping[WorkOrderStage, Tuple[WorkOrderStage, ...]] = MappingProxyType({
    WorkOrderStage.TRIAGE: (WorkOrderStage.QUOTATION,),
    WorkOrderStage.QUOTATION: (WorkOrderStage.EXECUTION, WorkOrderStage.TRIAGE),
    WorkOrderStage.EXECUTION: (WorkOrderStage.QA, WorkOrderStage.QUOTATION),
    WorkOrderStage.QA: (WorkOrderStage.CLOSURE, WorkOrderStage.EXECUTION),
    WorkOrderStage.CLOSURE: (WorkOrderStage.WARRANTY,),
    WorkOrderStage.WARRANTY: (),
})

ESTIMATED_COST_REQUIRED = "estimated cost required"
TECHNICIAN_REQUIRED = "technician assignment required"
DIAGNOSTIC_REQUIRED = "at least one diagnostic record required"
ACTUAL_COST_REQUIRED = "actual cost required"


def coerce_stage(value: Any) -> WorkOrderStage:
    """Accept a WorkOrderStage or its string value; unknown values raise ValueError."""
    if isinstance(value, WorkOrderStage):
        return value
    return WorkOrderStage(value)


@dataclass(frozen=True)
class WorkOrderSnapshot:
    """Read-only projection of the work-order fields the guards look at."""
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    technician_id: Optional[str] = None
    diagnostics: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "WorkOrderSnapshot":
        """Build a snapshot from a plain dict (snake_case or camelCase keys)."""
        data = data or {}

        def pick(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        return cls(
            estimated_cost=pick("estimated_cost", "estimatedCost"),
            actual_cost=pick("actual_cost", "actualCost"),
            technician_id=pick("technician_id", "technicianId"),
            diagnostics=_diagnostic_ids(pick("diagnostics") or ()),
        )


def _diagnostic_ids(records: Iterable[Any]) -> Tuple[str, ...]:
    ids = []
    for record in records:
        if isinstance(record, Mapping):
            ids.append(str(record.get("id", "")))
        else:
            ids.append(str(getattr(record, "id", record)))
    return tuple(ids)


@dataclass(frozen=True)
class PrerequisitesResult:
    allowed: bool
    reasons: Tuple[str, ...] = ()


def stage_index(stage: WorkOrderStage | str) -> int:
    return _STAGE_INDEX[coerce_stage(stage)]


def reachable_from(stage: WorkOrderStage | str) -> frozenset[WorkOrderStage]:
    return frozenset(ALLOWED_TRANSITIONS[coerce_stage(stage)])


def can_transition(current: WorkOrderStage | str, target: WorkOrderStage | str) -> bool:
    return coerce_stage(target) in ALLOWED_TRANSITIONS[coerce_stage(current)]


def next_possible_statuses(current: WorkOrderStage | str) -> list[WorkOrderStage]:
    return list(ALLOWED_TRANSITIONS[coerce_stage(current)])


def check_prerequisites(
    current: WorkOrderStage | str,
    target: WorkOrderStage | str,
    snapshot: WorkOrderSnapshot | Mapping[str, Any] | None,
) -> PrerequisitesResult:
    """
    Collect every unmet condition for moving a work order from `current` to `target`.

    Field guards depend on the target stage only, so a rework loop re-checks the
    guard of the stage it re-enters. The graph check is applied on top of them.
    """
    current = coerce_stage(current)
    target = coerce_stage(target)
    if not isinstance(snapshot, WorkOrderSnapshot):
        snapshot = WorkOrderSnapshot.from_mapping(snapshot)

    reasons: list[str] = []
    if target is WorkOrderStage.QUOTATION and not snapshot.estimated_cost:
        reasons.append(ESTIMATED_COST_REQUIRED)
    if target is WorkOrderStage.EXECUTION and not snapshot.technician_id:
        reasons.append(TECHNICIAN_REQUIRED)
    if target is WorkOrderStage.QA and not snapshot.diagnostics:
        reasons.append(DIAGNOSTIC_REQUIRED)
    if target is WorkOrderStage.CLOSURE and not snapshot.actual_cost:
        reasons.append(ACTUAL_COST_REQUIRED)
    if not can_transition(current, target):
        reasons.append(f"transition from {current.value} to {target.value} is not permitted")

    return PrerequisitesResult(allowed=not reasons, reasons=tuple(reasons))


def is_current(stage: WorkOrderStage | str, current: WorkOrderStage | str) -> bool:
    return coerce_stage(stage) is coerce_stage(current)


def is_completed(stage: WorkOrderStage | str, current: WorkOrderStage | str) -> bool:
    return stage_index(stage) < stage_index(current)


def is_future(stage: WorkOrderStage | str, current: WorkOrderStage | str) -> bool:
    return stage_index(stage) > stage_index(current)
