from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Literal, Optional, Dict, List, Union
from datetime import datetime
from app.core.workflow import WorkOrderStage

Priority = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]

class WorkOrderCreateRequest(BaseModel):
    customer_id: str = Field(..., examples=["c0ffee00-0000-4000-8000-000000000001"])
    device_id: str = Field(..., examples=["d0d0d0d0-0000-4000-8000-000000000001"])
    description: Optional[str] = Field(None, max_length=2000)
    priority: Priority = "MEDIUM"
    created_by: Optional[str] = None

class WorkOrderUpdateRequest(BaseModel):
    description: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=5000)
    priority: Optional[Priority] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    updated_by: Optional[str] = None

    @field_validator("priority")
    @classmethod
    def priority_not_null(cls, v):
        # omit the field to keep the current priority
        if v is None:
            raise ValueError("priority cannot be null")
        return v

class TechnicianAssignmentRequest(BaseModel):
    technician_id: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)

class DiagnosticCreateRequest(BaseModel):
    fault_type: str = Field(..., min_length=1, max_length=100)
    fault_description: Optional[str] = None
    diagnosis_notes: Optional[str] = None
    recommended_parts: List[str] = []
    estimated_repair_time: Optional[int] = Field(None, ge=0, description="minutes")
    created_by: Optional[str] = None

class DiagnosticResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    work_order_id: str
    fault_type: str
    fault_description: Optional[str] = None
    diagnosis_notes: Optional[str] = None
    recommended_parts: List[str] = []
    estimated_repair_time: Optional[int] = None
    created_at: datetime
    created_by: Optional[str] = None

class WorkOrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    wo_id: str
    customer_id: str
    device_id: str
    technician_id: Optional[str] = None
    status: WorkOrderStage
    priority: str
    description: Optional[str] = None
    notes: Optional[str] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    diagnostics: List[DiagnosticResponse] = []


class StatusUpdateRequest(BaseModel):
    status: WorkOrderStage
    notes: Optional[str] = Field(None, max_length=5000)
    updated_by: Optional[str] = None

class StatusCheckRequest(BaseModel):
    status: WorkOrderStage

class PrerequisitesResponse(BaseModel):
    current: WorkOrderStage
    target: WorkOrderStage
    allowed: bool
    reasons: List[str] = []

class StatusOptionResponse(BaseModel):
    stage: WorkOrderStage
    label: str
    description: str
    allowed: bool
    reasons: List[str] = []

class StatusOptionsResponse(BaseModel):
    work_order_id: str
    current: WorkOrderStage
    current_label: str
    options: List[StatusOptionResponse]

class StepperStepResponse(BaseModel):
    stage: WorkOrderStage
    index: int
    label: str
    description: str
    state: Literal["completed", "current", "future"]
    selectable: bool

class StepperResponse(BaseModel):
    current: WorkOrderStage
    active_step: int
    steps: List[StepperStepResponse]


class SnapshotPayload(BaseModel):
    """Guard fields of a work order; accepts snake_case or camelCase keys."""
    estimated_cost: Optional[float] = Field(None, validation_alias=AliasChoices("estimated_cost", "estimatedCost"))
    actual_cost: Optional[float] = Field(None, validation_alias=AliasChoices("actual_cost", "actualCost"))
    technician_id: Optional[str] = Field(None, validation_alias=AliasChoices("technician_id", "technicianId"))
    # bare ids or diagnostic records carrying an "id"
    diagnostics: List[Union[str, Dict[str, Any]]] = []

class WorkflowCheckRequest(BaseModel):
    current: WorkOrderStage
    target: WorkOrderStage
    snapshot: SnapshotPayload = SnapshotPayload()

class StageInfo(BaseModel):
    stage: WorkOrderStage
    index: int
    label: str
    description: str
    next_statuses: List[WorkOrderStage]

class TransitionTableResponse(BaseModel):
    initial: WorkOrderStage
    terminal: WorkOrderStage
    transitions: Dict[WorkOrderStage, List[WorkOrderStage]]
