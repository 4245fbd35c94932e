from typing import Literal
from pydantic import BaseModel, Field

ShiftTypeName = Literal["Morning", "Afternoon", "Evening"]


class ShiftRecord(BaseModel):
    """A shift as stored or proposed. Timestamps stay strings until validation."""
    id: str | None = None
    employee_id: str
    start_time: str  # ISO-8601: "2025-01-20T09:00:00+00:00"
    end_time: str
    shift_type: str = "Morning"


class ValidateShiftRequest(BaseModel):
    candidate: ShiftRecord
    existing_shifts: list[ShiftRecord] = []
    editing_shift_id: str | None = None


class ValidationResultSchema(BaseModel):
    is_valid: bool
    error: str | None = None
    status: str  # "valid", "rejected", "invalid_input"
    rule_type: str | None = None  # "TIME_ORDER", "DURATION", "OVERLAP", "REST_PERIOD"
    conflicting_shift_id: str | None = None


class ShiftSchema(BaseModel):
    id: str | None = None
    employee_id: str
    start_time: str
    end_time: str
    shift_type: str


class ShiftCreateRequest(BaseModel):
    employee_id: str
    start_time: str
    end_time: str
    shift_type: ShiftTypeName = "Morning"


class ShiftAdmissionResponse(BaseModel):
    validation: ValidationResultSchema
    shift: ShiftSchema


class ShiftRequestCreate(BaseModel):
    employee_id: str
    start_time: str
    end_time: str
    shift_type: ShiftTypeName = "Morning"
    reason: str = ""


class ShiftRequestSchema(BaseModel):
    id: str | None = None
    employee_id: str
    start_time: str
    end_time: str
    shift_type: str
    reason: str = ""
    status: str  # "pending", "approved", "rejected"
    response_message: str = ""
    shift_id: str | None = None
    created_at: str
    updated_at: str


class ShiftRequestDecision(BaseModel):
    status: Literal["approved", "rejected"]
    response_message: str = ""


class ShiftRequestDecisionResponse(BaseModel):
    validation: ValidationResultSchema
    request: ShiftRequestSchema
    shift: ShiftSchema | None = None


class ShiftRulesSchema(BaseModel):
    min_shift_hours: float = Field(default=4.0, gt=0)
    max_shift_hours: float = Field(default=12.0, gt=0)
    min_rest_hours: float = Field(default=8.0, ge=0)
    overlap_policy: Literal["point_containment", "interval"] = "point_containment"
