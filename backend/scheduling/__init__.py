"""Shift admission rules and workflow."""

from .types import (
    OverlapPolicy,
    RuleType,
    Shift,
    ShiftRequest,
    ShiftRequestStatus,
    ShiftRules,
    ShiftType,
    ValidationResult,
    ValidationStatus,
)
from .engine import ShiftValidator, validate_shift
from .validators import (
    BaseShiftRule,
    TimeOrderRule,
    DurationRule,
    OverlapRule,
    RestPeriodRule,
    shifts_overlap,
)
from .admission import (
    AdmissionResult,
    ShiftRepository,
    ShiftRequestRepository,
    admit_shift,
    delete_shift,
    submit_shift_request,
    respond_to_shift_request,
)
from .errors import (
    SchedulingError,
    InvalidShiftInputError,
    ShiftNotFoundError,
    ShiftRequestNotFoundError,
    ShiftRequestAlreadyResolvedError,
    ShiftConflictError,
)

__all__ = [
    "OverlapPolicy",
    "RuleType",
    "Shift",
    "ShiftRequest",
    "ShiftRequestStatus",
    "ShiftRules",
    "ShiftType",
    "ValidationResult",
    "ValidationStatus",
    "ShiftValidator",
    "validate_shift",
    "BaseShiftRule",
    "TimeOrderRule",
    "DurationRule",
    "OverlapRule",
    "RestPeriodRule",
    "shifts_overlap",
    "AdmissionResult",
    "ShiftRepository",
    "ShiftRequestRepository",
    "admit_shift",
    "delete_shift",
    "submit_shift_request",
    "respond_to_shift_request",
    "SchedulingError",
    "InvalidShiftInputError",
    "ShiftNotFoundError",
    "ShiftRequestNotFoundError",
    "ShiftRequestAlreadyResolvedError",
    "ShiftConflictError",
]
