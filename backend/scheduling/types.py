"""Type definitions for the shift scheduling module."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from utils.time import parse_timestamp, utc_now

from .errors import InvalidShiftInputError


class ShiftType(str, Enum):
    """Shift labels accepted by the schedule."""
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"


class RuleType(str, Enum):
    """Scheduling rules, in the order they are evaluated."""
    TIME_ORDER = "TIME_ORDER"
    DURATION = "DURATION"
    OVERLAP = "OVERLAP"
    REST_PERIOD = "REST_PERIOD"


class ValidationStatus(str, Enum):
    VALID = "valid"
    REJECTED = "rejected"  # Broke a scheduling rule
    INVALID_INPUT = "invalid_input"  # Timestamps could not be read


class OverlapPolicy(str, Enum):
    """How two shifts are compared for overlap."""
    POINT_CONTAINMENT = "point_containment"  # Inclusive endpoint checks, shared endpoints overlap
    INTERVAL = "interval"  # Half-open intervals, back-to-back shifts allowed


class ShiftRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def read_field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


@dataclass(frozen=True)
class Shift:
    """A contiguous block of work assigned to one employee."""
    employee_id: str
    start_time: datetime
    end_time: datetime
    shift_type: str = ShiftType.MORNING.value
    id: Optional[str] = None

    @property
    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60

    @classmethod
    def from_record(cls, record: Any) -> "Shift":
        """
        Build a Shift from a storage record.

        Records are mappings (or objects) with employee_id, start_time,
        end_time, and optionally id and shift_type. Timestamps may be
        datetimes or ISO-8601 strings.

        Raises:
            InvalidShiftInputError: If a field is missing or a timestamp cannot be parsed
        """
        employee_id = read_field(record, "employee_id")
        if employee_id is None or employee_id == "":
            raise InvalidShiftInputError("Shift is missing employee_id")

        try:
            start_time = parse_timestamp(read_field(record, "start_time"))
            end_time = parse_timestamp(read_field(record, "end_time"))
        except ValueError as e:
            raise InvalidShiftInputError(str(e)) from e

        shift_id = read_field(record, "id")
        shift_type = read_field(record, "shift_type") or ShiftType.MORNING.value
        if isinstance(shift_type, ShiftType):
            shift_type = shift_type.value

        return cls(
            employee_id=str(employee_id),
            start_time=start_time,
            end_time=end_time,
            shift_type=shift_type,
            id=str(shift_id) if shift_id is not None else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "shift_type": self.shift_type,
        }


@dataclass
class ValidationResult:
    """Outcome of validating one candidate shift."""
    is_valid: bool
    error: Optional[str] = None
    status: ValidationStatus = ValidationStatus.VALID
    rule_type: Optional[RuleType] = None
    conflicting_shift_id: Optional[str] = None

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def rejected(
        cls,
        rule_type: RuleType,
        message: str,
        conflicting_shift_id: Optional[str] = None,
    ) -> "ValidationResult":
        return cls(
            is_valid=False,
            error=message,
            status=ValidationStatus.REJECTED,
            rule_type=rule_type,
            conflicting_shift_id=conflicting_shift_id,
        )

    @classmethod
    def invalid_input(cls, message: str) -> "ValidationResult":
        return cls(is_valid=False, error=message, status=ValidationStatus.INVALID_INPUT)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "is_valid": self.is_valid,
            "error": self.error,
            "status": self.status.value,
            "rule_type": self.rule_type.value if self.rule_type else None,
            "conflicting_shift_id": self.conflicting_shift_id,
        }


@dataclass
class ShiftRules:
    """Active scheduling thresholds."""
    min_duration_minutes: int = 240
    max_duration_minutes: int = 720
    min_rest_minutes: int = 480
    overlap_policy: OverlapPolicy = OverlapPolicy.POINT_CONTAINMENT

    @classmethod
    def from_doc(cls, doc) -> "ShiftRules":
        """Create from a ShiftRulesDoc."""
        return cls(
            min_duration_minutes=round(doc.min_shift_hours * 60),
            max_duration_minutes=round(doc.max_shift_hours * 60),
            min_rest_minutes=round(doc.min_rest_hours * 60),
            overlap_policy=OverlapPolicy(doc.overlap_policy),
        )

    def to_dict(self) -> dict:
        return {
            "min_shift_hours": self.min_duration_minutes / 60,
            "max_shift_hours": self.max_duration_minutes / 60,
            "min_rest_hours": self.min_rest_minutes / 60,
            "overlap_policy": self.overlap_policy.value,
        }


@dataclass
class ShiftValidationContext:
    """Context for validating one candidate shift."""
    candidate: Shift
    rules: ShiftRules
    # Same-employee shifts to compare against, with the edited shift already removed
    other_shifts: list[Shift] = field(default_factory=list)


@dataclass
class ShiftRequest:
    """An employee's proposal for a shift, pending admin approval."""
    employee_id: str
    start_time: datetime
    end_time: datetime
    shift_type: str = ShiftType.MORNING.value
    reason: str = ""
    status: ShiftRequestStatus = ShiftRequestStatus.PENDING
    response_message: str = ""
    id: Optional[str] = None
    shift_id: Optional[str] = None  # Shift created on approval
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def as_shift(self) -> Shift:
        return Shift(
            employee_id=self.employee_id,
            start_time=self.start_time,
            end_time=self.end_time,
            shift_type=self.shift_type,
        )

    def resolve(self, status: ShiftRequestStatus, response_message: str = "", shift_id: Optional[str] = None) -> "ShiftRequest":
        return replace(
            self,
            status=status,
            response_message=response_message,
            shift_id=shift_id,
            updated_at=utc_now(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "shift_type": self.shift_type,
            "reason": self.reason,
            "status": self.status.value,
            "response_message": self.response_message,
            "shift_id": self.shift_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
