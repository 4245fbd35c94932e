from datetime import datetime
from typing import Optional
from beanie import Document, Indexed
from pydantic import Field
from pymongo import IndexModel

from scheduling.types import Shift, ShiftRequest, ShiftRequestStatus
from utils import utc_now


class ShiftDoc(Document):
    employee_id: Indexed(str)
    start_time: datetime
    end_time: datetime
    shift_type: str = "Morning"  # "Morning", "Afternoon", "Evening"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "shifts"
        indexes = [
            # Last line of defence against two writers admitting the same shift
            IndexModel([("employee_id", 1), ("start_time", 1)], unique=True),
            [("start_time", 1)],
        ]

    def to_shift(self) -> Shift:
        return Shift.from_record({
            "id": str(self.id),
            "employee_id": self.employee_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "shift_type": self.shift_type,
        })


class ShiftRequestDoc(Document):
    """A shift proposed by an employee, waiting for an admin decision."""
    employee_id: Indexed(str)
    start_time: datetime
    end_time: datetime
    shift_type: str = "Morning"
    reason: str = ""
    status: str = ShiftRequestStatus.PENDING.value  # "pending", "approved", "rejected"
    response_message: str = ""
    shift_id: Optional[str] = None  # Shift created on approval
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "shift_requests"
        indexes = [
            [("status", 1), ("created_at", -1)],
        ]

    def to_request(self) -> ShiftRequest:
        shift = Shift.from_record(self)
        return ShiftRequest(
            id=str(self.id),
            employee_id=self.employee_id,
            start_time=shift.start_time,
            end_time=shift.end_time,
            shift_type=self.shift_type,
            reason=self.reason,
            status=ShiftRequestStatus(self.status),
            response_message=self.response_message,
            shift_id=self.shift_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class ShiftRulesDoc(Document):
    """Scheduling thresholds applied by the shift validator."""
    min_shift_hours: float = 4.0
    max_shift_hours: float = 12.0
    min_rest_hours: float = 8.0  # Rest between consecutive shifts
    overlap_policy: str = "point_containment"  # "point_containment", "interval"
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "shift_rules"
