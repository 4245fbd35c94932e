"""MongoDB-backed storage for shifts and shift requests."""

from typing import Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError, WriteError

from scheduling.errors import ShiftConflictError, ShiftNotFoundError, ShiftRequestNotFoundError
from scheduling.types import Shift, ShiftRequest, ShiftRequestStatus, ShiftRules
from utils import utc_now

from .database import apply_shift_constraints, get_database
from .models import ShiftDoc, ShiftRequestDoc, ShiftRulesDoc


def _object_id(value: str) -> PydanticObjectId | None:
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None


# MongoDB DocumentValidationFailure
VALIDATION_FAILURE_CODE = 121


def _write_conflict(e: WriteError, shift: Shift) -> ShiftConflictError | None:
    if isinstance(e, DuplicateKeyError):
        return ShiftConflictError(
            f"Employee {shift.employee_id} already has a shift starting {shift.start_time.isoformat()}"
        )
    if e.code == VALIDATION_FAILURE_CODE:
        return ShiftConflictError(
            f"Shift {shift.start_time.isoformat()} - {shift.end_time.isoformat()} violates the stored shift constraints"
        )
    return None


class BeanieShiftRepository:

    async def _get_doc(self, shift_id: str) -> ShiftDoc | None:
        object_id = _object_id(shift_id)
        if object_id is None:
            return None
        return await ShiftDoc.get(object_id)

    async def list_for_employee(self, employee_id: str) -> list[Shift]:
        docs = await ShiftDoc.find(ShiftDoc.employee_id == employee_id).sort("+start_time").to_list()
        return [doc.to_shift() for doc in docs]

    async def get(self, shift_id: str) -> Optional[Shift]:
        doc = await self._get_doc(shift_id)
        return doc.to_shift() if doc else None

    async def create(self, shift: Shift) -> Shift:
        doc = ShiftDoc(
            employee_id=shift.employee_id,
            start_time=shift.start_time,
            end_time=shift.end_time,
            shift_type=shift.shift_type,
        )
        try:
            await doc.insert()
        except WriteError as e:
            conflict = _write_conflict(e, shift)
            if conflict is None:
                raise
            raise conflict from e
        return doc.to_shift()

    async def update(self, shift_id: str, shift: Shift) -> Shift:
        doc = await self._get_doc(shift_id)
        if doc is None:
            raise ShiftNotFoundError(shift_id)

        doc.employee_id = shift.employee_id
        doc.start_time = shift.start_time
        doc.end_time = shift.end_time
        doc.shift_type = shift.shift_type
        doc.updated_at = utc_now()
        try:
            await doc.save()
        except WriteError as e:
            conflict = _write_conflict(e, shift)
            if conflict is None:
                raise
            raise conflict from e
        return doc.to_shift()

    async def delete(self, shift_id: str) -> bool:
        doc = await self._get_doc(shift_id)
        if doc is None:
            return False
        await doc.delete()
        return True


class BeanieShiftRequestRepository:

    async def _get_doc(self, request_id: str) -> ShiftRequestDoc | None:
        object_id = _object_id(request_id)
        if object_id is None:
            return None
        return await ShiftRequestDoc.get(object_id)

    async def list_requests(self, status: Optional[ShiftRequestStatus] = None) -> list[ShiftRequest]:
        if status is not None:
            query = ShiftRequestDoc.find(ShiftRequestDoc.status == ShiftRequestStatus(status).value)
        else:
            query = ShiftRequestDoc.find()
        docs = await query.sort("-created_at").to_list()
        return [doc.to_request() for doc in docs]

    async def get(self, request_id: str) -> Optional[ShiftRequest]:
        doc = await self._get_doc(request_id)
        return doc.to_request() if doc else None

    async def create(self, request: ShiftRequest) -> ShiftRequest:
        doc = ShiftRequestDoc(
            employee_id=request.employee_id,
            start_time=request.start_time,
            end_time=request.end_time,
            shift_type=request.shift_type,
            reason=request.reason,
            status=request.status.value,
            response_message=request.response_message,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )
        await doc.insert()
        return doc.to_request()

    async def update(self, request: ShiftRequest) -> ShiftRequest:
        doc = await self._get_doc(request.id)
        if doc is None:
            raise ShiftRequestNotFoundError(request.id)

        doc.status = request.status.value
        doc.response_message = request.response_message
        doc.shift_id = request.shift_id
        doc.updated_at = request.updated_at
        await doc.save()
        return doc.to_request()


async def get_shift_rules() -> ShiftRules:
    """Load the stored thresholds, falling back to the defaults."""
    doc = await ShiftRulesDoc.find_one()
    if doc:
        return ShiftRules.from_doc(doc)
    return ShiftRules()


async def save_shift_rules(rules: ShiftRules) -> ShiftRules:
    doc = await ShiftRulesDoc.find_one()
    if doc is None:
        doc = ShiftRulesDoc()

    doc.min_shift_hours = rules.min_duration_minutes / 60
    doc.max_shift_hours = rules.max_duration_minutes / 60
    doc.min_rest_hours = rules.min_rest_minutes / 60
    doc.overlap_policy = rules.overlap_policy.value
    doc.updated_at = utc_now()
    await doc.save()

    saved = ShiftRules.from_doc(doc)
    await apply_shift_constraints(get_database(), saved)
    return saved
