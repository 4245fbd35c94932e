"""
Shift admission workflow.

Every path that puts a shift on the schedule (admin creation or edit, and
approval of an employee's shift request) fetches the employee's current
shifts and runs the same ShiftValidator before writing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from .engine import ShiftValidator
from .errors import (
    ShiftNotFoundError,
    ShiftRequestAlreadyResolvedError,
    ShiftRequestNotFoundError,
)
from .types import (
    Shift,
    ShiftRequest,
    ShiftRequestStatus,
    ValidationResult,
    read_field,
)


class ShiftRepository(Protocol):
    """Storage for admitted shifts."""

    async def list_for_employee(self, employee_id: str) -> list[Shift]:
        ...

    async def get(self, shift_id: str) -> Optional[Shift]:
        ...

    async def create(self, shift: Shift) -> Shift:
        """
        Persist a new shift and return it with its id.

        Raises:
            ShiftConflictError: If storage refuses the write as conflicting
        """
        ...

    async def update(self, shift_id: str, shift: Shift) -> Shift:
        ...

    async def delete(self, shift_id: str) -> bool:
        ...


class ShiftRequestRepository(Protocol):
    """Storage for employee shift requests."""

    async def list_requests(self, status: Optional[ShiftRequestStatus] = None) -> list[ShiftRequest]:
        ...

    async def get(self, request_id: str) -> Optional[ShiftRequest]:
        ...

    async def create(self, request: ShiftRequest) -> ShiftRequest:
        ...

    async def update(self, request: ShiftRequest) -> ShiftRequest:
        ...


@dataclass
class AdmissionResult:
    """Validation outcome plus whatever was written because of it."""
    validation: ValidationResult
    shift: Optional[Shift] = None
    request: Optional[ShiftRequest] = None

    @property
    def admitted(self) -> bool:
        return self.validation.is_valid

    def to_dict(self) -> dict:
        return {
            "validation": self.validation.to_dict(),
            "shift": self.shift.to_dict() if self.shift else None,
            "request": self.request.to_dict() if self.request else None,
        }


async def _validate_against_storage(
    shift_repo: ShiftRepository,
    candidate: Any,
    validator: ShiftValidator,
    editing_shift_id: Optional[str] = None,
) -> ValidationResult:
    employee_id = read_field(candidate, "employee_id")
    existing = await shift_repo.list_for_employee(str(employee_id)) if employee_id else []
    return validator.validate(candidate, existing, editing_shift_id)


async def admit_shift(
    shift_repo: ShiftRepository,
    candidate: Any,
    editing_shift_id: Optional[str] = None,
    validator: Optional[ShiftValidator] = None,
) -> AdmissionResult:
    """
    Validate a shift against the employee's stored shifts and persist it.

    Args:
        shift_repo: Shift storage
        candidate: The proposed shift (Shift or record)
        editing_shift_id: Id of the stored shift to replace, for edits
        validator: Validator to use, defaults to the standard rules

    Returns:
        AdmissionResult with the stored shift when admitted

    Raises:
        ShiftNotFoundError: If editing_shift_id does not exist
        ShiftConflictError: If storage rejects the write
    """
    validator = validator or ShiftValidator()

    if editing_shift_id is not None and await shift_repo.get(editing_shift_id) is None:
        raise ShiftNotFoundError(editing_shift_id)

    validation = await _validate_against_storage(shift_repo, candidate, validator, editing_shift_id)
    if not validation.is_valid:
        return AdmissionResult(validation=validation)

    shift = Shift.from_record(candidate)
    if editing_shift_id is not None:
        stored = await shift_repo.update(editing_shift_id, shift)
        logging.info(f"Updated shift {stored.id} for employee {stored.employee_id}")
    else:
        stored = await shift_repo.create(shift)
        logging.info(
            f"Admitted shift {stored.id} for employee {stored.employee_id}: "
            f"{stored.start_time.isoformat()} - {stored.end_time.isoformat()}"
        )

    return AdmissionResult(validation=validation, shift=stored)


async def delete_shift(shift_repo: ShiftRepository, shift_id: str) -> None:
    if not await shift_repo.delete(shift_id):
        raise ShiftNotFoundError(shift_id)
    logging.info(f"Deleted shift {shift_id}")


async def submit_shift_request(
    shift_repo: ShiftRepository,
    request_repo: ShiftRequestRepository,
    candidate: Any,
    reason: str = "",
    validator: Optional[ShiftValidator] = None,
) -> AdmissionResult:
    """
    Record an employee's shift request after checking it against their schedule.

    Requests that would already be rejected are not stored.
    """
    validator = validator or ShiftValidator()

    validation = await _validate_against_storage(shift_repo, candidate, validator)
    if not validation.is_valid:
        return AdmissionResult(validation=validation)

    shift = Shift.from_record(candidate)
    request = await request_repo.create(ShiftRequest(
        employee_id=shift.employee_id,
        start_time=shift.start_time,
        end_time=shift.end_time,
        shift_type=shift.shift_type,
        reason=reason,
    ))
    logging.info(f"Shift request {request.id} submitted by employee {request.employee_id}")

    return AdmissionResult(validation=validation, request=request)


async def respond_to_shift_request(
    shift_repo: ShiftRepository,
    request_repo: ShiftRequestRepository,
    request_id: str,
    status: ShiftRequestStatus | str,
    response_message: str = "",
    validator: Optional[ShiftValidator] = None,
) -> AdmissionResult:
    """
    Approve or reject a pending shift request.

    Approval re-validates the request against the employee's current shifts
    and creates the shift. If that validation fails the request stays
    pending and the rejection is returned. If the request cannot be marked
    approved, the new shift is deleted again and the error is re-raised.

    Raises:
        ShiftRequestNotFoundError: If the request does not exist
        ShiftRequestAlreadyResolvedError: If the request is no longer pending
        ValueError: If status is not approved or rejected
    """
    status = ShiftRequestStatus(status)
    if status == ShiftRequestStatus.PENDING:
        raise ValueError("A shift request can only be approved or rejected")

    request = await request_repo.get(request_id)
    if request is None:
        raise ShiftRequestNotFoundError(request_id)
    if request.status != ShiftRequestStatus.PENDING:
        raise ShiftRequestAlreadyResolvedError(request_id, request.status.value)

    if status == ShiftRequestStatus.REJECTED:
        updated = await request_repo.update(request.resolve(status, response_message))
        logging.info(f"Shift request {request_id} rejected")
        return AdmissionResult(validation=ValidationResult.valid(), request=updated)

    admission = await admit_shift(shift_repo, request.as_shift(), validator=validator)
    if not admission.admitted:
        logging.info(f"Shift request {request_id} cannot be approved: {admission.validation.error}")
        return AdmissionResult(validation=admission.validation, request=request)

    try:
        updated = await request_repo.update(
            request.resolve(status, response_message, shift_id=admission.shift.id)
        )
    except Exception:
        # A pending request must not keep a shift that blocks its own re-approval
        logging.error(f"Could not resolve shift request {request_id}, removing shift {admission.shift.id}")
        await shift_repo.delete(admission.shift.id)
        raise
    logging.info(f"Shift request {request_id} approved as shift {admission.shift.id}")
    return AdmissionResult(validation=admission.validation, shift=admission.shift, request=updated)
