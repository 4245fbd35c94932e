"""
Tests for the shift admission workflow: admin shift creation and edits,
employee shift requests and their approval.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import InMemoryShiftRepository
from scheduling.admission import (
    admit_shift,
    delete_shift,
    respond_to_shift_request,
    submit_shift_request,
)
from scheduling.engine import ShiftValidator
from scheduling.errors import (
    ShiftConflictError,
    ShiftNotFoundError,
    ShiftRequestAlreadyResolvedError,
    ShiftRequestNotFoundError,
)
from scheduling.types import (
    OverlapPolicy,
    RuleType,
    ShiftRequestStatus,
    ShiftRules,
    ValidationStatus,
)


def _record(start_time, end_time, employee_id="emp-1", shift_type="Morning"):
    return {
        "employee_id": employee_id,
        "start_time": start_time,
        "end_time": end_time,
        "shift_type": shift_type,
    }


@pytest.fixture
def stored_repo(day_shift):
    return InMemoryShiftRepository([day_shift])


class TestAdmitShift:

    def test_admits_into_empty_schedule(self, shift_repo):
        result = asyncio.run(admit_shift(
            shift_repo, _record("2025-01-20T09:00:00+00:00", "2025-01-20T17:00:00+00:00")
        ))

        assert result.admitted is True
        assert result.shift.id == "shift-1"
        assert result.shift.employee_id == "emp-1"
        assert list(shift_repo.shifts) == ["shift-1"]

    def test_rejected_shift_is_not_stored(self, stored_repo):
        result = asyncio.run(admit_shift(
            stored_repo, _record("2025-01-20T12:00:00+00:00", "2025-01-20T20:00:00+00:00")
        ))

        assert result.admitted is False
        assert result.shift is None
        assert result.validation.rule_type == RuleType.OVERLAP
        assert len(stored_repo.shifts) == 1

    def test_rest_violation_is_not_stored(self, stored_repo):
        result = asyncio.run(admit_shift(
            stored_repo, _record("2025-01-20T20:00:00+00:00", "2025-01-21T00:00:00+00:00")
        ))

        assert result.validation.rule_type == RuleType.REST_PERIOD
        assert len(stored_repo.shifts) == 1

    def test_other_employee_schedule_does_not_block(self, stored_repo):
        result = asyncio.run(admit_shift(
            stored_repo,
            _record("2025-01-20T09:00:00+00:00", "2025-01-20T17:00:00+00:00", employee_id="emp-2"),
        ))

        assert result.admitted is True
        assert len(stored_repo.shifts) == 2

    def test_invalid_input_is_not_stored(self, shift_repo):
        result = asyncio.run(admit_shift(shift_repo, _record("garbage", "2025-01-20T17:00:00+00:00")))

        assert result.validation.status == ValidationStatus.INVALID_INPUT
        assert shift_repo.shifts == {}

    def test_edit_in_place_excludes_itself(self, stored_repo):
        result = asyncio.run(admit_shift(
            stored_repo,
            _record("2025-01-20T10:00:00+00:00", "2025-01-20T18:00:00+00:00", shift_type="Afternoon"),
            editing_shift_id="existing-1",
        ))

        assert result.admitted is True
        assert list(stored_repo.shifts) == ["existing-1"]
        assert stored_repo.shifts["existing-1"].start_time.hour == 10
        assert stored_repo.shifts["existing-1"].shift_type == "Afternoon"

    def test_edit_unknown_shift_raises(self, shift_repo):
        with pytest.raises(ShiftNotFoundError):
            asyncio.run(admit_shift(
                shift_repo,
                _record("2025-01-20T09:00:00+00:00", "2025-01-20T17:00:00+00:00"),
                editing_shift_id="missing",
            ))

    def test_storage_conflict_propagates(self, shift_repo):
        shift_repo.create = AsyncMock(side_effect=ShiftConflictError("duplicate"))

        with pytest.raises(ShiftConflictError):
            asyncio.run(admit_shift(
                shift_repo, _record("2025-01-20T09:00:00+00:00", "2025-01-20T17:00:00+00:00")
            ))

    def test_uses_given_validator(self, stored_repo):
        validator = ShiftValidator(ShiftRules(overlap_policy=OverlapPolicy.INTERVAL))

        result = asyncio.run(admit_shift(
            stored_repo,
            _record("2025-01-20T17:00:00+00:00", "2025-01-20T21:00:00+00:00"),
            validator=validator,
        ))

        assert result.admitted is True


class TestDeleteShift:

    def test_delete_existing(self, stored_repo):
        asyncio.run(delete_shift(stored_repo, "existing-1"))

        assert stored_repo.shifts == {}

    def test_delete_missing_raises(self, shift_repo):
        with pytest.raises(ShiftNotFoundError):
            asyncio.run(delete_shift(shift_repo, "missing"))


class TestSubmitShiftRequest:

    def test_valid_request_is_stored_pending(self, stored_repo, request_repo):
        result = asyncio.run(submit_shift_request(
            stored_repo,
            request_repo,
            _record("2025-01-21T09:00:00+00:00", "2025-01-21T17:00:00+00:00", shift_type="Afternoon"),
            reason="Covering for a colleague",
        ))

        assert result.admitted is True
        assert result.request.id == "request-1"
        assert result.request.status == ShiftRequestStatus.PENDING
        assert result.request.reason == "Covering for a colleague"
        assert result.request.shift_type == "Afternoon"
        # Requests do not create shifts
        assert len(stored_repo.shifts) == 1

    def test_conflicting_request_is_not_stored(self, stored_repo, request_repo):
        result = asyncio.run(submit_shift_request(
            stored_repo,
            request_repo,
            _record("2025-01-20T10:00:00+00:00", "2025-01-20T16:00:00+00:00"),
        ))

        assert result.admitted is False
        assert result.validation.error == "This shift overlaps with another shift for the same employee"
        assert request_repo.requests == {}


class TestRespondToShiftRequest:

    def _submit(self, shift_repo, request_repo, start_time, end_time):
        result = asyncio.run(submit_shift_request(
            shift_repo, request_repo, _record(start_time, end_time)
        ))
        return result.request

    def test_approval_creates_shift(self, stored_repo, request_repo):
        request = self._submit(stored_repo, request_repo, "2025-01-21T09:00:00+00:00", "2025-01-21T17:00:00+00:00")

        result = asyncio.run(respond_to_shift_request(
            stored_repo, request_repo, request.id, "approved", response_message="Enjoy"
        ))

        assert result.admitted is True
        assert result.shift.id in stored_repo.shifts
        assert result.request.status == ShiftRequestStatus.APPROVED
        assert result.request.shift_id == result.shift.id
        assert result.request.response_message == "Enjoy"
        assert request_repo.requests[request.id].status == ShiftRequestStatus.APPROVED

    def test_approval_revalidates_against_current_schedule(self, stored_repo, request_repo):
        request = self._submit(stored_repo, request_repo, "2025-01-21T09:00:00+00:00", "2025-01-21T17:00:00+00:00")
        # Admin schedules a conflicting shift before the request is handled
        asyncio.run(admit_shift(
            stored_repo, _record("2025-01-21T08:00:00+00:00", "2025-01-21T16:00:00+00:00")
        ))

        result = asyncio.run(respond_to_shift_request(
            stored_repo, request_repo, request.id, ShiftRequestStatus.APPROVED
        ))

        assert result.admitted is False
        assert result.validation.rule_type == RuleType.OVERLAP
        assert result.shift is None
        assert request_repo.requests[request.id].status == ShiftRequestStatus.PENDING
        assert len(stored_repo.shifts) == 2

    def test_failed_approval_write_removes_new_shift(self, stored_repo, request_repo):
        request = self._submit(stored_repo, request_repo, "2025-01-22T09:00:00+00:00", "2025-01-22T17:00:00+00:00")
        save_request = request_repo.update
        request_repo.update = AsyncMock(side_effect=RuntimeError("write failed"))

        with pytest.raises(RuntimeError):
            asyncio.run(respond_to_shift_request(stored_repo, request_repo, request.id, "approved"))

        assert list(stored_repo.shifts) == ["existing-1"]
        assert request_repo.requests[request.id].status == ShiftRequestStatus.PENDING

        request_repo.update = save_request
        result = asyncio.run(respond_to_shift_request(stored_repo, request_repo, request.id, "approved"))

        assert result.admitted is True
        assert result.request.status == ShiftRequestStatus.APPROVED
        assert len(stored_repo.shifts) == 2

    def test_rejection_does_not_create_shift(self, stored_repo, request_repo):
        request = self._submit(stored_repo, request_repo, "2025-01-21T09:00:00+00:00", "2025-01-21T17:00:00+00:00")

        result = asyncio.run(respond_to_shift_request(
            stored_repo, request_repo, request.id, "rejected", response_message="Fully staffed"
        ))

        assert result.request.status == ShiftRequestStatus.REJECTED
        assert result.request.response_message == "Fully staffed"
        assert result.shift is None
        assert len(stored_repo.shifts) == 1

    def test_resolved_request_cannot_be_answered_again(self, stored_repo, request_repo):
        request = self._submit(stored_repo, request_repo, "2025-01-21T09:00:00+00:00", "2025-01-21T17:00:00+00:00")
        asyncio.run(respond_to_shift_request(stored_repo, request_repo, request.id, "rejected"))

        with pytest.raises(ShiftRequestAlreadyResolvedError):
            asyncio.run(respond_to_shift_request(stored_repo, request_repo, request.id, "approved"))

    def test_unknown_request_raises(self, shift_repo, request_repo):
        with pytest.raises(ShiftRequestNotFoundError):
            asyncio.run(respond_to_shift_request(shift_repo, request_repo, "missing", "approved"))

    def test_pending_is_not_a_decision(self, shift_repo, request_repo):
        with pytest.raises(ValueError):
            asyncio.run(respond_to_shift_request(shift_repo, request_repo, "request-1", "pending"))
