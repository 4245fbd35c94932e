import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import pytest

backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

from scheduling.errors import ShiftNotFoundError, ShiftRequestNotFoundError
from scheduling.types import Shift, ShiftRequest, ShiftRequestStatus


class InMemoryShiftRepository:
    def __init__(self, shifts: list[Shift] | None = None):
        self.shifts: dict[str, Shift] = {}
        self._next_id = 1
        for shift in shifts or []:
            shift_id = shift.id or self._new_id()
            self.shifts[shift_id] = replace(shift, id=shift_id)

    def _new_id(self) -> str:
        shift_id = f"shift-{self._next_id}"
        self._next_id += 1
        return shift_id

    async def list_for_employee(self, employee_id: str) -> list[Shift]:
        return sorted(
            (s for s in self.shifts.values() if s.employee_id == employee_id),
            key=lambda s: s.start_time,
        )

    async def get(self, shift_id: str) -> Optional[Shift]:
        return self.shifts.get(shift_id)

    async def create(self, shift: Shift) -> Shift:
        stored = replace(shift, id=self._new_id())
        self.shifts[stored.id] = stored
        return stored

    async def update(self, shift_id: str, shift: Shift) -> Shift:
        if shift_id not in self.shifts:
            raise ShiftNotFoundError(shift_id)
        stored = replace(shift, id=shift_id)
        self.shifts[shift_id] = stored
        return stored

    async def delete(self, shift_id: str) -> bool:
        return self.shifts.pop(shift_id, None) is not None


class InMemoryShiftRequestRepository:
    def __init__(self):
        self.requests: dict[str, ShiftRequest] = {}
        self._next_id = 1

    async def list_requests(self, status: Optional[ShiftRequestStatus] = None) -> list[ShiftRequest]:
        requests = sorted(self.requests.values(), key=lambda r: r.created_at, reverse=True)
        if status is not None:
            requests = [r for r in requests if r.status == ShiftRequestStatus(status)]
        return requests

    async def get(self, request_id: str) -> Optional[ShiftRequest]:
        return self.requests.get(request_id)

    async def create(self, request: ShiftRequest) -> ShiftRequest:
        stored = replace(request, id=f"request-{self._next_id}")
        self._next_id += 1
        self.requests[stored.id] = stored
        return stored

    async def update(self, request: ShiftRequest) -> ShiftRequest:
        if request.id not in self.requests:
            raise ShiftRequestNotFoundError(request.id)
        self.requests[request.id] = request
        return request


@pytest.fixture
def make_shift():
    """Factory to create Shift objects from ISO timestamps."""
    def _make_shift(
        start_time: str,
        end_time: str,
        employee_id: str = "emp-1",
        shift_id: str = None,
        shift_type: str = "Morning",
    ) -> Shift:
        return Shift.from_record({
            "id": shift_id,
            "employee_id": employee_id,
            "start_time": start_time,
            "end_time": end_time,
            "shift_type": shift_type,
        })
    return _make_shift


@pytest.fixture
def day_shift(make_shift):
    """Stored 09:00-17:00 UTC shift on 2025-01-20."""
    return make_shift(
        "2025-01-20T09:00:00+00:00",
        "2025-01-20T17:00:00+00:00",
        shift_id="existing-1",
    )


@pytest.fixture
def shift_repo():
    return InMemoryShiftRepository()


@pytest.fixture
def request_repo():
    return InMemoryShiftRequestRepository()
