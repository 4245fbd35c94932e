"""Exceptions raised by the shift admission workflow."""


class SchedulingError(Exception):
    """Base class for shift scheduling errors."""


class InvalidShiftInputError(SchedulingError, ValueError):
    """A shift record is missing fields or carries unparseable timestamps."""


class ShiftNotFoundError(SchedulingError):
    def __init__(self, shift_id: str):
        super().__init__(f"Shift {shift_id} not found")
        self.shift_id = shift_id


class ShiftRequestNotFoundError(SchedulingError):
    def __init__(self, request_id: str):
        super().__init__(f"Shift request {request_id} not found")
        self.request_id = request_id


class ShiftRequestAlreadyResolvedError(SchedulingError):
    def __init__(self, request_id: str, status: str):
        super().__init__(f"Shift request {request_id} was already {status}")
        self.request_id = request_id
        self.status = status


class ShiftConflictError(SchedulingError):
    """Storage refused the write because a conflicting shift was stored first."""
