"""Scheduling rules a candidate shift must pass to be admitted."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from .types import (
    OverlapPolicy,
    RuleType,
    Shift,
    ShiftValidationContext,
    ValidationResult,
)


def _hours(minutes: float) -> str:
    return f"{minutes / 60:g}"


def _is_within(instant: datetime, start: datetime, end: datetime) -> bool:
    """Inclusive on both ends."""
    return start <= instant <= end


def shifts_overlap(candidate: Shift, existing: Shift, policy: OverlapPolicy = OverlapPolicy.POINT_CONTAINMENT) -> bool:
    """
    Check whether a candidate shift collides with an existing one.

    With POINT_CONTAINMENT the shifts collide when the candidate's start or end
    lies inside the existing shift, or the existing shift's start lies inside
    the candidate. Bounds are inclusive, so shifts sharing an endpoint collide.
    With INTERVAL the shifts are half-open and only collide when they share
    a stretch of time.
    """
    if policy == OverlapPolicy.INTERVAL:
        return candidate.start_time < existing.end_time and existing.start_time < candidate.end_time

    return (
        _is_within(candidate.start_time, existing.start_time, existing.end_time)
        or _is_within(candidate.end_time, existing.start_time, existing.end_time)
        or _is_within(existing.start_time, candidate.start_time, candidate.end_time)
    )


def rest_gaps_minutes(candidate: Shift, existing: Shift) -> tuple[float, float]:
    """Return (rest after existing, rest before existing) in minutes. Negative means no gap on that side."""
    rest_after_existing = (candidate.start_time - existing.end_time).total_seconds() / 60
    rest_before_existing = (existing.start_time - candidate.end_time).total_seconds() / 60
    return rest_after_existing, rest_before_existing


class BaseShiftRule(ABC):
    """Base class for shift admission rules."""

    rule_type: RuleType

    @abstractmethod
    def validate(self, context: ShiftValidationContext) -> Optional[ValidationResult]:
        """Return a rejection if the candidate breaks this rule, else None."""
        pass


class TimeOrderRule(BaseShiftRule):
    """The shift must end after it starts."""

    rule_type = RuleType.TIME_ORDER

    def validate(self, context: ShiftValidationContext) -> Optional[ValidationResult]:
        candidate = context.candidate
        if candidate.end_time <= candidate.start_time:
            return ValidationResult.rejected(self.rule_type, "End time must be after start time")
        return None


class DurationRule(BaseShiftRule):
    """The shift must last between the minimum and maximum duration, inclusive."""

    rule_type = RuleType.DURATION

    def validate(self, context: ShiftValidationContext) -> Optional[ValidationResult]:
        rules = context.rules
        duration = context.candidate.duration_minutes
        if duration < rules.min_duration_minutes or duration > rules.max_duration_minutes:
            return ValidationResult.rejected(
                self.rule_type,
                f"Shift duration must be between {_hours(rules.min_duration_minutes)} "
                f"and {_hours(rules.max_duration_minutes)} hours",
            )
        return None


class OverlapRule(BaseShiftRule):
    """The shift must not collide with another shift of the same employee."""

    rule_type = RuleType.OVERLAP

    def validate(self, context: ShiftValidationContext) -> Optional[ValidationResult]:
        for existing in context.other_shifts:
            if shifts_overlap(context.candidate, existing, context.rules.overlap_policy):
                return ValidationResult.rejected(
                    self.rule_type,
                    "This shift overlaps with another shift for the same employee",
                    conflicting_shift_id=existing.id,
                )
        return None


class RestPeriodRule(BaseShiftRule):
    """Anti-clopening: enough rest between this shift and its neighbours."""

    rule_type = RuleType.REST_PERIOD

    def validate(self, context: ShiftValidationContext) -> Optional[ValidationResult]:
        min_rest = context.rules.min_rest_minutes

        for existing in context.other_shifts:
            rest_after, rest_before = rest_gaps_minutes(context.candidate, existing)
            # Zero and negative gaps are not rest periods
            if 0 < rest_after < min_rest or 0 < rest_before < min_rest:
                return ValidationResult.rejected(
                    self.rule_type,
                    f"Employees must have at least {_hours(min_rest)} hours of rest between shifts",
                    conflicting_shift_id=existing.id,
                )
        return None
