"""Shift validation engine that runs the scheduling rules in order."""

import logging
from collections.abc import Iterable
from typing import Any, Optional

from .errors import InvalidShiftInputError
from .types import (
    Shift,
    ShiftRules,
    ShiftValidationContext,
    ValidationResult,
    read_field,
)
from .validators import (
    BaseShiftRule,
    TimeOrderRule,
    DurationRule,
    OverlapRule,
    RestPeriodRule,
)


class ShiftValidator:
    """
    Decides whether a candidate shift may join an employee's schedule.

    Rules run in a fixed order and the first rejection wins. The validator
    holds no schedule state; existing shifts are passed in on every call.
    """

    def __init__(self, rules: Optional[ShiftRules] = None):
        self.rules = rules or ShiftRules()
        self.rule_chain: list[BaseShiftRule] = [
            TimeOrderRule(),
            DurationRule(),
            OverlapRule(),
            RestPeriodRule(),
        ]

    def validate(
        self,
        candidate: Any,
        existing_shifts: Iterable[Any],
        editing_shift_id: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate a candidate shift against an employee's existing shifts.

        Args:
            candidate: The proposed shift (Shift or storage record)
            existing_shifts: Stored shifts, possibly for several employees
            editing_shift_id: Id of the stored shift being replaced by the candidate

        Returns:
            ValidationResult, carrying only the first failing rule
        """
        try:
            context = self.build_context(candidate, existing_shifts, editing_shift_id)
        except InvalidShiftInputError as e:
            logging.warning(f"Shift validation received unreadable input: {e}")
            return ValidationResult.invalid_input(f"Invalid shift input: {e}")

        for rule in self.rule_chain:
            rejection = rule.validate(context)
            if rejection is not None:
                logging.debug(
                    f"Shift for {context.candidate.employee_id} "
                    f"({context.candidate.start_time.isoformat()} - {context.candidate.end_time.isoformat()}) "
                    f"rejected by {rule.rule_type.value}: {rejection.error}"
                )
                return rejection

        return ValidationResult.valid()

    def build_context(
        self,
        candidate: Any,
        existing_shifts: Iterable[Any],
        editing_shift_id: Optional[str] = None,
    ) -> ShiftValidationContext:
        """
        Build a ShiftValidationContext from raw data.

        Existing shifts for other employees, and the shift being edited, are
        dropped before their timestamps are read.

        Raises:
            InvalidShiftInputError: If the candidate or a relevant existing shift is unreadable
        """
        candidate = Shift.from_record(candidate)

        other_shifts = []
        for record in existing_shifts:
            record_id = read_field(record, "id")
            if editing_shift_id and record_id is not None and str(record_id) == str(editing_shift_id):
                continue
            if str(read_field(record, "employee_id")) != candidate.employee_id:
                continue
            other_shifts.append(Shift.from_record(record))

        return ShiftValidationContext(
            candidate=candidate,
            rules=self.rules,
            other_shifts=other_shifts,
        )


def validate_shift(
    candidate: Any,
    existing_shifts: Iterable[Any],
    editing_shift_id: Optional[str] = None,
    rules: Optional[ShiftRules] = None,
) -> ValidationResult:
    """Validate a candidate shift with the given (or default) rules."""
    return ShiftValidator(rules).validate(candidate, existing_shifts, editing_shift_id)
