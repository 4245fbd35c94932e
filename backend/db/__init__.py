from .database import init_db, get_database, close_db, apply_shift_constraints, shift_collection_validator
from .models import (
    ShiftDoc,
    ShiftRequestDoc,
    ShiftRulesDoc,
)
from .repository import (
    BeanieShiftRepository,
    BeanieShiftRequestRepository,
    get_shift_rules,
    save_shift_rules,
)

__all__ = [
    "init_db",
    "get_database",
    "close_db",
    "apply_shift_constraints",
    "shift_collection_validator",
    "ShiftDoc",
    "ShiftRequestDoc",
    "ShiftRulesDoc",
    "BeanieShiftRepository",
    "BeanieShiftRequestRepository",
    "get_shift_rules",
    "save_shift_rules",
]
