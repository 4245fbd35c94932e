import logging

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from config import MONGODB_URL
from scheduling.types import ShiftRules

_client: AsyncIOMotorClient | None = None

SHIFTS_COLLECTION = "shifts"


def _database_name() -> str:
    return MONGODB_URL.rsplit("/", 1)[-1].split("?")[0]


def shift_collection_validator(rules: ShiftRules) -> dict:
    """
    MongoDB validator enforcing end after start and the duration bounds on write.

    Dates subtract to milliseconds.
    """
    duration_ms = {"$subtract": ["$end_time", "$start_time"]}
    return {
        "$expr": {
            "$and": [
                {"$gt": ["$end_time", "$start_time"]},
                {"$gte": [duration_ms, rules.min_duration_minutes * 60_000]},
                {"$lte": [duration_ms, rules.max_duration_minutes * 60_000]},
            ]
        }
    }


async def apply_shift_constraints(database, rules: ShiftRules):
    """Install or refresh the shifts collection validator for the given rules."""
    validator = shift_collection_validator(rules)

    if SHIFTS_COLLECTION not in await database.list_collection_names():
        await database.create_collection(
            SHIFTS_COLLECTION, validator=validator, validationLevel="moderate"
        )
    else:
        # moderate: rows written before a rules change are not re-checked
        await database.command(
            "collMod", SHIFTS_COLLECTION, validator=validator, validationLevel="moderate"
        )
    logging.info(
        f"Shift collection validator set to {rules.min_duration_minutes}-{rules.max_duration_minutes} minutes"
    )


async def init_db():
    global _client

    from .models import ShiftDoc, ShiftRequestDoc, ShiftRulesDoc
    from .repository import get_shift_rules

    _client = AsyncIOMotorClient(MONGODB_URL)
    database = _client[_database_name()]

    await init_beanie(
        database=database,
        document_models=[ShiftDoc, ShiftRequestDoc, ShiftRulesDoc],
    )
    await apply_shift_constraints(database, await get_shift_rules())

    return database


def get_database():
    if _client is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _client[_database_name()]


async def close_db():
    global _client
    if _client is not None:
        _client.close()
        _client = None
