"""Time-related utility functions."""

from datetime import datetime, timezone

from dateutil import parser

# Longest slice of a rejected value echoed back in an error message
MAX_ECHOED_CHARS = 64


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _shorten(value) -> str:
    text = repr(value)
    if len(text) > MAX_ECHOED_CHARS:
        return text[:MAX_ECHOED_CHARS] + "..."
    return text


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    Naive values are taken as UTC so every instant can be compared with every
    other one.

    Raises:
        ValueError: If the value is empty or not an ISO-8601 timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Expected an ISO-8601 timestamp, got {_shorten(value)}")
        try:
            parsed = parser.isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid timestamp {_shorten(value)}: {e}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
