"""
Clock Helpers

All domain timestamps are timezone-aware UTC datetimes.
"""

from datetime import datetime, timezone
from typing import Union


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Union[datetime, str, int, float]) -> datetime:
    """
    Parse a timestamp as delivered by capture producers.

    Accepts datetime instances, ISO-8601 strings (including a trailing ``Z``)
    and JavaScript epoch milliseconds.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, bool):
        raise ValueError(f"Unsupported timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    if isinstance(value, str) and value:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        return ensure_utc(datetime.fromisoformat(text))
    raise ValueError(f"Unsupported timestamp: {value!r}")


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp to ISO-8601."""
    return ensure_utc(value).isoformat()
