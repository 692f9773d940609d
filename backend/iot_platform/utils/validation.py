"""
Input Validation Utilities
===========================

Small helpers the routers use to check request bodies and to normalise
timestamps before they reach the database.

TIMESTAMPS:
    Everything is stored as a naive UTC ``datetime`` (that is what BSON
    dates come back as), so every value coming in from a request is
    converted to UTC and stripped of its tzinfo first. Mixing aware and
    naive datetimes in one query would make comparisons fail.
"""

from datetime import datetime, timezone
from typing import Any, Iterable

from iot_platform.exceptions import ValidationError


# Fields a client may never overwrite through an update
IDENTIFIER_FIELDS = ("id", "_id")


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, millisecond precision."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_timestamp(value: Any, field: str = "timestamp") -> datetime:
    """
    Parse a timestamp supplied by a client.

    Accepts:
        - datetime objects
        - ISO-8601 strings ("2024-05-01T10:00:00Z", "2024-05-01")
        - numbers, read as milliseconds since the epoch (what a browser's
          ``Date.now()`` produces)

    Raises:
        ValidationError: if the value can't be read as a date
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)

    # bool is an int subclass, but "timestamp": true is not a date
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValidationError(f"Invalid {field}: {value}")
        return to_naive_utc(parsed)

    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return to_naive_utc(datetime.fromisoformat(text))
        except ValueError:
            raise ValidationError(f"Invalid {field}: {value}")

    raise ValidationError(f"Invalid {field}: {value!r}")


def is_present(value: Any) -> bool:
    """True unless the value is missing (None) or an empty string."""
    return value is not None and value != ""


def require_fields(body: dict, fields: Iterable[str]) -> None:
    """
    Make sure every required field is present and non-empty.

    Raises:
        ValidationError: naming every field that is missing
    """
    fields = list(fields)
    missing = [name for name in fields if not is_present(body.get(name))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(fields)}")


def strip_identifiers(update: dict, fields: Iterable[str] = IDENTIFIER_FIELDS) -> dict:
    """Return a copy of ``update`` without any identifier fields."""
    blocked = set(fields)
    return {key: value for key, value in update.items() if key not in blocked}
