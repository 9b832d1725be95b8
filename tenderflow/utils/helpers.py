"""Shared utility functions for blueprints and services.

ensure_utc:           normalise naive datetimes read back from SQLite
parse_datetime_input: deadline parsing; raises ValueError for 400 responses
"""
from datetime import date, datetime, time, timezone


def ensure_utc(value):
    """Return ``value`` as an aware UTC datetime.

    SQLite drops tzinfo on the way back; every value we write is UTC, so a
    naive datetime is interpreted as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime_input(value):
    """Parse a deadline (ISO datetime, ISO date or DD.MM.YYYY) to an aware datetime.

    Empty input returns None. A bare date is read as midnight UTC.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    try:
        parsed = datetime.strptime(text, "%d.%m.%Y")
    except ValueError as exc:
        raise ValueError(
            "Invalid date format. Use ISO 8601 (YYYY-MM-DD[THH:MM]) or DD.MM.YYYY."
        ) from exc
    return parsed.replace(tzinfo=timezone.utc)
