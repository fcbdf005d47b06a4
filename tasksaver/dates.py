"""Date helpers.

Task, event and message dates are naive datetimes in UTC wall-clock time.
Aware values coming off the wire are converted to UTC and made naive so they
can be compared with each other and with day windows.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    """Aware UTC now, used for bookkeeping timestamps."""
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO date or datetime into a naive UTC datetime.

    Accepts ``None``/empty (returns None), ``date``, ``datetime`` and strings
    such as ``2024-01-05``, ``2024-01-05T09:30:00`` or ``2024-01-05T09:30:00Z``.

    Raises:
        ValueError: if the string is not ISO-8601.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(
                f"Invalid date '{value}'. Use YYYY-MM-DD or an ISO-8601 datetime."
            ) from exc
    else:
        raise ValueError(f"Unsupported date value: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a bookkeeping timestamp, always returning an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def start_of_day(value: datetime | date) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min)


def end_of_day(value: datetime | date) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.max)


def day_window(day: date) -> tuple[datetime, datetime]:
    """Inclusive [00:00, 23:59:59.999999] window of ``day``."""
    return start_of_day(day), end_of_day(day)


def parse_hour(value: Optional[str]) -> Optional[int]:
    """Hour part of an "HH:MM" string, or None when absent or unparsable."""
    if not value:
        return None
    try:
        return int(value.split(":")[0])
    except ValueError:
        return None


def start_of_week(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def end_of_week(day: date) -> date:
    return start_of_week(day) + timedelta(days=6)
