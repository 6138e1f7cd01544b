from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Union


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

DateLike = Union[date, datetime, str, None]


def localnow() -> datetime:
    """Local wall-clock 'now', naive, truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.strftime(TIMESTAMP_FORMAT)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a 'YYYY-MM-DD' (or full ISO datetime) string into a date.

    - None / "" -> None
    - a datetime string keeps only its date portion
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if len(s) == 10:
        return date.fromisoformat(s)
    return datetime.fromisoformat(s).date()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 local datetime string, dropping sub-second precision."""
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is not None:
        # Stored timestamps are local and naive
        dt = dt.astimezone().replace(tzinfo=None)
    return dt.replace(microsecond=0)


def as_date(value: DateLike) -> Optional[date]:
    """Normalize a date, datetime or ISO string to its calendar date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def start_of_next_day(day: date) -> datetime:
    return datetime.combine(day + timedelta(days=1), time.min)
