"""Shared date and identifier helpers used across pms_core."""

from datetime import date, datetime, timedelta
from typing import Iterator, Union

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """Coerce a date, datetime, or ISO string to a calendar date.

    Time of day is dropped; stays are counted in whole calendar days.

    Examples:
        >>> to_date("2024-03-10")
        datetime.date(2024, 3, 10)
        >>> to_date("2024-03-10T15:30:00")
        datetime.date(2024, 3, 10)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if "T" in text or " " in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each day in the half-open range [start, end)."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def normalize_room_number(value: Union[str, int]) -> str:
    """Normalize a room number for exact key comparison.

    Examples:
        >>> normalize_room_number(" 101 ")
        '101'
        >>> normalize_room_number(7)
        '7'
    """
    return str(value).strip().upper()
