from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from ..core.constants import INVALID_TIME, LEGACY_UNSET_TIMES
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today() -> date:
    return now_local().date()


def parse_time_minutes(value: Optional[str]) -> int:
    """Convert ``HH:MM`` or ``HH:MM:SS`` into minutes since midnight.

    Returns ``INVALID_TIME`` (-1) for missing or malformed input instead of
    raising, so the result can be used directly as a sort key. Seconds are
    ignored.
    """
    if not value or not isinstance(value, str) or ":" not in value:
        return INVALID_TIME

    parts = value.split(":")
    if len(parts) not in (2, 3):
        return INVALID_TIME

    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        return INVALID_TIME

    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        return INVALID_TIME
    return hours * 60 + minutes


def format_duration(total_minutes: int) -> str:
    if total_minutes <= 0:
        return "0h00"
    return f"{total_minutes // 60}h{total_minutes % 60:02d}"


def short_time(value: Optional[str]) -> Optional[str]:
    """``08:30:00`` -> ``08:30``; None stays None."""
    if value is None:
        return None
    return value[:5]


def to_store_time(value: Optional[str]) -> Optional[str]:
    """Normalize a user-supplied time for a TIME column.

    Blank input means "no value" and is stored as NULL, never as midnight.
    """
    v = (value or "").strip()
    if not v:
        return None
    if parse_time_minutes(v) == INVALID_TIME:
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)")

    parts = v.split(":")
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = 0
    if len(parts) == 3:
        try:
            seconds = int(parts[2])
        except ValueError:
            raise ValidationError(f"Invalid time {value!r} (expected HH:MM:SS)")
        if not 0 <= seconds <= 59:
            raise ValidationError(f"Invalid time {value!r} (expected HH:MM:SS)")
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def from_store_time(value: Any, *, legacy_unset: bool = False) -> Optional[str]:
    """Normalize a TIME value read from MySQL into ``HH:MM:SS``.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')

    With ``legacy_unset`` the old "not departed" placeholders map to None.
    """
    if value is None:
        return None

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        value = time(hour=total_seconds // 3600, minute=(total_seconds % 3600) // 60, second=total_seconds % 60)

    if isinstance(value, time):
        value = value.strftime("%H:%M:%S")

    text = str(value).strip()
    if legacy_unset and text in LEGACY_UNSET_TIMES:
        return None
    return text or None


def week_bounds(day: date) -> tuple[date, date]:
    """Monday..Sunday week containing ``day``."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def js_day_of_week(day: date) -> int:
    """Weekday numbering used by stored schedules: 0 = Sunday .. 6 = Saturday."""
    return (day.weekday() + 1) % 7
