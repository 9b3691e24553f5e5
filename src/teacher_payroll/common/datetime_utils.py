from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Iterator

_TWELVE_HOUR = re.compile(r"^(\d{1,2}):(\d{2})\s?(AM|PM)$", re.IGNORECASE)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def parse_time_slot(value: str | time) -> time:
    """Parse a schedule time slot.

    Accepts ``HH:MM``, ``HH:MM:SS`` and 12-hour ``H:MM AM/PM`` strings.
    """
    if isinstance(value, time):
        return value

    raw = (value or "").strip()
    m = _TWELVE_HOUR.match(raw)
    if m:
        hour = int(m.group(1))
        minute = int(m.group(2))
        period = m.group(3).upper()
        if period == "PM" and hour != 12:
            hour += 12
        if period == "AM" and hour == 12:
            hour = 0
        return time(hour=hour, minute=minute)

    parts = raw.split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time slot: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def period_label(start: date) -> str:
    """Payment period label (``YYYY-MM``) of a salary period."""
    return start.strftime("%Y-%m")
