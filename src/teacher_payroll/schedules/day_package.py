"""Day-package parsing.

A day-package describes the weekdays an assignment is taught on. Supported:

- the wildcard ``"All days"`` (also ``"alldays"``)
- shortcuts ``MWF`` and ``TTS``/``TTH``
- day names and abbreviations, comma separated (``"Monday, Wed"``)
- numeric codes 0..6 with 0 = Sunday (``"1,3,5"``)

Weekday numbers here use 0 = Sunday ... 6 = Saturday.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet

SUNDAY = 0
ALL_DAYS: FrozenSet[int] = frozenset(range(7))

_SHORTCUTS: dict[str, FrozenSet[int]] = {
    "ALL DAYS": ALL_DAYS,
    "ALLDAYS": ALL_DAYS,
    "MWF": frozenset({1, 3, 5}),
    "TTS": frozenset({2, 4, 6}),
    "TTH": frozenset({2, 4, 6}),
}

_DAY_NAMES: dict[str, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
    "sun": 0,
    "mon": 1,
    "tue": 2,
    "tues": 2,
    "wed": 3,
    "thu": 4,
    "thur": 4,
    "thurs": 4,
    "fri": 5,
    "sat": 6,
}


@dataclass(frozen=True)
class DayPackage:
    days: FrozenSet[int]
    wildcard: bool = False

    def includes(self, day: date, *, include_sundays: bool = True) -> bool:
        weekday = weekday_index(day)
        if weekday not in self.days:
            return False
        if weekday == SUNDAY and self.wildcard:
            return include_sundays
        return True


def weekday_index(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return day.isoweekday() % 7


def _parse_part(part: str) -> int | None:
    token = part.strip().lower()
    if token in _DAY_NAMES:
        return _DAY_NAMES[token]
    if token.isdigit() and 0 <= int(token) <= 6:
        return int(token)
    return None


def parse_day_package(value: str | None) -> DayPackage:
    """Parse a day-package string.

    Empty or unrecognised packages behave like the wildcard, matching the
    legacy rows that never had a package recorded.
    """
    raw = (value or "").strip()
    if not raw:
        return DayPackage(days=ALL_DAYS, wildcard=True)

    shortcut = _SHORTCUTS.get(raw.upper())
    if shortcut is not None:
        return DayPackage(days=shortcut, wildcard=shortcut == ALL_DAYS)

    days = {d for d in (_parse_part(p) for p in raw.split(",")) if d is not None}
    if not days:
        return DayPackage(days=ALL_DAYS, wildcard=True)
    return DayPackage(days=frozenset(days))
