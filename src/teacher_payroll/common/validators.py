from __future__ import annotations

from datetime import date
from typing import Optional, Union

from ..core.exceptions import InvalidRange, ValidationError
from .datetime_utils import parse_iso_date

DateLike = Union[date, str, None]


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_date(value: DateLike, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise InvalidRange(f"{field_name} is required (YYYY-MM-DD)")
    try:
        return parse_iso_date(str(value).strip()[:10])
    except ValueError:
        raise InvalidRange(f"{field_name} is not a valid date: {value!r}")


def validate_date_range(start: DateLike, end: DateLike) -> tuple[date, date]:
    """Parse and check a salary period before any store is touched.

    Both bounds are calendar dates and both are inclusive.
    """
    start_d = require_date(start, "start")
    end_d = require_date(end, "end")
    if start_d > end_d:
        raise InvalidRange("start must be before or equal to end")
    return start_d, end_d


def optional_str(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None
