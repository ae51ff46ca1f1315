"""Canonical shift codes and calendar helpers for the roster."""
from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

__all__ = [
    "SHIFT_A",
    "SHIFT_B",
    "SHIFT_C",
    "OFF_CODE",
    "LEAVE_CODE",
    "GENERAL_CODE",
    "ACTIVE_CODES",
    "ALL_CODES",
    "WEEKDAY_CODES",
    "is_active_code",
    "weekday_code",
    "days_in_month",
    "iter_month_days",
    "month_prefix",
    "previous_month",
    "parse_iso_date",
]


SHIFT_A = "A"
SHIFT_B = "B"
SHIFT_C = "C"
OFF_CODE = "OFF"
LEAVE_CODE = "L"
GENERAL_CODE = "G"

# Order doubles as staffing priority: A and B are filled before C.
ACTIVE_CODES: Tuple[str, ...] = (SHIFT_A, SHIFT_B, SHIFT_C)
ALL_CODES: Tuple[str, ...] = ACTIVE_CODES + (OFF_CODE, LEAVE_CODE, GENERAL_CODE)

# Indexed by ``date.weekday()``.
WEEKDAY_CODES: Tuple[str, ...] = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_active_code(code: Optional[str]) -> bool:
    """Return True when *code* counts towards daily manpower."""

    return code in ACTIVE_CODES


def weekday_code(day: date) -> str:
    return WEEKDAY_CODES[day.weekday()]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def iter_month_days(year: int, month: int) -> Iterator[date]:
    day = date(year, month, 1)
    for _ in range(days_in_month(year, month)):
        yield day
        day += timedelta(days=1)


def month_prefix(year: int, month: int) -> str:
    """Return the ``YYYY-MM`` prefix shared by every ISO date in the month."""

    return f"{year:04d}-{month:02d}"


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def parse_iso_date(value: str) -> Optional[date]:
    """Parse a strict ``YYYY-MM-DD`` string, returning None when malformed."""

    if not isinstance(value, str) or not _ISO_DAY.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
