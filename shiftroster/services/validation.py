"""Input parsing shared by the services; every failure names its field."""
from __future__ import annotations

from datetime import date
from typing import Any, Tuple

from ..domain import shift_codes
from ..errors import ValidationError


def _coerce_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an integer", field=field)


def parse_year_month(year: Any, month: Any) -> Tuple[int, int]:
    """Validate a target month; strings of digits are accepted."""
    year_value = _coerce_int(year, "year")
    month_value = _coerce_int(month, "month")
    if not 1000 <= year_value <= 9999:
        raise ValidationError("year must be a 4-digit year", field="year")
    if not 1 <= month_value <= 12:
        raise ValidationError("month must be between 1 and 12", field="month")
    return year_value, month_value


def parse_date(value: Any, field: str = "date") -> date:
    parsed = shift_codes.parse_iso_date(value)
    if parsed is None:
        raise ValidationError(f"{field} must be a calendar day in YYYY-MM-DD format", field=field)
    return parsed


def parse_shift(value: Any, field: str = "shift") -> str:
    if value not in shift_codes.ALL_CODES:
        allowed = ", ".join(shift_codes.ALL_CODES)
        raise ValidationError(f"{field} must be one of {allowed}", field=field)
    return value


def parse_employee_id(value: Any, field: str = "employee_id") -> int:
    employee_id = _coerce_int(value, field)
    if employee_id <= 0:
        raise ValidationError(f"{field} must be a positive integer", field=field)
    return employee_id
