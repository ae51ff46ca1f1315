from datetime import date

import pytest

from shiftroster.domain import shift_codes
from shiftroster.errors import ValidationError
from shiftroster.services import validation


def test_days_in_month_is_leap_aware():
    assert shift_codes.days_in_month(2026, 2) == 28
    assert shift_codes.days_in_month(2024, 2) == 29
    assert shift_codes.days_in_month(2000, 2) == 29
    assert shift_codes.days_in_month(1900, 2) == 28
    assert shift_codes.days_in_month(2026, 4) == 30
    assert shift_codes.days_in_month(2026, 12) == 31


def test_weekday_codes_and_month_helpers():
    assert shift_codes.weekday_code(date(2026, 2, 1)) == "SUN"
    assert shift_codes.weekday_code(date(2026, 2, 2)) == "MON"
    assert shift_codes.month_prefix(2026, 2) == "2026-02"
    assert shift_codes.previous_month(2026, 1) == (2025, 12)
    assert shift_codes.previous_month(2026, 3) == (2026, 2)
    days = list(shift_codes.iter_month_days(2026, 2))
    assert days[0] == date(2026, 2, 1) and days[-1] == date(2026, 2, 28)


def test_only_abc_are_active():
    assert [code for code in shift_codes.ALL_CODES if shift_codes.is_active_code(code)] == ["A", "B", "C"]


def test_parse_iso_date_is_strict():
    assert shift_codes.parse_iso_date("2026-02-15") == date(2026, 2, 15)
    assert shift_codes.parse_iso_date("2026-2-15") is None
    assert shift_codes.parse_iso_date("2026-02-30") is None
    assert shift_codes.parse_iso_date(20260215) is None


def test_parse_year_month_coerces_digit_strings():
    assert validation.parse_year_month("2026", "2") == (2026, 2)
    assert validation.parse_year_month(2026, 12) == (2026, 12)


@pytest.mark.parametrize(
    ("year", "month", "field"),
    [
        (2026, 0, "month"),
        (2026, 13, "month"),
        (99, 1, "year"),
        ("abc", 1, "year"),
        (2026, True, "month"),
        ("2026", "²", "month"),
        ("2026", "", "month"),
    ],
)
def test_parse_year_month_rejects_out_of_range(year, month, field):
    with pytest.raises(ValidationError) as excinfo:
        validation.parse_year_month(year, month)
    assert excinfo.value.field == field


def test_parse_shift_is_case_sensitive():
    assert validation.parse_shift("OFF") == "OFF"
    with pytest.raises(ValidationError) as excinfo:
        validation.parse_shift("off")
    assert excinfo.value.field == "shift"
