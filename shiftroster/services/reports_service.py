from __future__ import annotations

from io import BytesIO, StringIO
from typing import Any, Dict, Tuple

from ..adapters.report import csv_writer, xlsx_writer
from ..adapters.repository import RosterRepository
from ..domain import shift_codes
from . import validation
from .schedule_service import load_month_schedule


def coverage_report(repository: RosterRepository, year: Any, month: Any, *, minimum: int) -> Dict[str, Any]:
    year, month = validation.parse_year_month(year, month)
    schedule = load_month_schedule(repository, year, month)

    days = []
    for day in schedule:
        counts = schedule.codes_on(day)
        active = schedule.active_count(day)
        days.append(
            {
                "date": day.isoformat(),
                "weekday": shift_codes.weekday_code(day),
                "counts": {code: counts.get(code, 0) for code in shift_codes.ALL_CODES},
                "active": active,
                "meets_floor": active >= minimum,
            }
        )

    per_employee = {
        str(employee_id): {code: counts.get(code, 0) for code in shift_codes.ALL_CODES}
        for employee_id, counts in sorted(schedule.counts_by_employee().items())
    }
    return {
        "month": shift_codes.month_prefix(year, month),
        "minimum": minimum,
        "days": days,
        "employees": per_employee,
        "meta": {"short_days": sum(1 for item in days if not item["meets_floor"])},
    }


def export_xlsx(repository: RosterRepository, year: Any, month: Any, *, minimum: int) -> Tuple[BytesIO, str]:
    year, month = validation.parse_year_month(year, month)
    prefix = shift_codes.month_prefix(year, month)
    schedule = load_month_schedule(repository, year, month)
    buffer = BytesIO()
    xlsx_writer.write_grid(buffer, schedule, repository.list_employees(), minimum=minimum, title=prefix)
    buffer.seek(0)
    return buffer, f"schedule_{prefix}.xlsx"


def export_csv(repository: RosterRepository, year: Any, month: Any) -> Tuple[StringIO, str]:
    year, month = validation.parse_year_month(year, month)
    prefix = shift_codes.month_prefix(year, month)
    schedule = load_month_schedule(repository, year, month)
    buffer = StringIO()
    csv_writer.write_grid(buffer, schedule, repository.list_employees())
    buffer.seek(0)
    return buffer, f"schedule_{prefix}.csv"
