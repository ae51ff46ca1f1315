"""Excel report writer."""
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from ...domain.models import Employee
from ...domain.schedule import Schedule

HEADER_FONT = Font(bold=True)
CENTER = Alignment(horizontal="center", vertical="center")
SHORT_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")

Target = Union[str, Path, BinaryIO]


def write_grid(
    target: Target,
    schedule: Schedule,
    employees: Sequence[Employee],
    *,
    minimum: int | None = None,
    title: str | None = None,
) -> Target:
    """Write an employees × days grid plus a daily active-staff row.

    Days whose active count is below *minimum* are highlighted.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = title or "Schedule"

    dates = list(schedule)
    ws.cell(row=1, column=1, value="Employee").font = HEADER_FONT
    for idx, day in enumerate(dates, start=2):
        cell = ws.cell(row=1, column=idx, value=day.isoformat())
        cell.font = HEADER_FONT
        cell.alignment = CENTER

    for row_idx, employee in enumerate(employees, start=2):
        ws.cell(row=row_idx, column=1, value=f"{employee.emp_no} {employee.name}").font = HEADER_FONT
        for col_idx, day in enumerate(dates, start=2):
            cell = ws.cell(row=row_idx, column=col_idx, value=schedule.get_code(employee.id, day) or "")
            cell.alignment = CENTER

    total_row = len(employees) + 2
    ws.cell(row=total_row, column=1, value="Active").font = HEADER_FONT
    for col_idx, day in enumerate(dates, start=2):
        active = schedule.active_count(day)
        cell = ws.cell(row=total_row, column=col_idx, value=active)
        cell.alignment = CENTER
        if minimum is not None and active < minimum:
            cell.fill = SHORT_FILL

    if isinstance(target, (str, Path)):
        target = Path(target)
    wb.save(target)
    return target
