"""CSV report helpers."""
from __future__ import annotations

import csv
from typing import Sequence, TextIO

from ...domain.models import Employee
from ...domain.schedule import Schedule


def write_grid(handle: TextIO, schedule: Schedule, employees: Sequence[Employee]) -> TextIO:
    dates = list(schedule)
    writer = csv.writer(handle)
    writer.writerow(["emp_no", "employee"] + [day.isoformat() for day in dates])
    for employee in employees:
        row = [employee.emp_no, employee.name]
        for day in dates:
            row.append(schedule.get_code(employee.id, day) or "")
        writer.writerow(row)
    writer.writerow(["", "active"] + [schedule.active_count(day) for day in dates])
    return handle
