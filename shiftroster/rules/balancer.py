"""Daily manpower balancing."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Sequence

from ..domain.schedule import Schedule
from ..domain.shift_codes import ACTIVE_CODES, OFF_CODE

logger = logging.getLogger(__name__)

OVERRIDE_REASON = "manpower_floor"


@dataclass
class OverrideOperation:
    employee_id: int
    date: date
    shift: str
    active_before: int
    reason: str = OVERRIDE_REASON

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "date": self.date.isoformat(),
            "shift": self.shift,
            "active_before": self.active_before,
            "reason": self.reason,
        }


@dataclass
class Shortfall:
    date: date
    active: int
    required: int

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "active": self.active, "required": self.required}


@dataclass
class BalanceResult:
    operations: List[OverrideOperation]
    shortfalls: List[Shortfall]


def _pick_candidate(
    schedule: Schedule,
    day: date,
    candidates: Sequence[int],
    override_counts: Counter,
    order: Mapping[int, int],
) -> int:
    def key(employee_id: int):
        last_off = schedule.last_date_with(employee_id, (OFF_CODE,), before=day) or date.min
        return override_counts[employee_id], last_off, order[employee_id]

    return min(candidates, key=key)


def _pick_shift(schedule: Schedule, day: date, employee_id: int, priority: Sequence[str]) -> str:
    counts = schedule.codes_on(day)

    def key(code: str):
        last_worked = schedule.last_date_with(employee_id, (code,), before=day) or date.min
        return counts[code], last_worked, priority.index(code)

    return min(priority, key=key)


def enforce_manpower_floor(
    schedule: Schedule,
    employee_ids: Sequence[int],
    *,
    minimum: int,
    priority: Sequence[str] = ACTIVE_CODES,
) -> BalanceResult:
    """Override weekly-off days until every day has *minimum* active staff.

    Only ``OFF`` cells of *employee_ids* are candidates; leave and general
    shifts are never touched. The schedule is modified in place.
    """

    order = {employee_id: idx for idx, employee_id in enumerate(employee_ids)}
    override_counts: Counter = Counter()
    operations: List[OverrideOperation] = []
    shortfalls: List[Shortfall] = []

    for day in schedule:
        active = schedule.active_count(day)
        if active >= minimum:
            continue
        candidates = [emp for emp in schedule.employees_with(day, OFF_CODE) if emp in order]
        while active < minimum and candidates:
            employee_id = _pick_candidate(schedule, day, candidates, override_counts, order)
            candidates.remove(employee_id)
            shift = _pick_shift(schedule, day, employee_id, priority)
            schedule.set_code(employee_id, day, shift)
            override_counts[employee_id] += 1
            operations.append(
                OverrideOperation(employee_id=employee_id, date=day, shift=shift, active_before=active)
            )
            active += 1
        if active < minimum:
            logger.warning(f"Manpower floor not met on {day.isoformat()}: {active} < {minimum}")
            shortfalls.append(Shortfall(date=day, active=active, required=minimum))

    return BalanceResult(operations=operations, shortfalls=shortfalls)
