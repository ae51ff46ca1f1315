"""High level orchestration for schedule generation."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, List, Mapping, Set, Tuple

from ..adapters.repository import RosterRepository
from ..domain import shift_codes
from ..domain.models import Actor, Employee
from ..domain.schedule import Schedule
from ..domain.shift_codes import GENERAL_CODE, LEAVE_CODE, OFF_CODE
from ..errors import AuthorizationError
from ..rules import balancer, rotor
from . import validation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulingRules:
    min_daily_manpower: int = 7
    rotation_pattern: Tuple[str, ...] = rotor.DEFAULT_PATTERN
    general_sections: FrozenSet[str] = frozenset({"GENERAL"})

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SchedulingRules":
        pattern = tuple(config.get("ROTATION_PATTERN", rotor.DEFAULT_PATTERN))
        rotor.working_cycle(pattern)
        minimum = int(config.get("MIN_DAILY_MANPOWER", 7))
        if minimum < 0:
            raise ValueError("MIN_DAILY_MANPOWER must not be negative")
        sections = frozenset(
            str(section).strip().upper() for section in config.get("GENERAL_SHIFT_SECTIONS", ("GENERAL",))
        )
        return cls(min_daily_manpower=minimum, rotation_pattern=pattern, general_sections=sections)

    @property
    def cycle(self) -> Tuple[str, ...]:
        return rotor.working_cycle(self.rotation_pattern)

    def is_general(self, employee: Employee) -> bool:
        return employee.section.strip().upper() in self.general_sections


@dataclass
class MonthPlan:
    year: int
    month: int
    schedule: Schedule
    balance: balancer.BalanceResult
    scheduled_employees: List[int]
    preserved_leave: int


@dataclass
class GenerationStats:
    year: int
    month: int
    days: int
    employees: int
    count: int
    preserved_leave: int
    overrides: List[balancer.OverrideOperation] = field(default_factory=list)
    shortfalls: List[balancer.Shortfall] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "days": self.days,
            "employees": self.employees,
            "count": self.count,
            "preserved_leave": self.preserved_leave,
            "overrides": [op.to_dict() for op in self.overrides],
            "shortfalls": [item.to_dict() for item in self.shortfalls],
        }


class ScheduleGenerator:
    def __init__(self, repository: RosterRepository, rules: SchedulingRules | None = None) -> None:
        self.repository = repository
        self.rules = rules or SchedulingRules()

    # ------------------------------------------------------------------
    def _leave_markers(self, year: int, month: int) -> Dict[int, Set[date]]:
        leave: Dict[int, Set[date]] = defaultdict(set)
        for assignment in self.repository.list_assignments(year, month):
            if assignment.shift == LEAVE_CODE:
                leave[assignment.employee_id].add(assignment.date)
        return leave

    def _previous_month_history(self, year: int, month: int) -> Dict[int, List[str]]:
        prev_year, prev_month = shift_codes.previous_month(year, month)
        # An overridden weekly off is still a rest day for the rotation.
        overridden = {
            (item["employee_id"], item["date"]) for item in self.repository.list_overrides(prev_year, prev_month)
        }
        history: Dict[int, List[str]] = defaultdict(list)
        for assignment in self.repository.list_assignments(prev_year, prev_month):
            if (assignment.employee_id, assignment.date.isoformat()) in overridden:
                history[assignment.employee_id].append(OFF_CODE)
            else:
                history[assignment.employee_id].append(assignment.shift)
        return history

    def _general_sequence(self, days: List[date], employee: Employee, leave_days: Set[date]):
        for day in days:
            if day in leave_days:
                yield day, LEAVE_CODE
            elif shift_codes.weekday_code(day) == employee.weekly_off:
                yield day, OFF_CODE
            else:
                yield day, GENERAL_CODE

    def plan_month(self, year: int, month: int) -> MonthPlan:
        """Compute a full month from the current roster snapshot without writing it."""
        days = list(shift_codes.iter_month_days(year, month))
        cycle = self.rules.cycle
        leave = self._leave_markers(year, month)
        history = self._previous_month_history(year, month)

        schedule = Schedule(days=days)
        scheduled: List[int] = []
        rotating: List[int] = []
        for employee in self.repository.list_employees():
            if employee.is_admin:
                continue
            leave_days = leave.get(employee.id, set())
            if self.rules.is_general(employee):
                sequence = self._general_sequence(days, employee, leave_days)
            else:
                cursor = rotor.seed_cursor(
                    cycle,
                    history.get(employee.id, ()),
                    fallback_position=rotor.start_position(cycle, len(rotating)),
                )
                rotating.append(employee.id)
                sequence = rotor.sequence_for_month(days, employee.weekly_off, cursor, leave_days=leave_days)
            for day, code in sequence:
                schedule.set_code(employee.id, day, code)
            scheduled.append(employee.id)

        # Leave recorded for staff outside the rotation (admins) survives as well.
        for employee_id, leave_days in leave.items():
            if employee_id in scheduled:
                continue
            for day in leave_days:
                schedule.set_code(employee_id, day, LEAVE_CODE)

        balance = balancer.enforce_manpower_floor(
            schedule, rotating, minimum=self.rules.min_daily_manpower
        )
        return MonthPlan(
            year=year,
            month=month,
            schedule=schedule,
            balance=balance,
            scheduled_employees=scheduled,
            preserved_leave=sum(len(leave_days) for leave_days in leave.values()),
        )

    # ------------------------------------------------------------------
    def generate(self, actor: Actor, year: Any, month: Any) -> GenerationStats:
        """Regenerate the whole month; leave markers survive untouched."""
        if not actor.is_admin:
            raise AuthorizationError("Only administrators can generate schedules")
        year, month = validation.parse_year_month(year, month)
        logger.info(f"Starting schedule generation for {shift_codes.month_prefix(year, month)}")

        with self.repository.month_lock(year, month):
            plan = self.plan_month(year, month)
            cleared = self.repository.clear_assignments(year, month)
            logger.info(f"Cleared {cleared} existing assignments")
            written = 0
            for assignment in plan.schedule.iter_assignments():
                self.repository.upsert_assignment(assignment.employee_id, assignment.date, assignment.shift)
                written += 1
            self.repository.replace_overrides(year, month, plan.balance.operations)

        for op in plan.balance.operations:
            logger.info(
                f"Weekly off overridden for employee {op.employee_id} on {op.date.isoformat()} -> {op.shift}"
            )
        logger.info(
            f"Successfully generated {written} assignments for {len(plan.scheduled_employees)} employees "
            f"({len(plan.balance.operations)} overrides, {len(plan.balance.shortfalls)} shortfalls)"
        )
        return GenerationStats(
            year=year,
            month=month,
            days=len(plan.schedule),
            employees=len(plan.scheduled_employees),
            count=written,
            preserved_leave=plan.preserved_leave,
            overrides=list(plan.balance.operations),
            shortfalls=list(plan.balance.shortfalls),
        )


__all__ = ["ScheduleGenerator", "SchedulingRules", "GenerationStats", "MonthPlan"]
