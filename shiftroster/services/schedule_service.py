"""Single-day schedule updates and month listings."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..adapters.repository import RosterRepository
from ..domain import shift_codes
from ..domain.models import Actor, Assignment
from ..domain.schedule import Schedule
from ..domain.shift_codes import LEAVE_CODE
from ..errors import AuthorizationError, NotFoundError
from . import validation

logger = logging.getLogger(__name__)


def update_schedule(repository: RosterRepository, actor: Actor, employee_id: Any, day: Any, shift: Any) -> Assignment:
    """Set one employee's shift for one day.

    Employees may only mark their own days as leave; administrators may set
    any code for anyone. The manpower floor is not re-checked here.
    """
    employee_id = validation.parse_employee_id(employee_id)
    parsed_day = validation.parse_date(day)
    shift = validation.parse_shift(shift)

    if not actor.is_admin:
        if employee_id != actor.employee_id:
            raise AuthorizationError("Can only update own schedule")
        if shift != LEAVE_CODE:
            raise AuthorizationError("Employees can only mark leaves (L)")

    if repository.get_employee(employee_id) is None:
        raise NotFoundError(f"Employee {employee_id} does not exist")

    assignment = repository.upsert_assignment(employee_id, parsed_day, shift)
    logger.info(
        f"Employee {actor.employee_id} set {shift} for employee {employee_id} on {parsed_day.isoformat()}"
    )
    return assignment


def record_leave(repository: RosterRepository, actor: Actor, employee_id: Any, day: Any) -> Assignment:
    return update_schedule(repository, actor, employee_id, day, LEAVE_CODE)


def list_month(repository: RosterRepository, year: Any, month: Any) -> List[Assignment]:
    year, month = validation.parse_year_month(year, month)
    return repository.list_assignments(year, month)


def list_assignments(repository: RosterRepository, year: Optional[Any] = None, month: Optional[Any] = None) -> List[Assignment]:
    """Month listing when both parts are given, every assignment otherwise."""
    if year in (None, "") or month in (None, ""):
        return repository.list_assignments()
    return list_month(repository, year, month)


def load_month_schedule(repository: RosterRepository, year: int, month: int) -> Schedule:
    return Schedule(
        repository.list_assignments(year, month),
        days=shift_codes.iter_month_days(year, month),
    )


def month_matrix(repository: RosterRepository, year: Any, month: Any) -> Dict[str, Any]:
    """Grid view of a month: employee id -> ISO day -> code."""
    year, month = validation.parse_year_month(year, month)
    schedule = load_month_schedule(repository, year, month)
    matrix: Dict[int, Dict[str, str]] = {}
    for assignment in schedule.iter_assignments():
        matrix.setdefault(assignment.employee_id, {})[assignment.date.isoformat()] = assignment.shift
    return {
        "month": shift_codes.month_prefix(year, month),
        "days": [day.isoformat() for day in schedule],
        "employees": [employee.to_public_dict() for employee in repository.list_employees()],
        "matrix": matrix,
    }
