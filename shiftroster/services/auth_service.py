"""Credential checks for employee logins."""
from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..adapters.repository import RosterRepository
from ..domain.models import Employee
from ..errors import AuthenticationError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Incorrect employee number or password."


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def authenticate(repository: RosterRepository, emp_no: str, password: str) -> Employee:
    employee = repository.get_employee_by_number(emp_no) if emp_no else None
    if employee is None or not employee.password_hash or not check_password_hash(employee.password_hash, password or ""):
        logger.warning(f"Failed login for employee number {emp_no!r}")
        raise AuthenticationError(INVALID_CREDENTIALS)
    logger.info(f"Employee {employee.id} logged in")
    return employee
