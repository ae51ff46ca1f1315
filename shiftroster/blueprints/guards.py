"""Session helpers turning the logged-in employee into an explicit Actor."""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar, cast

from flask import g, request, session

from ..dao.db import get_repository
from ..domain.models import Actor, Employee
from ..errors import AuthenticationError, AuthorizationError, ValidationError

SESSION_KEY = "employee_id"

F = TypeVar("F", bound=Callable)


def current_employee() -> Optional[Employee]:
    if "current_employee" not in g:
        employee_id = session.get(SESSION_KEY)
        g.current_employee = get_repository().get_employee(int(employee_id)) if employee_id else None
    return g.current_employee


def current_actor() -> Actor:
    employee = current_employee()
    if employee is None:
        raise AuthenticationError("Unauthorized")
    return Actor.for_employee(employee)


def login_required(view: F) -> F:
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_actor()
        return view(*args, **kwargs)

    return cast(F, wrapper)


def admin_required(view: F) -> F:
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_actor().is_admin:
            raise AuthorizationError("Admins only")
        return view(*args, **kwargs)

    return cast(F, wrapper)


def json_payload() -> Dict[str, Any]:
    """Request body as a mapping; an empty or unparsable body counts as ``{}``."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object", field="body")
    return payload
