from __future__ import annotations

from flask import Blueprint, jsonify, session

from ...dao.db import get_repository
from ...services import auth_service
from ..guards import SESSION_KEY, current_employee, json_payload, login_required

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/login")
def login():
    payload = json_payload()
    employee = auth_service.authenticate(
        get_repository(),
        str(payload.get("emp_no") or ""),
        str(payload.get("password") or ""),
    )
    session.clear()
    session[SESSION_KEY] = employee.id
    session.permanent = True
    return jsonify(employee.to_public_dict())


@bp.get("/me")
@login_required
def me():
    return jsonify(current_employee().to_public_dict())


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"message": "Logged out"})
