from __future__ import annotations

from flask import Blueprint, jsonify

from ...dao.db import get_repository
from ..guards import login_required

bp = Blueprint("employees", __name__)


@bp.route("/api/employees", methods=["GET"])
@login_required
def list_employees():
    return jsonify([employee.to_public_dict() for employee in get_repository().list_employees()])
