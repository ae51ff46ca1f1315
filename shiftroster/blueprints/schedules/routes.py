from __future__ import annotations

from flask import Blueprint, jsonify, request

from ...dao.db import get_generator, get_repository
from ...services import schedule_service, validation
from ..guards import admin_required, current_actor, json_payload, login_required

bp = Blueprint("schedules", __name__, url_prefix="/api/schedules")


@bp.get("")
@login_required
def list_schedules():
    assignments = schedule_service.list_assignments(
        get_repository(),
        request.args.get("year"),
        request.args.get("month"),
    )
    return jsonify([assignment.to_dict() for assignment in assignments])


@bp.get("/matrix")
@login_required
def month_matrix():
    return jsonify(
        schedule_service.month_matrix(get_repository(), request.args.get("year"), request.args.get("month"))
    )


@bp.post("/update")
@login_required
def update_schedule():
    payload = json_payload()
    assignment = schedule_service.update_schedule(
        get_repository(),
        current_actor(),
        payload.get("employee_id"),
        payload.get("date"),
        payload.get("shift"),
    )
    return jsonify(assignment.to_dict())


@bp.post("/leave")
@login_required
def record_leave():
    payload = json_payload()
    actor = current_actor()
    assignment = schedule_service.record_leave(
        get_repository(),
        actor,
        payload.get("employee_id", actor.employee_id),
        payload.get("date"),
    )
    return jsonify(assignment.to_dict())


@bp.post("/auto")
@admin_required
def auto_schedule():
    payload = json_payload()
    stats = get_generator().generate(current_actor(), payload.get("year"), payload.get("month"))
    return jsonify({"message": "Schedule generated successfully", **stats.to_dict()})


@bp.get("/overrides")
@admin_required
def list_overrides():
    year, month = validation.parse_year_month(request.args.get("year"), request.args.get("month"))
    return jsonify({"overrides": get_repository().list_overrides(year, month)})
