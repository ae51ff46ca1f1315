from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from ...dao.db import get_repository, get_rules
from ...services import reports_service
from ..guards import login_required

bp = Blueprint("reports", __name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@bp.route("/api/reports/coverage")
@login_required
def coverage_api():
    report = reports_service.coverage_report(
        get_repository(),
        request.args.get("year"),
        request.args.get("month"),
        minimum=get_rules().min_daily_manpower,
    )
    return jsonify(report)


@bp.route("/api/export/xlsx")
@login_required
def export_xlsx():
    stream, filename = reports_service.export_xlsx(
        get_repository(),
        request.args.get("year"),
        request.args.get("month"),
        minimum=get_rules().min_daily_manpower,
    )
    return Response(
        stream.getvalue(),
        mimetype=XLSX_MIMETYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@bp.route("/api/export/csv")
@login_required
def export_csv():
    buffer, filename = reports_service.export_csv(
        get_repository(), request.args.get("year"), request.args.get("month")
    )
    return Response(
        buffer.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
