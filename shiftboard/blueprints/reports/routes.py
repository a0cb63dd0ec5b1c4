from __future__ import annotations

from datetime import date

from flask import Blueprint, Response, jsonify, request

from ...services import reports_service
from ..common import current_auth, date_arg

bp = Blueprint("reports", __name__)


def _params() -> tuple[str, date]:
    return request.args.get("period") or reports_service.MONTH, date_arg("date", date.today())


@bp.route("/api/reports/hours")
def hours_api():
    period, anchor = _params()
    return jsonify(reports_service.hours_report(current_auth(), period, anchor))


@bp.route("/api/reports/hours.csv")
def hours_csv():
    period, anchor = _params()
    buffer, filename = reports_service.export_hours_csv(current_auth(), period, anchor)
    return Response(
        buffer.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@bp.route("/api/reports/hours.xlsx")
def hours_xlsx():
    period, anchor = _params()
    stream, filename = reports_service.export_hours_xlsx(current_auth(), period, anchor)
    return (stream.getvalue(), 200, {
        "Content-Type": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "Content-Disposition": f"attachment; filename={filename}",
    })
