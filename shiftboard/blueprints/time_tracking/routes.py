from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request

from ...domain.dates import get_month_range
from ...services import time_tracking_service
from ..common import current_auth, date_arg

bp = Blueprint("time_tracking", __name__)


def _notes() -> str | None:
    payload = request.get_json(silent=True) or {}
    return payload.get("notes") if isinstance(payload, dict) else None


@bp.route("/api/time-tracking/<employee_id>/check-in", methods=["POST"])
def check_in(employee_id: str):
    entry = time_tracking_service.check_in(current_auth(), employee_id, _notes())
    return jsonify(entry.to_dict())


@bp.route("/api/time-tracking/<employee_id>/check-out", methods=["POST"])
def check_out(employee_id: str):
    entry = time_tracking_service.check_out(current_auth(), employee_id, _notes())
    return jsonify(entry.to_dict())


@bp.route("/api/time-tracking/<employee_id>/today", methods=["GET"])
def today_entry(employee_id: str):
    entry = time_tracking_service.get_entry(current_auth(), employee_id, date.today())
    return jsonify({"entry": entry.to_dict() if entry else None})


@bp.route("/api/time-tracking/<employee_id>", methods=["GET"])
def list_entries(employee_id: str):
    first, last = get_month_range(date.today().year, date.today().month)
    entries = time_tracking_service.get_entries(
        current_auth(), employee_id, date_arg("start", first), date_arg("end", last)
    )
    return jsonify({"entries": [entry.to_dict() for entry in entries]})


@bp.route("/api/time-tracking/<employee_id>/comparison", methods=["GET"])
def comparison(employee_id: str):
    first, last = get_month_range(date.today().year, date.today().month)
    result = time_tracking_service.hours_comparison(
        current_auth(), employee_id, date_arg("start", first), date_arg("end", last)
    )
    return jsonify(result)
