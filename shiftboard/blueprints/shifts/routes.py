from __future__ import annotations

from flask import Blueprint, jsonify

from ...domain.dates import InvalidInputError
from ...services import shift_service
from ..common import bool_value, current_auth, date_arg, json_payload

bp = Blueprint("shifts", __name__)


@bp.route("/api/shifts", methods=["GET"])
def list_shifts():
    shifts = shift_service.get_shifts(current_auth(), date_arg("start"), date_arg("end"))
    return jsonify({"shifts": [shift.to_dict() for shift in shifts]})


@bp.route("/api/shifts/<shift_id>", methods=["GET"])
def get_shift(shift_id: str):
    return jsonify(shift_service.get_shift(current_auth(), shift_id).to_dict())


@bp.route("/api/shifts", methods=["POST"])
def create_shift():
    shift = shift_service.create_shift(current_auth(), json_payload())
    return jsonify(shift.to_dict()), 201


@bp.route("/api/shifts/<shift_id>", methods=["PUT"])
def update_shift(shift_id: str):
    shift = shift_service.update_shift(current_auth(), shift_id, json_payload())
    return jsonify(shift.to_dict())


@bp.route("/api/shifts/<shift_id>", methods=["DELETE"])
def delete_shift(shift_id: str):
    deleted = shift_service.delete_shift(current_auth(), shift_id)
    return jsonify({"deleted": int(deleted)})


@bp.route("/api/shifts/publish", methods=["POST"])
def publish_shifts():
    payload = json_payload()
    count = shift_service.publish_shifts(current_auth(), payload.get("start") or "", payload.get("end") or "")
    return jsonify({"published": count})


@bp.route("/api/shifts/assign", methods=["POST"])
def assign_template():
    payload = json_payload()
    try:
        year = int(payload["year"])
        month = int(payload["month"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError("year and month are required integers") from exc
    created = shift_service.assign_template(
        current_auth(),
        str(payload.get("template_id") or ""),
        str(payload.get("employee_id") or ""),
        year,
        month,
        weekdays=payload.get("weekdays"),
        extra_dates=payload.get("dates") or (),
        status=payload.get("status"),
        sunday_first=bool_value(payload.get("sunday_first")),
    )
    return jsonify({"created": len(created), "ids": created}), 201
