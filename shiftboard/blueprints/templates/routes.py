from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ...domain.dates import InvalidInputError
from ...services import template_service
from ..common import bool_value, current_auth, json_payload

bp = Blueprint("templates", __name__)


@bp.route("/api/shift-templates", methods=["GET"])
def list_shift_templates():
    templates = template_service.list_shift_templates()
    return jsonify({"templates": [template.to_dict() for template in templates]})


@bp.route("/api/shift-templates", methods=["POST"])
def create_shift_template():
    template = template_service.create_shift_template(current_auth(), json_payload())
    return jsonify(template.to_dict()), 201


@bp.route("/api/shift-templates/<template_id>", methods=["PUT"])
def update_shift_template(template_id: str):
    template = template_service.update_shift_template(current_auth(), template_id, json_payload())
    return jsonify(template.to_dict())


@bp.route("/api/shift-templates/<template_id>", methods=["DELETE"])
def delete_shift_template(template_id: str):
    deleted = template_service.delete_shift_template(current_auth(), template_id)
    return jsonify({"deleted": int(deleted)})


@bp.route("/api/week-templates", methods=["GET"])
def list_week_templates():
    return jsonify({"templates": [template.to_dict() for template in template_service.get_templates()]})


@bp.route("/api/week-templates/<template_id>", methods=["GET"])
def get_week_template(template_id: str):
    template = template_service.get_template(template_id)
    shifts = template_service.get_template_shifts(template_id)
    return jsonify({**template.to_dict(), "shifts": [shift.to_dict() for shift in shifts]})


@bp.route("/api/week-templates", methods=["POST"])
def create_week_template():
    """Create from an explicit ``shifts`` list, or capture the stored week
    ``start_date..end_date`` when no list is given."""
    payload = json_payload()
    auth = current_auth()
    name = payload.get("name") or ""
    description = payload.get("description") or ""
    start = payload.get("start_date") or ""
    end = payload.get("end_date") or ""
    if "shifts" in payload:
        if not isinstance(payload["shifts"], list):
            raise InvalidInputError("shifts must be a list")
        template = template_service.create_template(auth, name, start, end, payload["shifts"], description)
        count = len(payload["shifts"])
    else:
        template, shifts = template_service.capture_template(auth, name, start, end, description)
        count = len(shifts)
    return jsonify({**template.to_dict(), "shift_count": count}), 201


@bp.route("/api/week-templates/<template_id>", methods=["DELETE"])
def delete_week_template(template_id: str):
    deleted = template_service.delete_template(current_auth(), template_id)
    return jsonify({"deleted": int(deleted)})


@bp.route("/api/week-templates/<template_id>/apply", methods=["POST"])
def apply_week_template(template_id: str):
    payload = json_payload()
    snap = bool_value(payload.get("snap"), default=bool(current_app.config.get("WEEK_TEMPLATE_SNAP", False)))
    result = template_service.apply_template(
        current_auth(),
        template_id,
        payload.get("target_date") or "",
        snap=snap,
    )
    return jsonify(result.to_dict()), 201 if result.ok else 207
