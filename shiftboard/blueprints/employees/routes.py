from __future__ import annotations

from flask import Blueprint, jsonify

from ...services import employee_service
from ..common import current_auth, json_payload

bp = Blueprint("employees", __name__)


@bp.route("/api/employees", methods=["GET"])
def list_employees():
    employees = employee_service.list_employees(current_auth())
    return jsonify({"employees": [employee.to_dict() for employee in employees]})


@bp.route("/api/employees/<emp_id>", methods=["GET"])
def get_employee(emp_id: str):
    return jsonify(employee_service.get_employee(current_auth(), emp_id).to_dict())


@bp.route("/api/employees", methods=["POST"])
def create_employee():
    emp_id = employee_service.create_employee(current_auth(), json_payload())
    return jsonify({"id": emp_id}), 201


@bp.route("/api/employees/<emp_id>", methods=["PUT"])
def update_employee(emp_id: str):
    employee_service.update_employee(current_auth(), emp_id, json_payload())
    return jsonify({"updated": 1})


@bp.route("/api/employees/<emp_id>", methods=["DELETE"])
def delete_employee(emp_id: str):
    deleted = employee_service.delete_employee(current_auth(), emp_id)
    return jsonify({"deleted": int(deleted)})
