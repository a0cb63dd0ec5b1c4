"""Request helpers shared by the API blueprints."""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, Optional

from flask import request

from ..dao import employees_dao
from ..domain.dates import InvalidInputError, parse_date
from ..services import auth as auth_service


def current_auth() -> auth_service.AuthContext:
    auth = auth_service.from_headers(request.headers)
    if auth.user_id and auth.employee_id is None:
        # Fall back to the employee record linked to the signed-in user.
        employee = employees_dao.get_employee_by_user(auth.user_id)
        if employee is not None:
            auth = replace(auth, employee_id=employee.id)
    return auth


def json_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return payload


def date_arg(name: str, default: Optional[date] = None) -> date:
    value = request.args.get(name)
    if not value:
        if default is None:
            raise InvalidInputError(f"Query parameter {name!r} is required")
        return default
    return parse_date(value)


def int_arg(name: str, default: Optional[int] = None) -> int:
    value = request.args.get(name)
    if value is None or value == "":
        if default is None:
            raise InvalidInputError(f"Query parameter {name!r} is required")
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidInputError(f"Query parameter {name!r} must be an integer") from exc


def bool_value(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in {"1", "true", "yes", "on"}
