from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..dao import employees_dao
from ..domain.dates import InvalidInputError
from ..domain.models import Employee
from . import events
from .auth import AuthContext, require_admin
from .shift_service import EmployeeNotFoundError

TABLE = "employees"
_FIELDS = ("first_name", "last_name", "email", "phone", "position", "color", "user_id")


def _clean(payload: Mapping[str, Any]) -> Dict[str, Any]:
    data = {key: payload.get(key) for key in _FIELDS}
    data["first_name"] = (data.get("first_name") or "").strip()
    if not data["first_name"]:
        raise InvalidInputError("first_name is required")
    if payload.get("id"):
        data["id"] = str(payload["id"])
    return data


def _visible(auth: AuthContext, employee: Employee) -> Employee:
    # Colleagues are visible to everyone for the shared calendar, contact data is not.
    if auth.can_read_employee(employee.id):
        return employee
    return Employee(id=employee.id, first_name=employee.first_name, last_name=employee.last_name, color=employee.color)


def list_employees(auth: AuthContext) -> List[Employee]:
    return [_visible(auth, employee) for employee in employees_dao.list_employees()]


def get_employee(auth: AuthContext, emp_id: str) -> Employee:
    employee = employees_dao.get_employee(emp_id)
    if employee is None:
        raise EmployeeNotFoundError(f"Employee {emp_id} not found")
    return _visible(auth, employee)


def create_employee(auth: AuthContext, payload: Mapping[str, Any]) -> str:
    require_admin(auth, "create employees")
    emp_id = employees_dao.create_employee(_clean(payload))
    events.notify(TABLE, events.INSERT, emp_id)
    return emp_id


def update_employee(auth: AuthContext, emp_id: str, payload: Mapping[str, Any]) -> bool:
    require_admin(auth, "edit employees")
    updated = employees_dao.update_employee(emp_id, _clean(payload))
    if not updated:
        raise EmployeeNotFoundError(f"Employee {emp_id} not found")
    events.notify(TABLE, events.UPDATE, emp_id)
    return True


def delete_employee(auth: AuthContext, emp_id: str) -> bool:
    require_admin(auth, "delete employees")
    deleted = employees_dao.delete_employee(emp_id)
    if deleted:
        events.notify(TABLE, events.DELETE, emp_id)
        events.notify("shifts", events.DELETE, None, employee_id=emp_id)
    return bool(deleted)
