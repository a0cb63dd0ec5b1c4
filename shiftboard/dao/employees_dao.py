from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from ..domain.models import Employee
from . import db

_COLUMNS = "id, first_name, last_name, email, phone, position, color, user_id"


def list_employees() -> List[Employee]:
    rows = db.query_all(f"SELECT {_COLUMNS} FROM employees ORDER BY first_name, last_name, created_at")
    return [Employee.from_row(row) for row in rows]


def get_employee(emp_id: str) -> Optional[Employee]:
    row = db.query_one(f"SELECT {_COLUMNS} FROM employees WHERE id = ?", (emp_id,))
    return Employee.from_row(row) if row else None


def get_employee_by_user(user_id: str) -> Optional[Employee]:
    row = db.query_one(f"SELECT {_COLUMNS} FROM employees WHERE user_id = ?", (user_id,))
    return Employee.from_row(row) if row else None


def create_employee(payload: Dict[str, Any]) -> str:
    emp_id = str(payload.get("id") or uuid.uuid4().hex)
    db.execute(
        "INSERT INTO employees(id, first_name, last_name, email, phone, position, color, user_id) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            emp_id,
            payload["first_name"],
            payload.get("last_name") or "",
            payload.get("email"),
            payload.get("phone"),
            payload.get("position"),
            payload.get("color"),
            payload.get("user_id"),
        ),
    )
    return emp_id


def update_employee(emp_id: str, payload: Dict[str, Any]) -> int:
    return db.execute(
        "UPDATE employees SET first_name = ?, last_name = ?, email = ?, phone = ?, position = ?, color = ?, user_id = ? "
        "WHERE id = ?",
        (
            payload["first_name"],
            payload.get("last_name") or "",
            payload.get("email"),
            payload.get("phone"),
            payload.get("position"),
            payload.get("color"),
            payload.get("user_id"),
            emp_id,
        ),
    )


def delete_employee(emp_id: str) -> int:
    # Shifts, template shifts and time entries go with it (ON DELETE CASCADE).
    return db.execute("DELETE FROM employees WHERE id = ?", (emp_id,))
