"""Data access for scheduled shifts."""

from __future__ import annotations

import sqlite3
import uuid
from typing import Any, List, Optional, Sequence

from ..domain.models import Shift, ShiftRequest, ShiftStatus
from . import db

_COLUMNS = "id, employee_id, date, start_time, end_time, duration, notes, status"
_INSERT = (
    "INSERT INTO shifts(id, employee_id, date, start_time, end_time, duration, notes, status) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)


def list_shifts(
    start_date: str,
    end_date: str,
    employee_id: Optional[str] = None,
    status: Optional[ShiftStatus] = None,
) -> List[Shift]:
    sql = f"SELECT {_COLUMNS} FROM shifts WHERE date >= ? AND date <= ?"
    params: list[Any] = [start_date, end_date]
    if employee_id:
        sql += " AND employee_id = ?"
        params.append(employee_id)
    if status is not None:
        sql += " AND status = ?"
        params.append(status.value)
    sql += " ORDER BY date, start_time"
    return [Shift.from_row(row) for row in db.query_all(sql, params)]


def get_shift(shift_id: str) -> Optional[Shift]:
    row = db.query_one(f"SELECT {_COLUMNS} FROM shifts WHERE id = ?", (shift_id,))
    return Shift.from_row(row) if row else None


def _insert_params(shift_id: str, request: ShiftRequest) -> tuple[Any, ...]:
    return (
        shift_id,
        request.employee_id,
        request.date,
        request.start_time,
        request.end_time,
        request.duration,
        request.notes,
        request.status.value,
    )


def create_shift(request: ShiftRequest) -> str:
    shift_id = uuid.uuid4().hex
    db.execute(_INSERT, _insert_params(shift_id, request))
    return shift_id


def create_shifts(requests: Sequence[ShiftRequest]) -> List[str]:
    """Insert every shift in one transaction; nothing is stored if one fails."""
    rows = [(uuid.uuid4().hex, request) for request in requests]
    conn = db.get_db()
    try:
        with conn:
            conn.executemany(_INSERT, [_insert_params(shift_id, request) for shift_id, request in rows])
    except sqlite3.Error as exc:
        raise db.DatabaseError(str(exc)) from exc
    return [shift_id for shift_id, _ in rows]


def update_shift(shift_id: str, request: ShiftRequest) -> int:
    return db.execute(
        "UPDATE shifts SET employee_id = ?, date = ?, start_time = ?, end_time = ?, duration = ?, notes = ?, "
        "status = ?, updated_at = datetime('now') WHERE id = ?",
        (
            request.employee_id,
            request.date,
            request.start_time,
            request.end_time,
            request.duration,
            request.notes,
            request.status.value,
            shift_id,
        ),
    )


def delete_shift(shift_id: str) -> int:
    return db.execute("DELETE FROM shifts WHERE id = ?", (shift_id,))


def publish_shifts(start_date: str, end_date: str) -> int:
    return db.execute(
        "UPDATE shifts SET status = ?, updated_at = datetime('now') WHERE date >= ? AND date <= ? AND status = ?",
        (ShiftStatus.PUBLISHED.value, start_date, end_date, ShiftStatus.DRAFT.value),
    )
