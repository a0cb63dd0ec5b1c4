from __future__ import annotations

import uuid
from typing import Any, List, Optional

from ..domain.models import TimeEntry
from . import db

_COLUMNS = "id, employee_id, date, check_in, check_out, total_hours, notes"


def get_entry(employee_id: str, date_str: str) -> Optional[TimeEntry]:
    row = db.query_one(
        f"SELECT {_COLUMNS} FROM time_tracking WHERE employee_id = ? AND date = ?",
        (employee_id, date_str),
    )
    return TimeEntry.from_row(row) if row else None


def list_entries(start_date: str, end_date: str, employee_id: Optional[str] = None) -> List[TimeEntry]:
    sql = f"SELECT {_COLUMNS} FROM time_tracking WHERE date >= ? AND date <= ?"
    params: list[Any] = [start_date, end_date]
    if employee_id:
        sql += " AND employee_id = ?"
        params.append(employee_id)
    sql += " ORDER BY date, employee_id"
    return [TimeEntry.from_row(row) for row in db.query_all(sql, params)]


def insert_entry(
    employee_id: str,
    date_str: str,
    *,
    check_in: Optional[str] = None,
    check_out: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    entry_id = uuid.uuid4().hex
    db.execute(
        "INSERT INTO time_tracking(id, employee_id, date, check_in, check_out, notes) VALUES (?, ?, ?, ?, ?, ?)",
        (entry_id, employee_id, date_str, check_in, check_out, notes),
    )
    return entry_id


def update_entry(entry: TimeEntry) -> int:
    return db.execute(
        "UPDATE time_tracking SET check_in = ?, check_out = ?, total_hours = ?, notes = ?, updated_at = datetime('now') "
        "WHERE id = ?",
        (entry.check_in, entry.check_out, entry.total_hours, entry.notes, entry.id),
    )
