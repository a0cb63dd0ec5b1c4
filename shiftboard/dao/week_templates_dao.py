"""Data access for saved weeks and their shifts."""

from __future__ import annotations

import sqlite3
import uuid
from typing import List, Optional, Sequence

from ..domain.models import WeekTemplate, WeekTemplateShift
from . import db


def list_templates() -> List[WeekTemplate]:
    rows = db.query_all(
        "SELECT id, name, description, start_date, end_date FROM week_templates ORDER BY created_at DESC, name"
    )
    return [WeekTemplate.from_row(row) for row in rows]


def get_template(template_id: str) -> Optional[WeekTemplate]:
    row = db.query_one(
        "SELECT id, name, description, start_date, end_date FROM week_templates WHERE id = ?",
        (template_id,),
    )
    return WeekTemplate.from_row(row) if row else None


def list_template_shifts(template_id: str) -> List[WeekTemplateShift]:
    rows = db.query_all(
        "SELECT id, template_id, employee_id, date, start_time, end_time, duration, notes "
        "FROM week_template_shifts WHERE template_id = ? ORDER BY date, start_time",
        (template_id,),
    )
    return [WeekTemplateShift.from_row(row) for row in rows]


def create_template(template: WeekTemplate, shifts: Sequence[WeekTemplateShift]) -> str:
    """Insert the template and its shifts in one transaction."""
    template_id = template.id or uuid.uuid4().hex
    conn = db.get_db()
    try:
        with conn:
            conn.execute(
                "INSERT INTO week_templates(id, name, description, start_date, end_date) VALUES (?, ?, ?, ?, ?)",
                (template_id, template.name, template.description or None, template.start_date, template.end_date),
            )
            conn.executemany(
                "INSERT INTO week_template_shifts(id, template_id, employee_id, date, start_time, end_time, duration, notes) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        uuid.uuid4().hex,
                        template_id,
                        shift.employee_id,
                        shift.date,
                        shift.start_time,
                        shift.end_time,
                        shift.duration,
                        shift.notes,
                    )
                    for shift in shifts
                ],
            )
    except sqlite3.Error as exc:
        raise db.DatabaseError(str(exc)) from exc
    return template_id


def delete_template(template_id: str) -> int:
    return db.execute("DELETE FROM week_templates WHERE id = ?", (template_id,))
