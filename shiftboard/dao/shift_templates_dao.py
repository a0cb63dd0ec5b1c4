from __future__ import annotations

import uuid
from typing import List, Optional, Sequence

from ..domain.models import ShiftTemplate
from . import db

_COLUMNS = "id, name, start_time, end_time, duration, days_of_week"


def _encode_days(days: Optional[Sequence[int]]) -> Optional[str]:
    if days is None:
        return None
    return ",".join(str(day) for day in days)


def list_templates() -> List[ShiftTemplate]:
    rows = db.query_all(f"SELECT {_COLUMNS} FROM shift_templates ORDER BY start_time, name")
    return [ShiftTemplate.from_row(row) for row in rows]


def get_template(template_id: str) -> Optional[ShiftTemplate]:
    row = db.query_one(f"SELECT {_COLUMNS} FROM shift_templates WHERE id = ?", (template_id,))
    return ShiftTemplate.from_row(row) if row else None


def create_template(template: ShiftTemplate) -> str:
    template_id = template.id or uuid.uuid4().hex
    db.execute(
        "INSERT INTO shift_templates(id, name, start_time, end_time, duration, days_of_week) VALUES (?, ?, ?, ?, ?, ?)",
        (
            template_id,
            template.name,
            template.start_time,
            template.end_time,
            template.duration,
            _encode_days(template.days_of_week),
        ),
    )
    return template_id


def update_template(template: ShiftTemplate) -> int:
    return db.execute(
        "UPDATE shift_templates SET name = ?, start_time = ?, end_time = ?, duration = ?, days_of_week = ? WHERE id = ?",
        (
            template.name,
            template.start_time,
            template.end_time,
            template.duration,
            _encode_days(template.days_of_week),
            template.id,
        ),
    )


def delete_template(template_id: str) -> int:
    return db.execute("DELETE FROM shift_templates WHERE id = ?", (template_id,))
