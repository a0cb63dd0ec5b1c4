"""Excel report writer."""
from __future__ import annotations

from io import BytesIO
from typing import Mapping, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from ...domain.models import Employee, HoursSummary

HEADER_FONT = Font(bold=True)
RIGHT = Alignment(horizontal="right")


def write_hours(
    summaries: Sequence[HoursSummary],
    employees: Mapping[str, Employee],
    *,
    title: str | None = None,
) -> BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = (title or "Ore")[:31]

    for col, label in enumerate(("Dipendente", "Ore", "Turni"), start=1):
        ws.cell(row=1, column=col, value=label).font = HEADER_FONT

    for row_idx, summary in enumerate(summaries, start=2):
        employee = employees.get(summary.employee_id)
        name = f"{employee.first_name} {employee.last_name}".strip() if employee else summary.employee_id
        ws.cell(row=row_idx, column=1, value=name)
        hours = ws.cell(row=row_idx, column=2, value=summary.total_hours)
        hours.number_format = "0.00"
        hours.alignment = RIGHT
        ws.cell(row=row_idx, column=3, value=summary.shift_count).alignment = RIGHT

    total_row = len(summaries) + 2
    ws.cell(row=total_row, column=1, value="Totale").font = HEADER_FONT
    total = ws.cell(row=total_row, column=2, value=round(sum(s.total_hours for s in summaries), 2))
    total.font = HEADER_FONT
    total.number_format = "0.00"
    ws.column_dimensions["A"].width = 28

    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)
    return stream
