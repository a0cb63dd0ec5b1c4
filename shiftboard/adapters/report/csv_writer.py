"""CSV report helpers."""
from __future__ import annotations

import csv
from io import StringIO
from typing import Mapping, Sequence

from ...domain.models import Employee, HoursSummary

HEADER = ["employee_id", "employee", "hours", "shifts"]


def write_hours(summaries: Sequence[HoursSummary], employees: Mapping[str, Employee]) -> StringIO:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(HEADER)
    for summary in summaries:
        employee = employees.get(summary.employee_id)
        name = f"{employee.first_name} {employee.last_name}".strip() if employee else ""
        writer.writerow([summary.employee_id, name, f"{summary.total_hours:.2f}", summary.shift_count])
    buffer.seek(0)
    return buffer
