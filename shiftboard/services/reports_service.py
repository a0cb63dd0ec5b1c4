from __future__ import annotations

from datetime import date
from io import BytesIO, StringIO
from typing import Any, Dict, List, Tuple

from ..adapters.report import csv_writer, xlsx_writer
from ..dao import employees_dao
from ..domain.dates import InvalidInputError, format_date, format_month_year, get_month_range, get_week_range, parse_date
from ..domain.hours import aggregate_hours
from ..domain.models import HoursSummary
from . import shift_service
from .auth import AuthContext

WEEK = "week"
MONTH = "month"
PERIODS = (WEEK, MONTH)


def period_for(period: str, anchor: date | str) -> Tuple[date, date]:
    day = parse_date(anchor)
    if period == WEEK:
        return get_week_range(day)
    if period == MONTH:
        return get_month_range(day.year, day.month)
    raise InvalidInputError(f"Unknown period {period!r}, expected one of {', '.join(PERIODS)}")


def hours_summaries(auth: AuthContext, period: str, anchor: date | str) -> Tuple[date, date, List[HoursSummary]]:
    start, end = period_for(period, anchor)
    shifts = shift_service.get_shifts(auth, start, end)
    employees = employees_dao.list_employees()
    if not auth.is_admin:
        employees = [employee for employee in employees if employee.id == auth.employee_id]
    return start, end, aggregate_hours(shifts, employees, start, end)


def hours_report(auth: AuthContext, period: str, anchor: date | str) -> Dict[str, Any]:
    start, end, summaries = hours_summaries(auth, period, anchor)
    return {
        "period": period,
        "start": format_date(start),
        "end": format_date(end),
        "employees": [summary.to_dict() for summary in summaries],
        "total_hours": round(sum(summary.total_hours for summary in summaries), 2),
    }


def export_hours_csv(auth: AuthContext, period: str, anchor: date | str) -> Tuple[StringIO, str]:
    start, end, summaries = hours_summaries(auth, period, anchor)
    employees = {employee.id: employee for employee in employees_dao.list_employees()}
    return csv_writer.write_hours(summaries, employees), f"hours_{format_date(start)}_{format_date(end)}.csv"


def export_hours_xlsx(auth: AuthContext, period: str, anchor: date | str) -> Tuple[BytesIO, str]:
    start, end, summaries = hours_summaries(auth, period, anchor)
    employees = {employee.id: employee for employee in employees_dao.list_employees()}
    title = format_month_year(start) if period == MONTH else f"{format_date(start)} - {format_date(end)}"
    stream = xlsx_writer.write_hours(summaries, employees, title=title)
    return stream, f"hours_{format_date(start)}_{format_date(end)}.xlsx"
