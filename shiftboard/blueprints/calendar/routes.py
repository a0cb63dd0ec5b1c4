from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Sequence

from flask import Blueprint, jsonify

from ...domain.dates import DAY_NAMES, format_date, format_month_year, format_shift_display, weekday_index
from ...domain.models import CalendarDay
from ...services import calendar_service, employee_service
from ...services.auth import AuthContext
from ..common import current_auth, date_arg, int_arg

bp = Blueprint("calendar", __name__)


def _days_payload(auth: AuthContext, days: Sequence[CalendarDay]) -> List[Dict[str, Any]]:
    """Serialise grid days with weekday names and "First L 09:00-17:00" shift labels."""
    employees = {employee.id: employee for employee in employee_service.list_employees(auth)}
    payload = []
    for day in days:
        item = day.to_dict()
        item["day_name"] = DAY_NAMES[weekday_index(day.date)]
        for shift_item, shift in zip(item["shifts"], day.shifts):
            employee = employees.get(shift.employee_id)
            if employee is None:
                shift_item["label"] = f"{shift.start_time}-{shift.end_time}"
            else:
                shift_item["label"] = format_shift_display(
                    employee.first_name, employee.last_name, shift.start_time, shift.end_time
                )
        payload.append(item)
    return payload


@bp.route("/api/calendar/month")
def month_api():
    today = date.today()
    year = int_arg("year", today.year)
    month = int_arg("month", today.month)
    auth = current_auth()
    days = calendar_service.month_view(auth, year, month)
    return jsonify({
        "year": year,
        "month": month,
        "title": format_month_year(date(year, month, 1)),
        "days": _days_payload(auth, days),
    })


@bp.route("/api/calendar/week")
def week_api():
    day = date_arg("date", date.today())
    auth = current_auth()
    days = calendar_service.week_view(auth, day)
    return jsonify({
        "start": format_date(days[0].date),
        "end": format_date(days[-1].date),
        "days": _days_payload(auth, days),
    })


@bp.route("/api/calendar/days")
def days_api():
    anchor = date_arg("anchor", date.today())
    auth = current_auth()
    days = calendar_service.day_window(auth, anchor, int_arg("before", 7), int_arg("after", 14))
    return jsonify({"anchor": format_date(anchor), "days": _days_payload(auth, days)})
