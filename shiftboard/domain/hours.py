"""Worked-hours aggregation for reports."""
from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Sequence, Union

from .dates import format_date, get_month_range, get_week_range, iter_days, parse_date
from .models import DailyHours, Employee, HoursSummary, Shift, TimeEntry

EmployeeRef = Union[Employee, str]


def _employee_id(ref: EmployeeRef) -> str:
    return ref.id if isinstance(ref, Employee) else str(ref)


def shifts_in_period(shifts: Iterable[Shift], period_start: date | str, period_end: date | str) -> List[Shift]:
    # YYYY-MM-DD is fixed width, so string order is date order.
    start = format_date(parse_date(period_start))
    end = format_date(parse_date(period_end))
    return [shift for shift in shifts if start <= shift.date <= end]


def aggregate_hours(
    shifts: Iterable[Shift],
    employees: Sequence[EmployeeRef],
    period_start: date | str,
    period_end: date | str,
) -> List[HoursSummary]:
    """Total hours per employee, highest first.

    Every employee appears, with zero hours if they have no shift in the
    period. Ties keep the order of *employees*.
    """

    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for shift in shifts_in_period(shifts, period_start, period_end):
        totals[shift.employee_id] += shift.duration
        counts[shift.employee_id] += 1

    summaries = [
        HoursSummary(employee_id=emp_id, total_hours=round(totals.get(emp_id, 0.0), 2), shift_count=counts.get(emp_id, 0))
        for emp_id in (_employee_id(ref) for ref in employees)
    ]
    return sorted(summaries, key=lambda summary: summary.total_hours, reverse=True)


def weekly_hours(shifts: Iterable[Shift], employees: Sequence[EmployeeRef], day: date | str) -> List[HoursSummary]:
    start, end = get_week_range(day)
    return aggregate_hours(shifts, employees, start, end)


def monthly_hours(shifts: Iterable[Shift], employees: Sequence[EmployeeRef], year: int, month: int) -> List[HoursSummary]:
    start, end = get_month_range(year, month)
    return aggregate_hours(shifts, employees, start, end)


def compare_hours(
    shifts: Iterable[Shift],
    entries: Iterable[TimeEntry],
    employee_id: str,
    period_start: date | str,
    period_end: date | str,
) -> Dict[str, object]:
    """Scheduled versus recorded hours for one employee, day by day."""

    start = parse_date(period_start)
    end = parse_date(period_end)
    scheduled: Dict[str, float] = defaultdict(float)
    for shift in shifts_in_period(shifts, start, end):
        if shift.employee_id == employee_id:
            scheduled[shift.date] += shift.duration
    actual: Dict[str, float] = {
        entry.date: entry.total_hours
        for entry in entries
        if entry.employee_id == employee_id and entry.total_hours is not None
    }

    days = [
        DailyHours(
            date=key,
            scheduled_hours=round(scheduled.get(key, 0.0), 2),
            actual_hours=actual.get(key),
        )
        for key in (format_date(day) for day in iter_days(start, end))
        if key in scheduled or key in actual
    ]
    scheduled_total = round(sum(day.scheduled_hours for day in days), 2)
    recorded = [day.actual_hours for day in days if day.actual_hours is not None]
    actual_total = round(sum(recorded), 2) if recorded else None
    return {
        "employee_id": employee_id,
        "days": days,
        "scheduled_hours": scheduled_total,
        "actual_hours": actual_total,
        "difference": round(actual_total - scheduled_total, 2) if actual_total is not None else None,
    }
