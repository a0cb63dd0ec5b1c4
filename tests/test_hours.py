from __future__ import annotations

from datetime import date

from shiftboard.domain.hours import aggregate_hours, compare_hours, monthly_hours, weekly_hours
from shiftboard.domain.models import Employee, HoursSummary, Shift, TimeEntry


def make_shift(employee_id: str, day: str, duration: float) -> Shift:
    return Shift(
        id=f"{employee_id}-{day}-{duration}",
        employee_id=employee_id,
        date=day,
        start_time="09:00",
        end_time="17:00",
        duration=duration,
    )


def test_hours_are_summed_and_sorted():
    shifts = [make_shift("A", "2024-01-02", 5), make_shift("A", "2024-01-03", 3), make_shift("B", "2024-01-02", 2)]
    summaries = aggregate_hours(shifts, ["B", "A"], "2024-01-01", "2024-01-07")
    assert summaries == [HoursSummary("A", 8.0, 2), HoursSummary("B", 2.0, 1)]


def test_employees_without_shifts_report_zero():
    employees = [Employee(id="A", first_name="Anna"), Employee(id="C", first_name="Carlo")]
    summaries = aggregate_hours([make_shift("A", "2024-01-02", 4)], employees, "2024-01-01", "2024-01-31")
    assert summaries[-1] == HoursSummary("C", 0.0, 0)


def test_ties_keep_employee_order():
    shifts = [make_shift("X", "2024-01-02", 4), make_shift("Y", "2024-01-02", 4)]
    assert [s.employee_id for s in aggregate_hours(shifts, ["Y", "X"], "2024-01-01", "2024-01-31")] == ["Y", "X"]
    assert [s.employee_id for s in aggregate_hours(shifts, ["X", "Y"], "2024-01-01", "2024-01-31")] == ["X", "Y"]


def test_period_bounds_are_inclusive():
    shifts = [
        make_shift("A", "2023-12-31", 1),
        make_shift("A", "2024-01-01", 2),
        make_shift("A", "2024-01-31", 3),
        make_shift("A", "2024-02-01", 4),
    ]
    assert monthly_hours(shifts, ["A"], 2024, 1) == [HoursSummary("A", 5.0, 2)]


def test_totals_are_rounded():
    shifts = [make_shift("A", "2024-01-02", 0.1), make_shift("A", "2024-01-03", 0.2)]
    assert weekly_hours(shifts, ["A"], date(2024, 1, 4))[0].total_hours == 0.3


def test_compare_scheduled_and_recorded_hours():
    shifts = [
        make_shift("A", "2024-01-02", 8),
        make_shift("A", "2024-01-03", 5.5),
        make_shift("B", "2024-01-03", 6),
    ]
    entries = [
        TimeEntry(id="1", employee_id="A", date="2024-01-02", total_hours=7.5),
        TimeEntry(id="2", employee_id="A", date="2024-01-04", total_hours=3.0),
        TimeEntry(id="3", employee_id="A", date="2024-01-05", check_in="2024-01-05T09:00:00"),
    ]
    result = compare_hours(shifts, entries, "A", "2024-01-01", "2024-01-07")
    days = {day.date: day for day in result["days"]}
    assert list(days) == ["2024-01-02", "2024-01-03", "2024-01-04"]
    assert days["2024-01-02"].difference == -0.5
    assert days["2024-01-03"].actual_hours is None
    assert days["2024-01-04"].scheduled_hours == 0.0
    assert result["scheduled_hours"] == 13.5
    assert result["actual_hours"] == 10.5
    assert result["difference"] == -3.0


def test_compare_without_entries():
    result = compare_hours([make_shift("A", "2024-01-02", 8)], [], "A", "2024-01-01", "2024-01-07")
    assert result["actual_hours"] is None
    assert result["difference"] is None
