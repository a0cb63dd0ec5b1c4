"""Month, week and rolling-window day grids for the shift calendar."""
from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from .dates import InvalidInputError, add_days, format_date, get_month_range, get_week_range, iter_days, weekday_index
from .models import CalendarDay, Shift

GRID_DAYS = 42


def group_shifts_by_date(shifts: Iterable[Shift]) -> Dict[str, List[Shift]]:
    grouped: Dict[str, List[Shift]] = defaultdict(list)
    for shift in shifts:
        grouped[shift.date].append(shift)
    return grouped


def _make_day(day: date, month: Optional[int], today: date, grouped: Dict[str, List[Shift]]) -> CalendarDay:
    return CalendarDay(
        date=day,
        is_current_month=month is not None and day.month == month,
        is_today=day == today,
        shifts=list(grouped.get(format_date(day), ())),
    )


def get_calendar_days(
    year: int,
    month: int,
    shifts: Iterable[Shift],
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """Return the fixed 6x7 grid for *month* (1-based), Monday first.

    Leading days come from the previous month and trailing days from the
    next one so the grid always holds exactly 42 days.
    """

    first, _ = get_month_range(year, month)
    today = today or date.today()
    grouped = group_shifts_by_date(shifts)
    grid_start = add_days(first, -weekday_index(first))
    grid_end = add_days(grid_start, GRID_DAYS - 1)
    return [_make_day(current, month, today, grouped) for current in iter_days(grid_start, grid_end)]


def get_week_days(day: date, shifts: Iterable[Shift], today: Optional[date] = None) -> List[CalendarDay]:
    monday, sunday = get_week_range(day)
    today = today or date.today()
    grouped = group_shifts_by_date(shifts)
    return [_make_day(current, day.month, today, grouped) for current in iter_days(monday, sunday)]


def get_day_window(
    anchor: date,
    before: int,
    after: int,
    shifts: Iterable[Shift],
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """Days from ``anchor - before`` to ``anchor + after`` inclusive.

    Used to page the endless vertical calendar in both directions.
    """

    if before < 0 or after < 0:
        raise InvalidInputError("Window bounds must be non-negative")
    today = today or date.today()
    grouped = group_shifts_by_date(shifts)
    start = add_days(anchor, -before)
    end = add_days(anchor, after)
    return [_make_day(current, anchor.month, today, grouped) for current in iter_days(start, end)]
