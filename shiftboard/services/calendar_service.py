"""Calendar views assembled from stored shifts."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from ..domain.calendar_grid import GRID_DAYS, get_calendar_days, get_day_window, get_week_days
from ..domain.dates import add_days, get_month_range, get_week_range, weekday_index
from ..domain.models import CalendarDay
from . import shift_service
from .auth import AuthContext

MAX_WINDOW_DAYS = 62


def month_view(auth: AuthContext, year: int, month: int, today: Optional[date] = None) -> List[CalendarDay]:
    first, _ = get_month_range(year, month)
    grid_start = add_days(first, -weekday_index(first))
    grid_end = add_days(grid_start, GRID_DAYS - 1)
    shifts = shift_service.get_shifts(auth, grid_start, grid_end)
    return get_calendar_days(year, month, shifts, today=today)


def week_view(auth: AuthContext, day: date, today: Optional[date] = None) -> List[CalendarDay]:
    monday, sunday = get_week_range(day)
    return get_week_days(day, shift_service.get_shifts(auth, monday, sunday), today=today)


def day_window(
    auth: AuthContext,
    anchor: date,
    before: int,
    after: int,
    today: Optional[date] = None,
) -> List[CalendarDay]:
    before = min(before, MAX_WINDOW_DAYS)
    after = min(after, MAX_WINDOW_DAYS)
    start = add_days(anchor, -max(before, 0))
    end = add_days(anchor, max(after, 0))
    shifts = shift_service.get_shifts(auth, start, end)
    return get_day_window(anchor, before, after, shifts, today=today)
