"""Pure scheduling logic: dates, calendar grids, projections and hours."""

from .calendar_grid import get_calendar_days, get_day_window, get_week_days
from .dates import InvalidInputError, calculate_shift_duration, format_date, get_week_dates, parse_date
from .hours import aggregate_hours, compare_hours, monthly_hours, weekly_hours
from .models import (
    CalendarDay,
    Employee,
    HoursSummary,
    Shift,
    ShiftRequest,
    ShiftStatus,
    ShiftTemplate,
    WeekTemplate,
    WeekTemplateShift,
)
from .projection import EmptyTemplateError, WeekdayMismatchError, capture_week_template, project_week_template

__all__ = [
    "CalendarDay",
    "Employee",
    "EmptyTemplateError",
    "HoursSummary",
    "InvalidInputError",
    "Shift",
    "ShiftRequest",
    "ShiftStatus",
    "ShiftTemplate",
    "WeekTemplate",
    "WeekTemplateShift",
    "WeekdayMismatchError",
    "aggregate_hours",
    "calculate_shift_duration",
    "capture_week_template",
    "compare_hours",
    "format_date",
    "get_calendar_days",
    "get_day_window",
    "get_week_dates",
    "get_week_days",
    "monthly_hours",
    "parse_date",
    "project_week_template",
    "weekly_hours",
]
