"""Calendar helpers shared by every shiftboard module.

All weekday arithmetic uses the Monday=0 convention. Browser clients send
JavaScript style indices (Sunday=0); convert them with :func:`from_js_weekday`
instead of re-deriving the formula at the call site.
"""
from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta
from typing import Iterator, Tuple, Union

__all__ = [
    "InvalidInputError",
    "MONTH_NAMES",
    "DAY_NAMES",
    "format_date",
    "parse_date",
    "parse_time",
    "format_time",
    "calculate_shift_duration",
    "weekday_index",
    "from_js_weekday",
    "get_week_dates",
    "get_week_range",
    "get_month_range",
    "add_days",
    "iter_days",
    "format_month_year",
    "format_employee_name",
    "format_shift_display",
]

DateLike = Union[date, datetime, str]

DAY_NAMES = ["Lunedì", "Martedì", "Mercoledì", "Giovedì", "Venerdì", "Sabato", "Domenica"]

MONTH_NAMES = [
    "Gennaio", "Febbraio", "Marzo", "Aprile", "Maggio", "Giugno",
    "Luglio", "Agosto", "Settembre", "Ottobre", "Novembre", "Dicembre",
]


class InvalidInputError(ValueError):
    """Raised when a date, time or payload field is malformed."""


def format_date(day: date) -> str:
    """Return ``YYYY-MM-DD`` built from the local calendar components of *day*."""

    if not isinstance(day, date):
        raise InvalidInputError(f"Expected a date, got {day!r}")
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidInputError(f"Expected a YYYY-MM-DD string, got {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def parse_time(value: Union[str, time]) -> time:
    """Parse ``HH:MM`` (or ``HH:MM:SS`` as returned by SQL time columns)."""

    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise InvalidInputError(f"Expected a HH:MM string, got {value!r}")
    text = value.strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise InvalidInputError(f"Invalid time {value!r}, expected HH:MM")


def format_time(value: Union[str, time]) -> str:
    parsed = parse_time(value)
    return f"{parsed.hour:02d}:{parsed.minute:02d}"


def calculate_shift_duration(start_time: Union[str, time], end_time: Union[str, time]) -> float:
    """Return the shift length in hours, rounded to two decimals.

    An end time earlier than the start time is a shift crossing midnight and
    wraps to the next day. Equal times describe an empty shift and are
    rejected.
    """

    start = parse_time(start_time)
    end = parse_time(end_time)
    start_minutes = start.hour * 60 + start.minute
    end_minutes = end.hour * 60 + end.minute
    if end_minutes == start_minutes:
        raise InvalidInputError(f"Shift {format_time(start)}-{format_time(end)} has no duration")
    if end_minutes < start_minutes:
        end_minutes += 24 * 60
    return round((end_minutes - start_minutes) / 60, 2)


def weekday_index(day: date) -> int:
    """Monday=0 ... Sunday=6."""

    return day.weekday()


def from_js_weekday(js_day: int) -> int:
    if not 0 <= js_day <= 6:
        raise InvalidInputError(f"Weekday index {js_day} out of range")
    return 6 if js_day == 0 else js_day - 1


def get_week_dates(day: DateLike) -> Tuple[datetime, datetime]:
    """Return Monday 00:00:00 and Sunday 23:59:59.999999 around *day*."""

    monday, sunday = get_week_range(day)
    return datetime.combine(monday, time.min), datetime.combine(sunday, time.max)


def get_week_range(day: DateLike) -> Tuple[date, date]:
    current = parse_date(day)
    monday = add_days(current, -weekday_index(current))
    return monday, add_days(monday, 6)


def get_month_range(year: int, month: int) -> Tuple[date, date]:
    if not MINYEAR <= year <= MAXYEAR:
        raise InvalidInputError(f"Year {year} out of range {MINYEAR}..{MAXYEAR}")
    if not 1 <= month <= 12:
        raise InvalidInputError(f"Month {month} out of range 1..12")
    _, days = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, days)


def add_days(day: date, days: int) -> date:
    """Return *day* moved by *days*; leaving the supported calendar is an input error."""

    try:
        return day + timedelta(days=days)
    except OverflowError as exc:
        raise InvalidInputError(f"{format_date(day)} {days:+d} days is outside the supported calendar") from exc


def iter_days(start: date, end: date) -> Iterator[date]:
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def format_month_year(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1].lower()} {day.year}"


def format_employee_name(first_name: str, last_name: str | None) -> str:
    if not last_name:
        return first_name
    return f"{first_name} {last_name[0]}"


def format_shift_display(first_name: str, last_name: str | None, start_time: str, end_time: str) -> str:
    return f"{format_employee_name(first_name, last_name)} {format_time(start_time)}-{format_time(end_time)}"
