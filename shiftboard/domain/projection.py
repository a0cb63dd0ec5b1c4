"""Projection of saved weeks and shift templates onto concrete dates."""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from .dates import InvalidInputError, add_days, format_date, get_month_range, iter_days, parse_date, weekday_index
from .models import (
    Shift,
    ShiftRequest,
    ShiftStatus,
    ShiftTemplate,
    WeekTemplate,
    WeekTemplateShift,
    validate_weekdays,
)


class EmptyTemplateError(ValueError):
    """Raised when a week template has no shifts to apply."""


class WeekdayMismatchError(InvalidInputError):
    """Raised when the target date and the template start differ in weekday."""


def align_target(template_start: date, target: date) -> date:
    """Move *target* to the day of its week sharing the template start's weekday."""

    monday = add_days(target, -weekday_index(target))
    return add_days(monday, weekday_index(template_start))


def project_week_template(
    template: WeekTemplate,
    shifts: Sequence[WeekTemplateShift],
    target_date: date | str,
    *,
    snap: bool = False,
) -> List[ShiftRequest]:
    """Re-date every template shift by the offset between the template start
    and *target_date*.

    The offset is a whole number of days, so each projected shift keeps its
    position relative to the template start. When *snap* is false a target
    on a different weekday than the template start is rejected.
    """

    if not shifts:
        raise EmptyTemplateError(f"Week template {template.name!r} has no shifts to apply")

    start = parse_date(template.start_date)
    target = parse_date(target_date)
    if weekday_index(target) != weekday_index(start):
        if not snap:
            raise WeekdayMismatchError(
                f"Target {format_date(target)} is not on the same weekday as template start {template.start_date}"
            )
        target = align_target(start, target)

    offset = (target - start).days
    return [
        ShiftRequest(
            employee_id=shift.employee_id,
            date=format_date(add_days(parse_date(shift.date), offset)),
            start_time=shift.start_time,
            end_time=shift.end_time,
            duration=shift.duration,
            notes=shift.notes,
        )
        for shift in shifts
    ]


def capture_week_template(
    name: str,
    start_date: date | str,
    end_date: date | str,
    shifts: Iterable[Shift],
    description: str = "",
) -> Tuple[WeekTemplate, List[WeekTemplateShift]]:
    """Snapshot the shifts falling in ``[start_date, end_date]``."""

    if not name or not name.strip():
        raise InvalidInputError("Template name is required")
    start = format_date(parse_date(start_date))
    end = format_date(parse_date(end_date))
    if end < start:
        raise InvalidInputError(f"Template end {end} precedes start {start}")

    template = WeekTemplate(name=name.strip(), description=description or "", start_date=start, end_date=end)
    captured = [
        WeekTemplateShift(
            employee_id=shift.employee_id,
            date=shift.date,
            start_time=shift.start_time,
            end_time=shift.end_time,
            duration=shift.duration,
            notes=shift.notes,
        )
        for shift in sorted(shifts, key=lambda s: (s.date, s.start_time, s.employee_id))
        if template.contains(shift.date)
    ]
    return template, captured


def check_template_shifts(template: WeekTemplate, shifts: Iterable[WeekTemplateShift]) -> None:
    for shift in shifts:
        day = format_date(parse_date(shift.date))
        if not template.contains(day):
            raise InvalidInputError(
                f"Template shift on {day} is outside {template.start_date}..{template.end_date}"
            )


def expand_shift_template(
    template: ShiftTemplate,
    employee_id: str,
    year: int,
    month: int,
    weekdays: Optional[Sequence[int]] = None,
    extra_dates: Iterable[date | str] = (),
    status: ShiftStatus = ShiftStatus.DRAFT,
) -> List[ShiftRequest]:
    """Assign *template* to every selected weekday of the month plus any
    individually picked dates."""

    selected = validate_weekdays(weekdays if weekdays is not None else template.days_of_week) or []
    first, last = get_month_range(year, month)
    days = {day for day in iter_days(first, last) if weekday_index(day) in selected}
    days.update(parse_date(extra) for extra in extra_dates)
    return [
        ShiftRequest(
            employee_id=employee_id,
            date=format_date(day),
            start_time=template.start_time,
            end_time=template.end_time,
            duration=template.duration,
            status=status,
        )
        for day in sorted(days)
    ]
