"""Shift CRUD and recurring assignment."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..dao import employees_dao, shift_templates_dao, shifts_dao
from ..dao.db import RecordNotFoundError
from ..domain.dates import InvalidInputError, format_date, parse_date
from ..domain.models import Shift, ShiftRequest, ShiftStatus, build_shift_request, validate_weekdays
from ..domain.projection import expand_shift_template
from . import events
from .auth import AuthContext, require_admin

logger = logging.getLogger(__name__)

TABLE = "shifts"


class ShiftNotFoundError(RecordNotFoundError):
    """Raised when a shift id is unknown."""


class EmployeeNotFoundError(RecordNotFoundError):
    """Raised when a payload references an unknown employee."""


class ShiftTemplateNotFoundError(RecordNotFoundError):
    """Raised when a shift template id is unknown."""


def period_bounds(start_date: date | str, end_date: date | str) -> tuple[str, str]:
    start = format_date(parse_date(start_date))
    end = format_date(parse_date(end_date))
    if end < start:
        raise InvalidInputError(f"Period end {end} precedes start {start}")
    return start, end


def ensure_employee(employee_id: str) -> None:
    if employees_dao.get_employee(employee_id) is None:
        raise EmployeeNotFoundError(f"Employee {employee_id} not found")


def get_shifts(auth: AuthContext, start_date: date | str, end_date: date | str) -> List[Shift]:
    """Shifts in the inclusive period visible to *auth*.

    Administrators see every shift; employees see their own published shifts.
    """

    start, end = period_bounds(start_date, end_date)
    if auth.is_admin:
        return shifts_dao.list_shifts(start, end)
    if not auth.employee_id:
        return []
    return shifts_dao.list_shifts(start, end, employee_id=auth.employee_id, status=ShiftStatus.PUBLISHED)


def get_shift(auth: AuthContext, shift_id: str) -> Shift:
    shift = shifts_dao.get_shift(shift_id)
    visible = shift is not None and (
        auth.is_admin or (shift.employee_id == auth.employee_id and shift.status is ShiftStatus.PUBLISHED)
    )
    if not visible:
        raise ShiftNotFoundError(f"Shift {shift_id} not found")
    return shift


def create_shift(auth: AuthContext, payload: Mapping[str, Any]) -> Shift:
    require_admin(auth, "create shifts")
    request = build_shift_request(payload)
    ensure_employee(request.employee_id)
    shift_id = shifts_dao.create_shift(request)
    logger.info("Created shift %s for %s on %s", shift_id, request.employee_id, request.date)
    events.notify(TABLE, events.INSERT, shift_id, date=request.date)
    return request.to_shift(shift_id)


def create_shifts(auth: AuthContext, requests: Iterable[ShiftRequest]) -> List[str]:
    """Store several shifts as one unit.

    A failing insert (for example a duplicate shift) stores none of them and
    raises ``DatabaseError``.
    """

    require_admin(auth, "create shifts")
    created = shifts_dao.create_shifts(list(requests))
    if created:
        logger.info("Created %d shifts", len(created))
        events.notify(TABLE, events.INSERT, None, count=len(created))
    return created


def update_shift(auth: AuthContext, shift_id: str, payload: Mapping[str, Any]) -> Shift:
    require_admin(auth, "edit shifts")
    current = shifts_dao.get_shift(shift_id)
    if current is None:
        raise ShiftNotFoundError(f"Shift {shift_id} not found")
    merged: Dict[str, Any] = {
        "employee_id": current.employee_id,
        "date": current.date,
        "start_time": current.start_time,
        "end_time": current.end_time,
        "notes": current.notes,
        "status": current.status.value,
    }
    merged.update({key: value for key, value in payload.items() if key in merged or key == "duration"})
    request = build_shift_request(merged)
    if request.employee_id != current.employee_id:
        ensure_employee(request.employee_id)
    shifts_dao.update_shift(shift_id, request)
    events.notify(TABLE, events.UPDATE, shift_id, date=request.date)
    return request.to_shift(shift_id)


def delete_shift(auth: AuthContext, shift_id: str) -> bool:
    require_admin(auth, "delete shifts")
    deleted = shifts_dao.delete_shift(shift_id)
    if deleted:
        events.notify(TABLE, events.DELETE, shift_id)
    return bool(deleted)


def publish_shifts(auth: AuthContext, start_date: date | str, end_date: date | str) -> int:
    require_admin(auth, "publish shifts")
    start, end = period_bounds(start_date, end_date)
    count = shifts_dao.publish_shifts(start, end)
    logger.info("Published %d shifts between %s and %s", count, start, end)
    if count:
        events.notify(TABLE, events.UPDATE, None, start=start, end=end, count=count)
    return count


def assign_template(
    auth: AuthContext,
    template_id: str,
    employee_id: str,
    year: int,
    month: int,
    weekdays: Optional[Sequence[int]] = None,
    extra_dates: Iterable[date | str] = (),
    status: Optional[str] = None,
    sunday_first: bool = False,
) -> List[str]:
    """Create one shift per selected day from a shift template.

    *weekdays* are Monday=0 indices, or Sunday=0 when *sunday_first* is set.
    All shifts are stored together or not at all.
    """

    require_admin(auth, "assign shifts")
    template = shift_templates_dao.get_template(template_id)
    if template is None:
        raise ShiftTemplateNotFoundError(f"Shift template {template_id} not found")
    ensure_employee(employee_id)
    requests = expand_shift_template(
        template,
        employee_id,
        year,
        month,
        weekdays=validate_weekdays(weekdays, sunday_first=sunday_first),
        extra_dates=extra_dates,
        status=ShiftStatus.parse(status),
    )
    if not requests:
        raise InvalidInputError("No days selected")
    return create_shifts(auth, requests)
