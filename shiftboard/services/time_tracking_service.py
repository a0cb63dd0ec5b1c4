"""Check-in/check-out recording and scheduled-vs-actual comparison."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from ..dao import time_tracking_dao
from ..domain.dates import InvalidInputError, format_date
from ..domain.hours import compare_hours
from ..domain.models import TimeEntry
from . import events, shift_service
from .auth import AuthContext, require_employee_access

logger = logging.getLogger(__name__)

TABLE = "time_tracking"


def _timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds")


def worked_hours(check_in: str, check_out: str) -> float:
    try:
        start = datetime.fromisoformat(check_in)
        end = datetime.fromisoformat(check_out)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid timestamps {check_in!r} / {check_out!r}") from exc
    if end < start:
        raise InvalidInputError(f"Check-out {check_out} precedes check-in {check_in}")
    return round((end - start).total_seconds() / 3600, 2)


def get_entry(auth: AuthContext, employee_id: str, day: date) -> Optional[TimeEntry]:
    require_employee_access(auth, employee_id)
    return time_tracking_dao.get_entry(employee_id, format_date(day))


def check_in(auth: AuthContext, employee_id: str, notes: Optional[str] = None, now: Optional[datetime] = None) -> TimeEntry:
    """Record the check-in for today. A second check-in keeps the first one."""

    require_employee_access(auth, employee_id)
    now = now or datetime.now()
    today = format_date(now.date())
    entry = time_tracking_dao.get_entry(employee_id, today)
    if entry is None:
        time_tracking_dao.insert_entry(employee_id, today, check_in=_timestamp(now), notes=notes)
    elif entry.check_in is None:
        entry.check_in = _timestamp(now)
        entry.notes = notes or entry.notes
        if entry.check_out:
            entry.total_hours = worked_hours(entry.check_in, entry.check_out)
        time_tracking_dao.update_entry(entry)
    else:
        return entry
    logger.info("Employee %s checked in on %s", employee_id, today)
    events.notify(TABLE, events.UPDATE, employee_id, date=today)
    return time_tracking_dao.get_entry(employee_id, today)  # type: ignore[return-value]


def _entry_to_close(employee_id: str, now: datetime) -> Optional[TimeEntry]:
    """Today's entry, or yesterday's when it was checked in and never closed (overnight shift)."""
    entry = time_tracking_dao.get_entry(employee_id, format_date(now.date()))
    if entry is not None:
        return entry
    previous = time_tracking_dao.get_entry(employee_id, format_date(now.date() - timedelta(days=1)))
    if previous is not None and previous.check_in and not previous.check_out:
        return previous
    return None


def check_out(auth: AuthContext, employee_id: str, notes: Optional[str] = None, now: Optional[datetime] = None) -> TimeEntry:
    require_employee_access(auth, employee_id)
    now = now or datetime.now()
    entry = _entry_to_close(employee_id, now)
    if entry is None:
        day = format_date(now.date())
        time_tracking_dao.insert_entry(employee_id, day, check_out=_timestamp(now), notes=notes)
    else:
        day = entry.date
        entry.check_out = _timestamp(now)
        entry.notes = notes or entry.notes
        if entry.check_in:
            entry.total_hours = worked_hours(entry.check_in, entry.check_out)
        time_tracking_dao.update_entry(entry)
    logger.info("Employee %s checked out for %s", employee_id, day)
    events.notify(TABLE, events.UPDATE, employee_id, date=day)
    return time_tracking_dao.get_entry(employee_id, day)  # type: ignore[return-value]


def get_entries(auth: AuthContext, employee_id: str, start_date: date | str, end_date: date | str) -> List[TimeEntry]:
    require_employee_access(auth, employee_id)
    start, end = shift_service.period_bounds(start_date, end_date)
    return time_tracking_dao.list_entries(start, end, employee_id=employee_id)


def hours_comparison(auth: AuthContext, employee_id: str, start_date: date | str, end_date: date | str) -> Dict[str, Any]:
    require_employee_access(auth, employee_id)
    start, end = shift_service.period_bounds(start_date, end_date)
    shifts = shift_service.get_shifts(auth, start, end)
    entries = time_tracking_dao.list_entries(start, end, employee_id=employee_id)
    result = compare_hours(shifts, entries, employee_id, start, end)
    result["days"] = [day.to_dict() for day in result["days"]]  # type: ignore[union-attr]
    return result
