"""Shift templates and saved week templates."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Sequence

from ..dao import db, shift_templates_dao, shifts_dao, week_templates_dao
from ..dao.db import RecordNotFoundError
from ..domain.dates import InvalidInputError, calculate_shift_duration, format_date, format_time, parse_date
from ..domain.models import ShiftRequest, ShiftTemplate, WeekTemplate, WeekTemplateShift, build_shift_request, validate_weekdays
from ..domain.projection import align_target, capture_week_template, check_template_shifts, project_week_template
from . import events
from .auth import AuthContext, require_admin
from .shift_service import TABLE as SHIFTS_TABLE
from .shift_service import ShiftTemplateNotFoundError, period_bounds

logger = logging.getLogger(__name__)


class TemplateNotFoundError(RecordNotFoundError):
    """Raised when a week template id is unknown."""


@dataclass
class ApplyFailure:
    request: ShiftRequest
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"shift": self.request.to_dict(), "error": self.error}


@dataclass
class ApplyResult:
    """Outcome of applying a week template.

    Each projected shift is stored on its own; shifts created before a
    failure are kept.
    """

    template_id: str
    target_date: str
    requested: int
    created: List[str] = field(default_factory=list)
    failures: List[ApplyFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict[str, Any]:
        return {
            "template_id": self.template_id,
            "target_date": self.target_date,
            "requested": self.requested,
            "created": len(self.created),
            "created_ids": list(self.created),
            "failures": [failure.to_dict() for failure in self.failures],
        }


# -- shift templates -----------------------------------------------------------

def _shift_template_from_payload(payload: Mapping[str, Any], template_id: str = "") -> ShiftTemplate:
    name = (payload.get("name") or "").strip()
    if not name:
        raise InvalidInputError("Template name is required")
    start = format_time(payload.get("start_time") or "")
    end = format_time(payload.get("end_time") or "")
    return ShiftTemplate(
        id=template_id,
        name=name,
        start_time=start,
        end_time=end,
        duration=calculate_shift_duration(start, end),
        days_of_week=validate_weekdays(payload.get("days_of_week"), sunday_first=payload.get("sunday_first") is True),
    )


def list_shift_templates() -> List[ShiftTemplate]:
    return shift_templates_dao.list_templates()


def create_shift_template(auth: AuthContext, payload: Mapping[str, Any]) -> ShiftTemplate:
    require_admin(auth, "create shift templates")
    template = _shift_template_from_payload(payload)
    template.id = shift_templates_dao.create_template(template)
    events.notify("shift_templates", events.INSERT, template.id)
    return template


def update_shift_template(auth: AuthContext, template_id: str, payload: Mapping[str, Any]) -> ShiftTemplate:
    # Already stored shifts keep their own times; only future assignments change.
    require_admin(auth, "edit shift templates")
    if shift_templates_dao.get_template(template_id) is None:
        raise ShiftTemplateNotFoundError(f"Shift template {template_id} not found")
    template = _shift_template_from_payload(payload, template_id)
    shift_templates_dao.update_template(template)
    events.notify("shift_templates", events.UPDATE, template_id)
    return template


def delete_shift_template(auth: AuthContext, template_id: str) -> bool:
    require_admin(auth, "delete shift templates")
    deleted = shift_templates_dao.delete_template(template_id)
    if deleted:
        events.notify("shift_templates", events.DELETE, template_id)
    return bool(deleted)


# -- week templates ------------------------------------------------------------

def get_templates() -> List[WeekTemplate]:
    return week_templates_dao.list_templates()


def get_template(template_id: str) -> WeekTemplate:
    template = week_templates_dao.get_template(template_id)
    if template is None:
        raise TemplateNotFoundError(f"Week template {template_id} not found")
    return template


def get_template_shifts(template_id: str) -> List[WeekTemplateShift]:
    get_template(template_id)
    return week_templates_dao.list_template_shifts(template_id)


def create_template(
    auth: AuthContext,
    name: str,
    start_date: date | str,
    end_date: date | str,
    shifts: Sequence[Mapping[str, Any]],
    description: str = "",
) -> WeekTemplate:
    """Store a week template from an explicit list of shift payloads."""

    require_admin(auth, "create week templates")
    if not name or not name.strip():
        raise InvalidInputError("Template name is required")
    start, end = period_bounds(start_date, end_date)
    template = WeekTemplate(name=name.strip(), description=description or "", start_date=start, end_date=end)
    template_shifts = []
    for payload in shifts:
        request = build_shift_request(payload)
        template_shifts.append(
            WeekTemplateShift(
                employee_id=request.employee_id,
                date=request.date,
                start_time=request.start_time,
                end_time=request.end_time,
                duration=request.duration,
                notes=request.notes,
            )
        )
    check_template_shifts(template, template_shifts)
    template.id = week_templates_dao.create_template(template, template_shifts)
    logger.info("Created week template %s with %d shifts", template.id, len(template_shifts))
    events.notify("week_templates", events.INSERT, template.id)
    return template


def capture_template(
    auth: AuthContext,
    name: str,
    start_date: date | str,
    end_date: date | str,
    description: str = "",
) -> tuple[WeekTemplate, List[WeekTemplateShift]]:
    """Save the shifts currently stored in ``[start_date, end_date]`` as a template."""

    require_admin(auth, "create week templates")
    start, end = period_bounds(start_date, end_date)
    template, template_shifts = capture_week_template(
        name, start, end, shifts_dao.list_shifts(start, end), description=description
    )
    template.id = week_templates_dao.create_template(template, template_shifts)
    logger.info("Captured week %s..%s as template %s (%d shifts)", start, end, template.id, len(template_shifts))
    events.notify("week_templates", events.INSERT, template.id)
    return template, template_shifts


def delete_template(auth: AuthContext, template_id: str) -> bool:
    require_admin(auth, "delete week templates")
    deleted = week_templates_dao.delete_template(template_id)
    if deleted:
        events.notify("week_templates", events.DELETE, template_id)
    return bool(deleted)


def effective_target(template: WeekTemplate, target_date: date | str, *, snap: bool) -> date:
    target = parse_date(target_date)
    return align_target(parse_date(template.start_date), target) if snap else target


def apply_template(
    auth: AuthContext,
    template_id: str,
    target_date: date | str,
    *,
    snap: bool = False,
) -> ApplyResult:
    """Project a week template onto the week starting at *target_date* and
    store every resulting shift.

    Raises ``EmptyTemplateError`` when the template has no shifts and
    ``WeekdayMismatchError`` when *target_date* is on another weekday than
    the template start and *snap* is false.
    """

    require_admin(auth, "apply week templates")
    template = get_template(template_id)
    template_shifts = week_templates_dao.list_template_shifts(template_id)
    requests = project_week_template(template, template_shifts, target_date, snap=snap)

    result = ApplyResult(
        template_id=template_id,
        target_date=format_date(effective_target(template, target_date, snap=snap)),
        requested=len(requests),
    )
    for request in requests:
        try:
            result.created.append(shifts_dao.create_shift(request))
        except db.DatabaseError as exc:
            logger.warning("Could not create shift from template %s: %s (%s)", template_id, exc, request)
            result.failures.append(ApplyFailure(request=request, error=str(exc)))

    logger.info(
        "Applied week template %s at %s: %d/%d shifts created",
        template_id,
        result.target_date,
        len(result.created),
        result.requested,
    )
    if result.created:
        events.notify(SHIFTS_TABLE, events.INSERT, None, template_id=template_id, count=len(result.created))
    return result
