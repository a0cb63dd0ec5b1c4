"""Domain dataclasses for shiftboard."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .dates import InvalidInputError, calculate_shift_duration, format_date, format_time, from_js_weekday, parse_date

DURATION_TOLERANCE = 0.01


class ShiftStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ShiftStatus":
        if value is None:
            return cls.DRAFT
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise InvalidInputError(f"Unknown shift status {value!r}") from exc


@dataclass
class Employee:
    id: str
    first_name: str
    last_name: str = ""
    color: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Employee":
        return cls(
            id=str(row["id"]),
            first_name=row["first_name"],
            last_name=row["last_name"] or "",
            color=row["color"],
            user_id=row["user_id"],
            email=row["email"],
            phone=row["phone"],
            position=row["position"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Shift:
    id: str
    employee_id: str
    date: str
    start_time: str
    end_time: str
    duration: float
    notes: Optional[str] = None
    status: ShiftStatus = ShiftStatus.DRAFT

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Shift":
        return cls(
            id=str(row["id"]),
            employee_id=str(row["employee_id"]),
            date=row["date"],
            start_time=format_time(row["start_time"]),
            end_time=format_time(row["end_time"]),
            duration=float(row["duration"]),
            notes=row["notes"],
            status=ShiftStatus.parse(row["status"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["status"] = self.status.value
        return payload


@dataclass(frozen=True)
class ShiftRequest:
    """A shift that has been computed but not yet stored."""

    employee_id: str
    date: str
    start_time: str
    end_time: str
    duration: float
    notes: Optional[str] = None
    status: ShiftStatus = ShiftStatus.DRAFT

    def to_shift(self, shift_id: str) -> Shift:
        return Shift(
            id=shift_id,
            employee_id=self.employee_id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            duration=self.duration,
            notes=self.notes,
            status=self.status,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["status"] = self.status.value
        return payload


@dataclass
class ShiftTemplate:
    id: str
    name: str
    start_time: str
    end_time: str
    duration: float
    days_of_week: Optional[List[int]] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ShiftTemplate":
        days = row["days_of_week"]
        return cls(
            id=str(row["id"]),
            name=row["name"],
            start_time=format_time(row["start_time"]),
            end_time=format_time(row["end_time"]),
            duration=float(row["duration"]),
            days_of_week=[int(d) for d in days.split(",") if d != ""] if days else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class WeekTemplateShift:
    employee_id: str
    date: str
    start_time: str
    end_time: str
    duration: float
    notes: Optional[str] = None
    id: Optional[str] = None
    template_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "WeekTemplateShift":
        return cls(
            id=str(row["id"]),
            template_id=str(row["template_id"]),
            employee_id=str(row["employee_id"]),
            date=row["date"],
            start_time=format_time(row["start_time"]),
            end_time=format_time(row["end_time"]),
            duration=float(row["duration"]),
            notes=row["notes"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class WeekTemplate:
    name: str
    start_date: str
    end_date: str
    description: str = ""
    id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "WeekTemplate":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            description=row["description"] or "",
            start_date=row["start_date"],
            end_date=row["end_date"],
        )

    def contains(self, day: str) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CalendarDay:
    date: date
    is_current_month: bool
    is_today: bool
    shifts: List[Shift] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": format_date(self.date),
            "is_current_month": self.is_current_month,
            "is_today": self.is_today,
            "shifts": [shift.to_dict() for shift in self.shifts],
        }


@dataclass(frozen=True)
class HoursSummary:
    employee_id: str
    total_hours: float
    shift_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DailyHours:
    date: str
    scheduled_hours: float
    actual_hours: Optional[float]

    @property
    def difference(self) -> Optional[float]:
        if self.actual_hours is None:
            return None
        return round(self.actual_hours - self.scheduled_hours, 2)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["difference"] = self.difference
        return payload


@dataclass
class TimeEntry:
    id: str
    employee_id: str
    date: str
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    total_hours: Optional[float] = None
    notes: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TimeEntry":
        total = row["total_hours"]
        return cls(
            id=str(row["id"]),
            employee_id=str(row["employee_id"]),
            date=row["date"],
            check_in=row["check_in"],
            check_out=row["check_out"],
            total_hours=float(total) if total is not None else None,
            notes=row["notes"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Message:
    id: str
    sender_id: str
    content: str
    created_at: str
    read_by: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_shift_request(payload: Mapping[str, Any]) -> ShiftRequest:
    """Validate a raw shift payload and derive its duration.

    A supplied ``duration`` must agree with the start/end times.
    """

    missing = [key for key in ("employee_id", "date", "start_time", "end_time") if not payload.get(key)]
    if missing:
        raise InvalidInputError(f"Missing shift fields: {', '.join(missing)}")
    day = format_date(parse_date(payload["date"]))
    start = format_time(payload["start_time"])
    end = format_time(payload["end_time"])
    duration = calculate_shift_duration(start, end)
    supplied = payload.get("duration")
    if supplied is not None:
        try:
            supplied_value = float(supplied)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Invalid duration {supplied!r}") from exc
        if abs(supplied_value - duration) > DURATION_TOLERANCE:
            raise InvalidInputError(
                f"Duration {supplied_value} does not match {start}-{end} ({duration}h)"
            )
    return ShiftRequest(
        employee_id=str(payload["employee_id"]),
        date=day,
        start_time=start,
        end_time=end,
        duration=duration,
        notes=payload.get("notes") or None,
        status=ShiftStatus.parse(payload.get("status")),
    )


def validate_weekdays(days: Optional[Sequence[Any]], *, sunday_first: bool = False) -> Optional[List[int]]:
    """Normalise weekday indices to sorted Monday=0 values.

    With *sunday_first* the input uses the browser convention (Sunday=0).
    """
    if days is None:
        return None
    result: List[int] = []
    for value in days:
        try:
            index = int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Invalid weekday {value!r}") from exc
        if not 0 <= index <= 6:
            raise InvalidInputError(f"Weekday {index} out of range 0..6")
        if sunday_first:
            index = from_js_weekday(index)
        if index not in result:
            result.append(index)
    return sorted(result)
