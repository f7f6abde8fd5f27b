"""
Domain models for appointments, working windows and bookable slots.

All timestamps are naive local wall-clock values. Nothing in this module
converts between time zones: an offset on parsed input is dropped, not applied.
"""

from dataclasses import dataclass, field
from datetime import date as Date, datetime, time
from enum import Enum
from typing import List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .overlap import intervals_collide


def as_local(value: datetime) -> DateTime:
    """Return ``value`` as a naive pendulum DateTime with the same wall clock."""
    if isinstance(value, DateTime):
        return value.naive()
    return pendulum.naive(
        value.year,
        value.month,
        value.day,
        value.hour,
        value.minute,
        value.second,
        value.microsecond,
    )


def parse_local(text: str) -> DateTime:
    """
    Parse an ISO-ish date-time string into local wall-clock time.

    "2024-11-25 09:30" and "2024-11-25T09:30:00+02:00" both yield 09:30.
    """
    return pendulum.parse(text).naive()


def parse_clock(text: str) -> time:
    """Parse a ``HH:MM`` 24-hour string."""
    try:
        hours, minutes = (int(part) for part in text.strip().split(":"))
        return time(hour=hours, minute=minutes)
    except ValueError as exc:
        raise ValueError(f"Expected time as HH:MM, got '{text}'") from exc


def format_clock(value: time | datetime) -> str:
    """Format a time or datetime as ``HH:MM``."""
    return f"{value.hour:02d}:{value.minute:02d}"


def minutes_since_midnight(value: time) -> int:
    """09:30 -> 570"""
    return value.hour * 60 + value.minute


def format_minutes(minutes: int) -> str:
    """570 -> "09:30" """
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_bounds(day: Date) -> Tuple[DateTime, DateTime]:
    """First and last instant of a calendar date (00:00:00 to 23:59:59.999999)."""
    start = pendulum.naive(day.year, day.month, day.day)
    return start, start.end_of("day")


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"

    @property
    def is_live(self) -> bool:
        """Only live appointments block time on a staff member's calendar."""
        return self in LIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


LIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({
    AppointmentStatus.CANCELLED,
    AppointmentStatus.COMPLETED,
    AppointmentStatus.NO_SHOW,
})


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if ``other`` collides with this range; touching ends do not."""
        return intervals_collide(other.start, other.end, self.start, self.end)

    def __str__(self) -> str:
        return f"{self.start.strftime('%d.%m.%Y %H:%M')} - {format_clock(self.end)}"


@dataclass
class Appointment:
    """
    A booked interval for one staff member.

    Appointments are never deleted; cancellation is a terminal status.
    """
    id: str
    staff_id: str
    service_id: str
    start_at: DateTime
    end_at: DateTime
    status: AppointmentStatus = AppointmentStatus.PENDING
    service_name: str = ""
    customer_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[DateTime] = None

    def __post_init__(self):
        self.start_at = as_local(self.start_at)
        self.end_at = as_local(self.end_at)
        if self.created_at is not None:
            self.created_at = as_local(self.created_at)
        if self.start_at >= self.end_at:
            raise ValueError(
                f"Appointment {self.id} must start before it ends "
                f"({self.start_at} >= {self.end_at})"
            )
        self.status = AppointmentStatus(self.status)

    @property
    def is_live(self) -> bool:
        return self.status.is_live

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start_at, end=self.end_at)

    def duration_minutes(self) -> int:
        return self.time_range.duration_minutes()

    def display_customer(self) -> str:
        return self.customer_name or "Customer"


@dataclass(frozen=True)
class WorkingWindow:
    """
    A staff member's declared hours for one weekday (0=Monday, 6=Sunday),
    with an optional break.
    """
    staff_id: str
    weekday: int
    start_time: time
    end_time: time
    break_start: Optional[time] = None
    break_end: Optional[time] = None

    def __post_init__(self):
        if self.weekday not in range(7):
            raise ValueError(f"weekday must be between 0 and 6, got {self.weekday}")
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Working hours must open before they close "
                f"({format_clock(self.start_time)} >= {format_clock(self.end_time)})"
            )
        if (self.break_start is None) != (self.break_end is None):
            raise ValueError("A break needs both a start and an end")
        if self.has_break and not (
            self.start_time <= self.break_start < self.break_end <= self.end_time
        ):
            raise ValueError(
                f"Break {self.format_break()} must lie inside working hours {self.format_hours()}"
            )

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None

    @property
    def start_minutes(self) -> int:
        return minutes_since_midnight(self.start_time)

    @property
    def end_minutes(self) -> int:
        return minutes_since_midnight(self.end_time)

    def break_minutes(self) -> Optional[Tuple[int, int]]:
        if not self.has_break:
            return None
        return minutes_since_midnight(self.break_start), minutes_since_midnight(self.break_end)

    def format_hours(self) -> str:
        return f"{format_clock(self.start_time)} - {format_clock(self.end_time)}"

    def format_break(self) -> str:
        if not self.has_break:
            return ""
        return f"{format_clock(self.break_start)} - {format_clock(self.break_end)}"


@dataclass(frozen=True)
class Slot:
    """A bookable start/end pair on one calendar date. Never persisted."""
    date: Date
    start_time: str
    end_time: str

    def to_dict(self) -> dict:
        return {"startTime": self.start_time, "endTime": self.end_time}

    def start_at(self) -> DateTime:
        """The slot start as a full local timestamp on its date."""
        clock = parse_clock(self.start_time)
        return pendulum.naive(self.date.year, self.date.month, self.date.day, clock.hour, clock.minute)

    def __str__(self) -> str:
        return f"{self.start_time} - {self.end_time}"


class ViolationCode(str, Enum):
    INVALID_INTERVAL = "InvalidInterval"
    PAST_BOOKING = "PastBooking"
    NO_WORKING_WINDOW = "NoWorkingWindow"
    OUTSIDE_WORKING_HOURS = "OutsideWorkingHours"
    BREAK_CONFLICT = "BreakConflict"
    APPOINTMENT_CONFLICT = "AppointmentConflict"


@dataclass(frozen=True)
class Violation:
    code: ViolationCode
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    violation: Optional[Violation] = None

    @property
    def reason(self) -> Optional[str]:
        return self.violation.message if self.violation else None


@dataclass(frozen=True)
class ConflictResult:
    has_conflict: bool
    appointment: Optional[Appointment] = None
    message: Optional[str] = None

    @property
    def violation(self) -> Optional[Violation]:
        if not self.has_conflict:
            return None
        return Violation(ViolationCode.APPOINTMENT_CONFLICT, self.message or "")


@dataclass
class ValidationResult:
    """Accumulated outcome of a schedule validation, in check order."""
    violations: List[Violation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> List[str]:
        return [violation.message for violation in self.violations]

    @property
    def codes(self) -> List[ViolationCode]:
        return [violation.code for violation in self.violations]

    def add(self, violation: Optional[Violation]) -> None:
        if violation is not None:
            self.violations.append(violation)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "violations": self.messages}
