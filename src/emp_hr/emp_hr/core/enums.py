from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for permission checks."""

    EMPLOYEE = "employee"
    TEAMLEADER = "teamleader"
    ADMIN = "admin"


class DayStatus(str, Enum):
    """Authoritative classification of one employee's calendar day.

    Never stored: recomputed from punches, leaves and week-off data on read.
    """

    PRESENT = "PRESENT"
    HALF_DAY_FIRST = "HALF_DAY_FIRST"
    HALF_DAY_SECOND = "HALF_DAY_SECOND"
    LATE_MARK_PRESENT = "LATE_MARK_PRESENT"
    ABSENT = "ABSENT"
    ON_LEAVE = "ON_LEAVE"
    WEEK_OFF = "WEEK_OFF"
    FUTURE = "FUTURE"
    IN_PROGRESS = "IN_PROGRESS"


class AttendanceOutcome(str, Enum):
    """Result of classifying a completed punch (a subset of DayStatus)."""

    PRESENT = "PRESENT"
    HALF_DAY_FIRST = "HALF_DAY_FIRST"
    HALF_DAY_SECOND = "HALF_DAY_SECOND"
    LATE_MARK_PRESENT = "LATE_MARK_PRESENT"
    ABSENT = "ABSENT"

    def as_day_status(self) -> DayStatus:
        return DayStatus(self.value)


class PunchState(str, Enum):
    NOT_CHECKED_IN = "not_checked_in"
    IN_PROGRESS = "in_progress"
    CHECKED_OUT = "checked_out"


class LeaveKind(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class LeavePortion(str, Enum):
    FULL = "full"
    HALF = "half"

    @property
    def days(self) -> float:
        return 1.0 if self is LeavePortion.FULL else 0.5


class LeaveHalf(str, Enum):
    FIRST = "first"
    SECOND = "second"
    NONE = "none"


class LeaveStatus(str, Enum):
    """Leave approval workflow states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Weekday(int, Enum):
    """Closed weekday set; values match ``date.weekday()``."""

    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @classmethod
    def of(cls, day) -> "Weekday":
        return cls(day.weekday())

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Accept a full day name or its three-letter abbreviation, any case."""

        key = (value or "").strip().upper()
        for day in cls:
            if key in (day.name, day.label.upper()):
                return day
        raise ValueError(f"Unknown weekday: {value!r}")

    @property
    def label(self) -> str:
        return ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")[self.value]


class NotificationType(str, Enum):
    WELCOME = "welcome"
    APPROVAL = "approval"
    REMINDER = "reminder"
    UPDATE = "update"
    MEETING = "meeting"
    SYSTEM = "system"
    ANNOUNCEMENT = "announcement"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
