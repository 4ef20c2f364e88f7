from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import AbstractSet, Optional

from ..attendance.classifier import DEFAULT_THRESHOLDS, AttendanceThresholds, classify
from ..attendance.model import AttendancePunch
from ..core.enums import DayStatus, Weekday
from ..leaves.model import LeaveRecord
from ..shifts.model import ShiftWindow
from ..weekoffs.model import WeekOffOverride


@dataclass(frozen=True)
class ResolvedDay:
    day: date
    status: DayStatus
    punch: Optional[AttendancePunch] = None
    leave: Optional[LeaveRecord] = None

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "status": self.status.value,
            "punch": self.punch.to_dict() if self.punch else None,
            "leave": self.leave.to_dict() if self.leave else None,
        }


def resolve_day(
    *,
    day: date,
    now: datetime,
    shift: ShiftWindow,
    punch: Optional[AttendancePunch] = None,
    leave: Optional[LeaveRecord] = None,
    override: Optional[WeekOffOverride] = None,
    department_week_offs: AbstractSet[Weekday] = frozenset(),
    thresholds: AttendanceThresholds = DEFAULT_THRESHOLDS,
) -> DayStatus:
    """Single authoritative status of one employee's day.

    Precedence: future, week-off (override first, then department default),
    approved leave, punch, absent. A week-off beats any punch recorded that
    day; only an approved leave hides the punch.
    """

    if day > now.date():
        return DayStatus.FUTURE

    if override is not None:
        if override.is_week_off:
            return DayStatus.WEEK_OFF
    elif Weekday.of(day) in department_week_offs:
        return DayStatus.WEEK_OFF

    if leave is not None and leave.is_approved:
        return DayStatus.ON_LEAVE

    if punch is not None:
        if punch.in_progress:
            return DayStatus.IN_PROGRESS
        return classify(shift, punch.effective_check_in, punch.effective_check_out, thresholds).as_day_status()

    return DayStatus.ABSENT
