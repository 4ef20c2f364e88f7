from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Optional

from ..core.enums import Weekday


@dataclass(frozen=True)
class DepartmentWeekOff:
    """Default week-off weekdays for everyone in a department."""

    department: str
    week_off_days: FrozenSet[Weekday]

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "week_off_days": [d.label for d in sorted(self.week_off_days)],
        }


@dataclass(frozen=True)
class WeekOffOverride:
    """Per-employee exception to the department calendar on one day."""

    employee_id: int
    day: date
    is_week_off: bool
    reason: Optional[str] = None
    approved_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "date": self.day.isoformat(),
            "is_week_off": self.is_week_off,
            "reason": self.reason,
            "approved_by": self.approved_by,
        }
