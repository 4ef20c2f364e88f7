from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import minutes_between
from ..core.constants import (
    DEFAULT_HALF_DAY_MAX_MINUTES,
    DEFAULT_HALF_DAY_THRESHOLD_MINUTES,
    DEFAULT_LATE_THRESHOLD_MINUTES,
)
from ..core.enums import AttendanceOutcome
from ..shifts.model import ShiftWindow


@dataclass(frozen=True)
class AttendanceThresholds:
    late_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    half_day_minutes: int = DEFAULT_HALF_DAY_THRESHOLD_MINUTES
    half_day_max_minutes: int = DEFAULT_HALF_DAY_MAX_MINUTES

    @classmethod
    def from_settings(cls, settings) -> "AttendanceThresholds":
        return cls(
            late_minutes=int(getattr(settings, "LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES)),
            half_day_minutes=int(getattr(settings, "HALF_DAY_THRESHOLD_MINUTES", DEFAULT_HALF_DAY_THRESHOLD_MINUTES)),
            half_day_max_minutes=int(getattr(settings, "HALF_DAY_MAX_MINUTES", DEFAULT_HALF_DAY_MAX_MINUTES)),
        )


DEFAULT_THRESHOLDS = AttendanceThresholds()


def classify(
    shift: ShiftWindow,
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    thresholds: AttendanceThresholds = DEFAULT_THRESHOLDS,
) -> AttendanceOutcome:
    """Classify a completed punch against its shift window.

    All arithmetic is in whole minutes. Rules, in order:

    - a missing instant is ABSENT (an open punch is the caller's business);
    - missing time within [half_day, half_day_max] that sits at the start of
      the shift (arrival a whole half late) is HALF_DAY_FIRST;
    - otherwise arriving more than ``late_minutes`` after the start is
      LATE_MARK_PRESENT, however long the employee then works;
    - missing time within the window that sits at the end of the shift is
      HALF_DAY_SECOND;
    - anything else, including a gap split across the day or larger than
      ``half_day_max``, is PRESENT.
    """

    if check_in is None or check_out is None:
        return AttendanceOutcome.ABSENT

    shift_start, shift_end = shift.anchor(check_in.date())

    late = minutes_between(shift_start, check_in)
    worked = minutes_between(check_in, check_out)
    missing = minutes_between(shift_start, shift_end) - worked
    in_half_day_window = thresholds.half_day_minutes <= missing <= thresholds.half_day_max_minutes

    if in_half_day_window and late >= thresholds.half_day_minutes:
        return AttendanceOutcome.HALF_DAY_FIRST

    if late > thresholds.late_minutes:
        return AttendanceOutcome.LATE_MARK_PRESENT

    if in_half_day_window and minutes_between(check_out, shift_end) >= thresholds.half_day_minutes:
        return AttendanceOutcome.HALF_DAY_SECOND

    return AttendanceOutcome.PRESENT
