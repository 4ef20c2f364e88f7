from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_str
from ..core.enums import DayStatus, PunchState
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..days.service import DayResolutionService
from ..users.repository import UserRepository
from .model import AttendancePunch, Location
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodayView:
    state: PunchState
    punch: Optional[AttendancePunch]

    def to_dict(self) -> dict:
        return {"state": self.state.value, "attendance": self.punch.to_dict() if self.punch else None}


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        days: DayResolutionService,
    ):
        self._attendance = attendance
        self._users = users
        self._days = days

    def _require_active(self, employee_id: int) -> None:
        employee = self._users.get_by_id(int(employee_id))
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")

    def check_in(self, employee_id: int, *, now: datetime | None = None, location: Location | None = None) -> AttendancePunch:
        now = now or now_local()
        today = now.date()
        self._require_active(employee_id)

        if self._attendance.get_for_employee_and_date(int(employee_id), today):
            raise ConflictError("Already checked in today")

        # A concurrent check-in that slips past the read above fails on the unique key.
        punch_id = self._attendance.create_checkin(
            employee_id=int(employee_id),
            work_date=today,
            check_in=now,
            location=location or Location(),
        )
        logger.info("Employee %s checked in at %s (punch id=%s)", employee_id, now.isoformat(), punch_id)
        return self._attendance.get_by_id(punch_id)

    def check_out(self, employee_id: int, *, now: datetime | None = None, location: Location | None = None) -> AttendancePunch:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record:
            raise ValidationError("No check-in record for today")
        if record.check_out is not None:
            raise ValidationError("Already checked out today")

        if not self._attendance.update_checkout(punch_id=record.punch_id, check_out=now, location=location or Location()):
            raise ValidationError("Already checked out today")
        logger.info("Employee %s checked out at %s (punch id=%s)", employee_id, now.isoformat(), record.punch_id)
        return self._attendance.get_by_id(record.punch_id)

    def correct_punch(
        self,
        employee_id: int,
        punch_id: int,
        *,
        corrected_check_in: Optional[datetime] = None,
        corrected_check_out: Optional[datetime] = None,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendancePunch:
        """Owner correction of a punch; the corrected instants win over the recorded ones."""

        now = now or now_local()
        punch = self._attendance.get_by_id(int(punch_id))
        if not punch:
            raise NotFoundError("Attendance record not found")
        if punch.employee_id != int(employee_id):
            raise AuthorizationError("You can only correct your own attendance")

        reason = optional_str(reason)
        if corrected_check_in is None and corrected_check_out is None and reason is None:
            raise ValidationError("Provide at least one change")

        new_in = corrected_check_in or punch.effective_check_in
        new_out = corrected_check_out or punch.effective_check_out
        if new_out is not None and new_out < new_in:
            raise ValidationError("Check-out cannot be earlier than check-in")

        self._attendance.save_correction(
            punch_id=punch.punch_id,
            corrected_check_in=corrected_check_in,
            corrected_check_out=corrected_check_out,
            remarks=reason,
            corrected_by=int(employee_id),
            corrected_at=now,
        )
        return self._attendance.get_by_id(punch.punch_id)

    def history(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: datetime | None = None,
    ) -> list[dict]:
        """Punches newest first, each with the resolved status of its day."""

        now = now or now_local()
        punches = list(self._attendance.list_range(employee_id=int(employee_id), start=start, end=end))
        if not punches:
            return []

        first = min(p.work_date for p in punches)
        last = max(p.work_date for p in punches)
        statuses = {d.day: d.status for d in self._days.resolve_range(int(employee_id), first, last, now)}

        rows = []
        for p in punches:
            row = p.to_dict()
            row["status"] = statuses.get(p.work_date, DayStatus.ABSENT).value
            rows.append(row)
        return rows

    def today(self, employee_id: int, *, now: datetime | None = None) -> TodayView:
        now = now or now_local()
        punch = self._attendance.get_for_employee_and_date(int(employee_id), now.date())
        if not punch:
            return TodayView(state=PunchState.NOT_CHECKED_IN, punch=None)
        state = PunchState.IN_PROGRESS if punch.in_progress else PunchState.CHECKED_OUT
        return TodayView(state=state, punch=punch)
