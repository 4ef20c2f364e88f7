from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendancePunch, Location


class AttendanceRepository(Protocol):
    def get_by_id(self, punch_id: int) -> Optional[AttendancePunch]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendancePunch]:
        raise NotImplementedError

    def list_range(self, *, employee_id: int, start: Optional[date], end: Optional[date]) -> Sequence[AttendancePunch]:
        """Punches of one employee, newest day first. Open bounds are allowed."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: datetime,
        location: Location,
    ) -> int:
        """Insert the day's punch.

        Raises ConflictError when a punch already exists for (employee_id, work_date).
        """

        raise NotImplementedError

    def update_checkout(self, *, punch_id: int, check_out: datetime, location: Location) -> bool:
        """Set check-out on an open punch; False if it was already closed."""

        raise NotImplementedError

    def save_correction(
        self,
        *,
        punch_id: int,
        corrected_check_in: Optional[datetime],
        corrected_check_out: Optional[datetime],
        remarks: Optional[str],
        corrected_by: int,
        corrected_at: datetime,
    ) -> bool:
        raise NotImplementedError
