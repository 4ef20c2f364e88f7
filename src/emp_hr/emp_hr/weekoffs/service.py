from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.validators import optional_str, require_non_empty
from ..core.enums import Role, Weekday
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import DepartmentWeekOff, WeekOffOverride
from .repository import WeekOffRepository

logger = logging.getLogger(__name__)


class WeekOffService:
    """Use case: department week-off calendars and per-employee overrides (admin)."""

    def __init__(self, weekoffs: WeekOffRepository, users: UserRepository):
        self._weekoffs = weekoffs
        self._users = users

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin privileges required")

    @staticmethod
    def parse_days(values: Iterable[str]) -> frozenset[Weekday]:
        try:
            return frozenset(Weekday.parse(str(v)) for v in values)
        except ValueError as e:
            raise ValidationError(str(e)) from None

    def get_department(self, department: str) -> DepartmentWeekOff:
        record = self._weekoffs.get_department(department)
        if not record:
            raise NotFoundError("Department not found")
        return record

    def set_department(
        self,
        *,
        current_role: Role,
        admin_id: int,
        department: str,
        week_off_days: Optional[Sequence[str]],
    ) -> DepartmentWeekOff:
        self._require_admin(current_role)
        department = require_non_empty(department, "department")
        if week_off_days is None:
            raise ValidationError("department and weekOffDays required")

        days = self.parse_days(week_off_days)
        self._weekoffs.upsert_department(department=department, week_off_days=days, updated_by=int(admin_id))
        logger.info("Week-off days for %s set to %s by %s", department, sorted(d.name for d in days), admin_id)
        return DepartmentWeekOff(department=department, week_off_days=days)

    def list_overrides(self, *, current_role: Role, employee_id: int, start: date, end: date) -> Sequence[WeekOffOverride]:
        self._require_admin(current_role)
        if end < start:
            raise ValidationError("End date must not be before start date")
        return self._weekoffs.list_overrides(employee_id=int(employee_id), start=start, end=end)

    def set_override(
        self,
        *,
        current_role: Role,
        admin_id: int,
        employee_id: int,
        day: date,
        is_week_off: bool = True,
        reason: Optional[str] = None,
    ) -> WeekOffOverride:
        self._require_admin(current_role)
        if not self._users.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        reason = optional_str(reason)
        self._weekoffs.upsert_override(
            employee_id=int(employee_id),
            day=day,
            is_week_off=bool(is_week_off),
            reason=reason,
            approved_by=int(admin_id),
        )
        return WeekOffOverride(
            employee_id=int(employee_id),
            day=day,
            is_week_off=bool(is_week_off),
            reason=reason,
            approved_by=int(admin_id),
        )

    def delete_override(self, *, current_role: Role, employee_id: int, day: date) -> None:
        self._require_admin(current_role)
        if not self._weekoffs.delete_override(employee_id=int(employee_id), day=day):
            raise NotFoundError("Override not found")
