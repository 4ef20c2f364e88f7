from __future__ import annotations

from datetime import date
from typing import FrozenSet, Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import DepartmentWeekOff, WeekOffOverride


class WeekOffRepository(Protocol):
    def get_department(self, department: str) -> Optional[DepartmentWeekOff]:
        raise NotImplementedError

    def upsert_department(self, *, department: str, week_off_days: FrozenSet[Weekday], updated_by: int) -> None:
        raise NotImplementedError

    def get_override(self, *, employee_id: int, day: date) -> Optional[WeekOffOverride]:
        raise NotImplementedError

    def list_overrides(self, *, employee_id: int, start: date, end: date) -> Sequence[WeekOffOverride]:
        raise NotImplementedError

    def upsert_override(
        self,
        *,
        employee_id: int,
        day: date,
        is_week_off: bool,
        reason: Optional[str],
        approved_by: int,
    ) -> None:
        raise NotImplementedError

    def delete_override(self, *, employee_id: int, day: date) -> bool:
        raise NotImplementedError
