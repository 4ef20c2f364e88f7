from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime

from ..attendance.classifier import DEFAULT_THRESHOLDS, AttendanceThresholds
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_days
from ..core.enums import DayStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..leaves.repository import LeaveRepository
from ..shifts.calendar import ShiftCalendar
from ..users.model import Employee
from ..users.repository import UserRepository
from ..weekoffs.repository import WeekOffRepository
from .resolver import ResolvedDay, resolve_day


@dataclass(frozen=True)
class DaySummary:
    employee_id: int
    start: date
    end: date
    days: list[ResolvedDay]

    @property
    def counts(self) -> dict[str, int]:
        tally = Counter(d.status for d in self.days)
        return {status.value: tally.get(status, 0) for status in DayStatus}

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "counts": self.counts,
            "days": [d.to_dict() for d in self.days],
        }


class DayResolutionService:
    """Fetches the inputs of ``resolve_day`` and applies it per day."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        weekoffs: WeekOffRepository,
        users: UserRepository,
        calendar: ShiftCalendar,
        *,
        thresholds: AttendanceThresholds = DEFAULT_THRESHOLDS,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._weekoffs = weekoffs
        self._users = users
        self._calendar = calendar
        self._thresholds = thresholds

    def _employee(self, employee_id: int) -> Employee:
        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _department_days(self, employee: Employee):
        if not employee.department:
            return frozenset()
        record = self._weekoffs.get_department(employee.department)
        return record.week_off_days if record else frozenset()

    def resolve(self, employee_id: int, day: date, now: datetime) -> ResolvedDay:
        employee = self._employee(employee_id)
        punch = self._attendance.get_for_employee_and_date(employee.employee_id, day)
        leave = self._leaves.get_for_employee_and_date(employee.employee_id, day)

        status = resolve_day(
            day=day,
            now=now,
            shift=self._calendar.resolve_shift(employee.employee_id, day),
            punch=punch,
            leave=leave,
            override=self._weekoffs.get_override(employee_id=employee.employee_id, day=day),
            department_week_offs=self._department_days(employee),
            thresholds=self._thresholds,
        )
        return ResolvedDay(day=day, status=status, punch=punch, leave=leave)

    def resolve_range(self, employee_id: int, start: date, end: date, now: datetime) -> list[ResolvedDay]:
        """Same result as calling ``resolve`` for every day, with one fetch per source."""

        if end < start:
            raise ValidationError("End date must not be before start date")

        employee = self._employee(employee_id)
        shift = self._calendar.window_or_default(employee.shift_label, employee_id=employee.employee_id)
        department_days = self._department_days(employee)

        punches = {p.work_date: p for p in self._attendance.list_range(employee_id=employee.employee_id, start=start, end=end)}
        leaves = {l.leave_date: l for l in self._leaves.list_range(employee_id=employee.employee_id, start=start, end=end)}
        overrides = {o.day: o for o in self._weekoffs.list_overrides(employee_id=employee.employee_id, start=start, end=end)}

        out: list[ResolvedDay] = []
        for day in iter_days(start, end):
            status = resolve_day(
                day=day,
                now=now,
                shift=shift,
                punch=punches.get(day),
                leave=leaves.get(day),
                override=overrides.get(day),
                department_week_offs=department_days,
                thresholds=self._thresholds,
            )
            out.append(ResolvedDay(day=day, status=status, punch=punches.get(day), leave=leaves.get(day)))
        return out

    def summarize(self, employee_id: int, start: date, end: date, now: datetime) -> DaySummary:
        return DaySummary(
            employee_id=int(employee_id),
            start=start,
            end=end,
            days=self.resolve_range(employee_id, start, end, now),
        )
