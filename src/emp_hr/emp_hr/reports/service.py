from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..common.datetime_utils import fmt_hhmm, minutes_between
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..days.resolver import ResolvedDay
from ..days.service import DayResolutionService
from ..users.model import Employee
from ..users.repository import UserRepository

REPORT_FIELDS = [
    "date",
    "employee_id",
    "full_name",
    "department",
    "shift",
    "check_in",
    "check_out",
    "worked_hours",
    "status",
    "leave_type",
    "remarks",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


def _worked_minutes(day: ResolvedDay) -> int:
    punch = day.punch
    if not punch or punch.effective_check_out is None:
        return 0
    return max(minutes_between(punch.effective_check_in, punch.effective_check_out), 0)


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class AttendanceReportService:
    """Per-day attendance report for one employee, built on resolved day statuses."""

    def __init__(self, days: DayResolutionService, users: UserRepository):
        self._days = days
        self._users = users

    def _target(self, viewer_id: int, viewer_role: Role, employee_id: int) -> Employee:
        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        if viewer_role == Role.ADMIN or employee.employee_id == int(viewer_id):
            return employee
        if viewer_role == Role.TEAMLEADER and employee.reporting_manager_id == int(viewer_id):
            return employee
        raise AuthorizationError("Not allowed to view this employee's report")

    def build_attendance_report(
        self,
        *,
        viewer_id: int,
        viewer_role: Role,
        employee_id: int,
        start: date,
        end: date,
        now: datetime,
    ) -> ReportData:
        employee = self._target(viewer_id, viewer_role, employee_id)
        summary = self._days.summarize(employee.employee_id, start, end, now)

        rows: list[dict] = []
        total_minutes = 0
        for d in summary.days:
            minutes = _worked_minutes(d)
            total_minutes += minutes
            rows.append(
                {
                    "date": d.day.isoformat(),
                    "employee_id": employee.employee_id,
                    "full_name": employee.full_name,
                    "department": employee.department or "-",
                    "shift": employee.shift_label or "-",
                    "check_in": fmt_hhmm(d.punch.effective_check_in) if d.punch else "-",
                    "check_out": fmt_hhmm(d.punch.effective_check_out) if d.punch else "-",
                    "worked_hours": _hhmm(minutes),
                    "status": d.status.value,
                    "leave_type": d.leave.kind.value if d.leave and d.leave.is_approved else "",
                    "remarks": (d.punch.remarks or "") if d.punch else "",
                }
            )

        return ReportData(
            rows=rows,
            summary={
                "employee_id": employee.employee_id,
                "full_name": employee.full_name,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "counts": summary.counts,
                "total_hours": _hhmm(total_minutes),
            },
        )
