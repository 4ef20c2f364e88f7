from __future__ import annotations

from datetime import date, datetime

import pytest

from src.emp_hr.emp_hr.core.enums import LeaveHalf, LeaveKind, LeavePortion, LeaveStatus, Role, Weekday
from src.emp_hr.emp_hr.core.exceptions import AuthorizationError, NotFoundError
from src.emp_hr.emp_hr.days.service import DayResolutionService
from src.emp_hr.emp_hr.reports.service import REPORT_FIELDS, AttendanceReportService
from src.emp_hr.emp_hr.shifts.calendar import ShiftCalendar
from tests.fakes import InMemoryAttendance, InMemoryLeaves, InMemoryShifts, InMemoryUsers, InMemoryWeekOffs, make_employee


def build():
    users = InMemoryUsers(
        make_employee(1, reporting_manager_id=5),
        make_employee(2),
        make_employee(5, role=Role.TEAMLEADER),
        make_employee(9, role=Role.ADMIN),
    )
    attendance = InMemoryAttendance()
    leaves = InMemoryLeaves()
    weekoffs = InMemoryWeekOffs({"Engineering": {Weekday.SAT, Weekday.SUN}})
    calendar = ShiftCalendar(InMemoryShifts().list_all(), users, default_label="General")
    days = DayResolutionService(attendance, leaves, weekoffs, users, calendar)
    return AttendanceReportService(days, users), attendance, leaves


def report(svc, now, *, viewer_id=1, viewer_role=Role.EMPLOYEE, employee_id=1):
    return svc.build_attendance_report(
        viewer_id=viewer_id,
        viewer_role=viewer_role,
        employee_id=employee_id,
        start=date(2026, 2, 1),
        end=date(2026, 2, 4),
        now=now,
    )


def test_rows_carry_punch_times_and_status(fixed_now):
    svc, attendance, _ = build()
    attendance.add(1, datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 19, 0))
    attendance.add(1, datetime(2026, 2, 3, 10, 20), datetime(2026, 2, 3, 18, 50))

    data = report(svc, fixed_now)

    assert [r["date"] for r in data.rows] == ["2026-02-01", "2026-02-02", "2026-02-03", "2026-02-04"]
    assert all(list(r) == REPORT_FIELDS for r in data.rows)

    sunday, monday, tuesday, wednesday = data.rows
    assert sunday["status"] == "WEEK_OFF"
    assert sunday["check_in"] == "-"
    assert monday["status"] == "PRESENT"
    assert monday["worked_hours"] == "09:00"
    assert tuesday["status"] == "LATE_MARK_PRESENT"
    assert tuesday["check_in"] == "10:20"
    assert tuesday["worked_hours"] == "08:30"
    assert wednesday["status"] == "ABSENT"
    assert wednesday["worked_hours"] == "00:00"


def test_summary_totals_hours_and_counts(fixed_now):
    svc, attendance, _ = build()
    attendance.add(1, datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 19, 0))
    attendance.add(1, datetime(2026, 2, 3, 10, 20), datetime(2026, 2, 3, 18, 50))

    summary = report(svc, fixed_now).summary

    assert summary["employee_id"] == 1
    assert summary["start"] == "2026-02-01"
    assert summary["end"] == "2026-02-04"
    assert summary["total_hours"] == "17:30"
    assert summary["counts"]["PRESENT"] == 1
    assert summary["counts"]["LATE_MARK_PRESENT"] == 1
    assert summary["counts"]["WEEK_OFF"] == 1
    assert summary["counts"]["ABSENT"] == 1


def test_approved_leave_type_is_reported(fixed_now):
    svc, _, leaves = build()
    leaves.create(
        employee_id=1,
        leave_date=date(2026, 2, 4),
        kind=LeaveKind.UNPAID,
        portion=LeavePortion.FULL,
        half=LeaveHalf.NONE,
        reason="errand",
        status=LeaveStatus.APPROVED,
        applied_on=datetime(2026, 2, 1, 9, 0),
    )

    row = report(svc, fixed_now).rows[-1]

    assert row["status"] == "ON_LEAVE"
    assert row["leave_type"] == LeaveKind.UNPAID.value


@pytest.mark.parametrize(
    "viewer_id, viewer_role",
    [(1, Role.EMPLOYEE), (5, Role.TEAMLEADER), (9, Role.ADMIN)],
)
def test_self_manager_and_admin_can_view(fixed_now, viewer_id, viewer_role):
    svc, _, _ = build()
    data = report(svc, fixed_now, viewer_id=viewer_id, viewer_role=viewer_role)
    assert len(data.rows) == 4


def test_other_employees_cannot_view(fixed_now):
    svc, _, _ = build()
    with pytest.raises(AuthorizationError):
        report(svc, fixed_now, viewer_id=2, viewer_role=Role.EMPLOYEE)
    with pytest.raises(AuthorizationError):
        report(svc, fixed_now, viewer_id=5, viewer_role=Role.TEAMLEADER, employee_id=2)


def test_unknown_employee_is_not_found(fixed_now):
    svc, _, _ = build()
    with pytest.raises(NotFoundError):
        report(svc, fixed_now, viewer_role=Role.ADMIN, employee_id=77)
