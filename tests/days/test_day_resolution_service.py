from __future__ import annotations

from datetime import date, datetime

import pytest

from src.emp_hr.emp_hr.core.enums import DayStatus, LeaveHalf, LeaveKind, LeavePortion, LeaveStatus, Weekday
from src.emp_hr.emp_hr.core.exceptions import NotFoundError, ValidationError
from src.emp_hr.emp_hr.days.service import DayResolutionService
from src.emp_hr.emp_hr.shifts.calendar import ShiftCalendar
from tests.fakes import InMemoryAttendance, InMemoryLeaves, InMemoryShifts, InMemoryUsers, InMemoryWeekOffs, make_employee


def build():
    users = InMemoryUsers(make_employee(1))
    attendance = InMemoryAttendance()
    leaves = InMemoryLeaves()
    weekoffs = InMemoryWeekOffs({"Engineering": {Weekday.SAT, Weekday.SUN}})
    calendar = ShiftCalendar(InMemoryShifts().list_all(), users, default_label="General")
    svc = DayResolutionService(attendance, leaves, weekoffs, users, calendar)
    return svc, attendance, leaves, weekoffs


def test_range_matches_per_day_resolution(fixed_now):
    svc, attendance, leaves, weekoffs = build()
    attendance.add(1, datetime(2026, 2, 1, 10, 0), datetime(2026, 2, 1, 19, 0))  # Sunday
    attendance.add(1, datetime(2026, 2, 2, 10, 20), datetime(2026, 2, 2, 19, 0))
    attendance.add(1, datetime(2026, 2, 4, 10, 0))
    leaves.create(
        employee_id=1,
        leave_date=date(2026, 2, 3),
        kind=LeaveKind.PAID,
        portion=LeavePortion.FULL,
        half=LeaveHalf.NONE,
        reason="trip",
        status=LeaveStatus.APPROVED,
        applied_on=datetime(2026, 1, 30, 9, 0),
    )
    weekoffs.upsert_override(employee_id=1, day=date(2026, 1, 31), is_week_off=False, reason=None, approved_by=9)

    start, end = date(2026, 1, 30), date(2026, 2, 6)
    ranged = svc.resolve_range(1, start, end, fixed_now)
    single = [svc.resolve(1, d.day, fixed_now) for d in ranged]

    assert ranged == single
    assert [d.status for d in ranged] == [
        DayStatus.ABSENT,  # Fri
        DayStatus.ABSENT,  # Sat, override makes it a working day
        DayStatus.WEEK_OFF,  # Sun with a stray punch
        DayStatus.LATE_MARK_PRESENT,
        DayStatus.ON_LEAVE,
        DayStatus.IN_PROGRESS,
        DayStatus.FUTURE,
        DayStatus.FUTURE,
    ]


def test_summary_counts_every_status(fixed_now):
    svc, attendance, _, _ = build()
    attendance.add(1, datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 19, 0))

    counts = svc.summarize(1, date(2026, 2, 1), date(2026, 2, 4), fixed_now).counts

    assert set(counts) == {s.value for s in DayStatus}
    assert counts["PRESENT"] == 1
    assert counts["WEEK_OFF"] == 1
    assert counts["ABSENT"] == 2
    assert sum(counts.values()) == 4


def test_range_rejects_reversed_bounds(fixed_now):
    svc, *_ = build()
    with pytest.raises(ValidationError):
        svc.resolve_range(1, date(2026, 2, 4), date(2026, 2, 1), fixed_now)


def test_unknown_employee_is_not_found(fixed_now):
    svc, *_ = build()
    with pytest.raises(NotFoundError):
        svc.resolve(42, date(2026, 2, 2), fixed_now)
