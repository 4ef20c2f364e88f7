from __future__ import annotations

from datetime import date

import pytest

from src.emp_hr.emp_hr.core.exceptions import ConfigurationError
from src.emp_hr.emp_hr.shifts.calendar import ShiftCalendar
from tests.fakes import AFTERNOON, GENERAL, InMemoryShifts, InMemoryUsers, make_employee

DAY = date(2026, 2, 2)


def test_assigned_shift_is_used():
    users = InMemoryUsers(make_employee(1, shift_label=AFTERNOON.label))
    calendar = ShiftCalendar(InMemoryShifts().list_all(), users, default_label="General")
    assert calendar.resolve_shift(1, DAY) == AFTERNOON


@pytest.mark.parametrize("label", [None, "Does not exist"])
def test_missing_or_unknown_shift_falls_back_to_default(label):
    users = InMemoryUsers(make_employee(1, shift_label=label))
    calendar = ShiftCalendar(InMemoryShifts().list_all(), users, default_label="General")
    assert calendar.resolve_shift(1, DAY) == GENERAL


def test_unknown_default_fails_at_construction():
    with pytest.raises(ConfigurationError):
        ShiftCalendar(InMemoryShifts().list_all(), InMemoryUsers(), default_label="Graveyard")


def test_no_assigned_and_no_default_is_a_configuration_error():
    users = InMemoryUsers(make_employee(1, shift_label=None))
    calendar = ShiftCalendar(InMemoryShifts().list_all(), users, default_label=None)
    with pytest.raises(ConfigurationError, match="Misconfigured shift"):
        calendar.resolve_shift(1, DAY)
