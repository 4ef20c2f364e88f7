from __future__ import annotations

from datetime import date

import pytest

from src.emp_hr.emp_hr.core.enums import Role, Weekday
from src.emp_hr.emp_hr.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.emp_hr.emp_hr.weekoffs.service import WeekOffService
from tests.fakes import InMemoryUsers, InMemoryWeekOffs, make_employee


def build():
    return WeekOffService(InMemoryWeekOffs({"Operations": {Weekday.SUN}}), InMemoryUsers(make_employee(1)))


def test_weekday_names_are_parsed_into_the_closed_set():
    assert WeekOffService.parse_days(["Saturday", "sun", "SUN"]) == frozenset({Weekday.SAT, Weekday.SUN})
    with pytest.raises(ValidationError):
        WeekOffService.parse_days(["Funday"])


@pytest.mark.parametrize("name", ["Sunflower", "Monkey", "sa", "Saturdays"])
def test_weekday_prefixes_are_not_day_names(name):
    with pytest.raises(ValidationError):
        WeekOffService.parse_days([name])


def test_set_and_get_department():
    svc = build()
    record = svc.set_department(
        current_role=Role.ADMIN, admin_id=99, department="Engineering", week_off_days=["Saturday", "Sunday"]
    )
    assert record.to_dict() == {"department": "Engineering", "week_off_days": ["Saturday", "Sunday"]}
    assert svc.get_department("Engineering").week_off_days == frozenset({Weekday.SAT, Weekday.SUN})


def test_unknown_department_is_not_found():
    with pytest.raises(NotFoundError):
        build().get_department("Marketing")


def test_only_admin_manages_week_offs():
    svc = build()
    with pytest.raises(AuthorizationError):
        svc.set_department(current_role=Role.TEAMLEADER, admin_id=2, department="Operations", week_off_days=["SUN"])
    with pytest.raises(AuthorizationError):
        svc.set_override(current_role=Role.EMPLOYEE, admin_id=1, employee_id=1, day=date(2026, 2, 2))


def test_overrides_upsert_list_and_delete():
    svc = build()
    svc.set_override(current_role=Role.ADMIN, admin_id=99, employee_id=1, day=date(2026, 2, 2), reason="comp off")
    svc.set_override(current_role=Role.ADMIN, admin_id=99, employee_id=1, day=date(2026, 2, 2), is_week_off=False)

    overrides = svc.list_overrides(current_role=Role.ADMIN, employee_id=1, start=date(2026, 2, 1), end=date(2026, 2, 28))
    assert len(overrides) == 1
    assert overrides[0].is_week_off is False

    svc.delete_override(current_role=Role.ADMIN, employee_id=1, day=date(2026, 2, 2))
    with pytest.raises(NotFoundError):
        svc.delete_override(current_role=Role.ADMIN, employee_id=1, day=date(2026, 2, 2))


def test_override_for_unknown_employee_fails():
    with pytest.raises(NotFoundError):
        build().set_override(current_role=Role.ADMIN, admin_id=99, employee_id=7, day=date(2026, 2, 2))
