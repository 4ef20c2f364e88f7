from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.emp_hr.emp_hr.core.enums import Role
from src.emp_hr.emp_hr.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.emp_hr.emp_hr.shifts.calendar import ShiftCalendar
from src.emp_hr.emp_hr.users.service import AuthService, UserService
from tests.fakes import InMemoryShifts, InMemoryUsers, make_employee

SECRET = "test-secret"


def build():
    users = InMemoryUsers(
        make_employee(1),
        make_employee(10, role=Role.TEAMLEADER),
        make_employee(99, role=Role.ADMIN),
    )
    calendar = ShiftCalendar(InMemoryShifts().list_all(), users, default_label="General")
    return AuthService(users, calendar, secret_key=SECRET, expires_minutes=60), UserService(users, calendar), users


def register(auth, **kwargs):
    values = dict(first_name="Ana", last_name="Lee", work_email="Ana@Example.com", password="secret123")
    values.update(kwargs)
    return auth.register(**values)


def test_register_then_login_round_trips_claims():
    auth, _, _ = build()
    employee = register(auth, department="Engineering")

    assert employee.role == Role.EMPLOYEE
    assert employee.work_email == "ana@example.com"
    assert employee.shift_label == "General"
    assert employee.paid_leave_balance == 12.0

    result = auth.authenticate("ana@example.com", "secret123")
    claims = auth.decode_token(result.token)
    assert (claims.user_id, claims.role) == (employee.employee_id, Role.EMPLOYEE)


def test_register_validation():
    auth, _, _ = build()
    with pytest.raises(ValidationError):
        register(auth, password="123")
    with pytest.raises(ValidationError):
        register(auth, work_email="not-an-email")
    with pytest.raises(ValidationError, match="Unknown shift"):
        register(auth, shift_label="Graveyard")
    register(auth)
    with pytest.raises(ValidationError, match="already registered"):
        register(auth)


def test_bad_credentials_and_inactive_accounts_fail():
    auth, _, users = build()
    with pytest.raises(AuthenticationError):
        auth.authenticate("user1@example.com", "wrong")
    users.update(1, fields={"is_active": False})
    with pytest.raises(AuthenticationError):
        auth.authenticate("user1@example.com", "secret123")


def test_expired_and_forged_tokens_are_rejected():
    auth, _, users = build()
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    expired = auth.issue_token(users.get_by_id(1), now=past)
    with pytest.raises(AuthenticationError, match="expired"):
        auth.decode_token(expired)

    forged = jwt.encode({"user_id": 99, "role": "admin"}, "other-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError, match="Invalid"):
        auth.decode_token(forged)


def test_update_profile_only_touches_profile_fields():
    _, svc, _ = build()
    updated = svc.update_profile(1, {"mobile_number": "0900", "role": "admin", "first_name": "Bo"})
    assert updated.mobile_number == "0900"
    assert updated.first_name == "Bo"
    assert updated.role == Role.EMPLOYEE
    with pytest.raises(ValidationError):
        svc.update_profile(1, {"last_name": " "})


def test_admin_crud():
    _, svc, _ = build()
    created = svc.create_employee(
        current_role=Role.ADMIN,
        first_name="Cy",
        last_name="Dee",
        work_email="cy@example.com",
        password="secret123",
        role="teamleader",
        employee_code="E-7",
    )
    assert created.role == Role.TEAMLEADER

    with pytest.raises(ConflictError):
        svc.create_employee(
            current_role=Role.ADMIN, first_name="X", last_name="Y", work_email="cy@example.com", password="secret123"
        )

    updated = svc.update_employee(
        current_role=Role.ADMIN, employee_id=created.employee_id, changes={"paid_leave_balance": "3.5"}
    )
    assert updated.paid_leave_balance == 3.5

    svc.delete_employee(current_role=Role.ADMIN, current_user_id=99, employee_id=created.employee_id)
    with pytest.raises(NotFoundError):
        svc.get(created.employee_id)
    with pytest.raises(ValidationError):
        svc.delete_employee(current_role=Role.ADMIN, current_user_id=99, employee_id=99)
    with pytest.raises(AuthorizationError):
        svc.list_employees(current_role=Role.TEAMLEADER)


def test_assign_manager_and_team_members():
    _, svc, _ = build()
    svc.assign_manager(current_role=Role.ADMIN, employee_id=1, manager_id=10)
    assert [e.employee_id for e in svc.team_members(10)] == [1]

    with pytest.raises(ValidationError):
        svc.assign_manager(current_role=Role.ADMIN, employee_id=10, manager_id=1)
    with pytest.raises(ValidationError):
        svc.assign_manager(current_role=Role.ADMIN, employee_id=1, manager_id=1)
    with pytest.raises(AuthorizationError):
        svc.team_members(1)

    svc.assign_manager(current_role=Role.ADMIN, employee_id=1, manager_id=None)
    assert svc.team_members(10) == []


def test_dashboard_stats():
    _, svc, _ = build()
    stats = svc.stats(current_role=Role.ADMIN)
    assert (stats.total_users, stats.active_users, stats.team_leaders, stats.admins) == (3, 3, 1, 1)
