from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_str, require_enum, require_min_length, require_non_empty
from ..core.constants import DEFAULT_JWT_EXPIRES_MINUTES, DEFAULT_PAID_LEAVE_BALANCE
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..shifts.calendar import ShiftCalendar
from .model import DashboardStats, Employee
from .repository import UserRepository

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# Profile fields an employee may change on their own record.
_PROFILE_FIELDS = ("first_name", "last_name", "mobile_number", "designation")

# Fields an admin may change through update_employee.
_ADMIN_FIELDS = _PROFILE_FIELDS + (
    "work_email",
    "role",
    "department",
    "shift_label",
    "paid_leave_balance",
    "employee_code",
    "is_active",
)


@dataclass(frozen=True)
class TokenClaims:
    """What the bearer token carries about the caller."""

    user_id: int
    role: Role


@dataclass(frozen=True)
class LoginResult:
    token: str
    employee: Employee

    def to_dict(self) -> dict:
        return {"token": self.token, "user": self.employee.to_public()}


class AuthService:
    """Use case: register, log in and verify bearer tokens."""

    def __init__(
        self,
        users: UserRepository,
        calendar: ShiftCalendar,
        *,
        secret_key: str,
        expires_minutes: int = DEFAULT_JWT_EXPIRES_MINUTES,
    ):
        self._users = users
        self._calendar = calendar
        self._secret_key = secret_key
        self._expires = timedelta(minutes=int(expires_minutes))

    def issue_token(self, employee: Employee, *, now: datetime | None = None) -> str:
        issued = now or datetime.now(timezone.utc)
        payload = {
            "user_id": employee.employee_id,
            "role": employee.role.value,
            "iat": issued,
            "exp": issued + self._expires,
        }
        return jwt.encode(payload, self._secret_key, algorithm=JWT_ALGORITHM)

    def decode_token(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired") from None
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token") from None

        try:
            return TokenClaims(user_id=int(payload["user_id"]), role=Role(payload["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token") from None

    def authenticate(self, work_email: str, password: str) -> LoginResult:
        employee = self._users.get_by_email((work_email or "").strip().lower())
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("Employee %s logged in", employee.employee_id)
        return LoginResult(token=self.issue_token(employee), employee=employee)

    def register(
        self,
        *,
        first_name: str,
        last_name: str,
        work_email: str,
        password: str,
        department: Optional[str] = None,
        shift_label: Optional[str] = None,
        mobile_number: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Employee:
        """Self-registration; always creates a plain employee account."""

        fields = _new_employee_fields(
            calendar=self._calendar,
            first_name=first_name,
            last_name=last_name,
            work_email=work_email,
            password=password,
            role=Role.EMPLOYEE,
            department=department,
            shift_label=shift_label,
            mobile_number=mobile_number,
            designation=designation,
        )
        if self._users.get_by_email(fields["work_email"]):
            raise ValidationError("Email already registered")

        employee_id = self._users.create(fields=fields)
        logger.info("Employee %s registered (%s)", employee_id, fields["work_email"])
        return self._users.get_by_id(employee_id)


def _new_employee_fields(
    *,
    calendar: ShiftCalendar,
    first_name: str,
    last_name: str,
    work_email: str,
    password: str,
    role: Role,
    department: Optional[str],
    shift_label: Optional[str],
    mobile_number: Optional[str] = None,
    designation: Optional[str] = None,
    employee_code: Optional[str] = None,
) -> dict:
    first_name = require_non_empty(first_name, "first_name")
    last_name = require_non_empty(last_name, "last_name")
    work_email = require_non_empty(work_email, "work_email").lower()
    if "@" not in work_email:
        raise ValidationError("Invalid work_email")
    require_min_length(password, "password", 6)

    shift_label = optional_str(shift_label) or (calendar.default.label if calendar.default else None)
    if shift_label is not None and calendar.window_for(shift_label) is None:
        raise ValidationError(f"Unknown shift: {shift_label}")

    return {
        "first_name": first_name,
        "last_name": last_name,
        "work_email": work_email,
        "password_hash": generate_password_hash(password),
        "role": role,
        "department": optional_str(department),
        "shift_label": shift_label,
        "paid_leave_balance": DEFAULT_PAID_LEAVE_BALANCE,
        "mobile_number": optional_str(mobile_number),
        "designation": optional_str(designation),
        "employee_code": optional_str(employee_code),
        "is_active": True,
    }


class UserService:
    """Use case: profiles, admin management and team structure."""

    def __init__(self, users: UserRepository, calendar: ShiftCalendar):
        self._users = users
        self._calendar = calendar

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin privileges required")

    def get(self, employee_id: int) -> Employee:
        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def update_profile(self, employee_id: int, changes: dict) -> Employee:
        fields = {k: optional_str(changes.get(k)) for k in _PROFILE_FIELDS if k in changes}
        for name in ("first_name", "last_name"):
            if name in fields and fields[name] is None:
                raise ValidationError(f"{name} is required")
        if not fields:
            raise ValidationError("Nothing to update")

        self.get(employee_id)
        self._users.update(int(employee_id), fields=fields)
        return self.get(employee_id)

    def list_employees(self, *, current_role: Role) -> Sequence[Employee]:
        self._require_admin(current_role)
        return self._users.list_all()

    def create_employee(
        self,
        *,
        current_role: Role,
        first_name: str,
        last_name: str,
        work_email: str,
        password: str,
        role: str | Role = Role.EMPLOYEE,
        department: Optional[str] = None,
        shift_label: Optional[str] = None,
        employee_code: Optional[str] = None,
        mobile_number: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Employee:
        self._require_admin(current_role)
        fields = _new_employee_fields(
            calendar=self._calendar,
            first_name=first_name,
            last_name=last_name,
            work_email=work_email,
            password=password,
            role=require_enum(role, Role, "role"),
            department=department,
            shift_label=shift_label,
            mobile_number=mobile_number,
            designation=designation,
            employee_code=employee_code,
        )
        employee_id = self._users.create(fields=fields)
        logger.info("Employee %s created by admin", employee_id)
        return self.get(employee_id)

    def update_employee(self, *, current_role: Role, employee_id: int, changes: dict) -> Employee:
        self._require_admin(current_role)
        self.get(employee_id)

        fields = {k: changes[k] for k in _ADMIN_FIELDS if k in changes}
        if "role" in fields:
            fields["role"] = require_enum(fields["role"], Role, "role")
        if "shift_label" in fields and self._calendar.window_for(fields["shift_label"]) is None:
            raise ValidationError(f"Unknown shift: {fields['shift_label']}")
        if "paid_leave_balance" in fields:
            try:
                fields["paid_leave_balance"] = float(fields["paid_leave_balance"])
            except (TypeError, ValueError):
                raise ValidationError("Invalid paid_leave_balance") from None
            if fields["paid_leave_balance"] < 0:
                raise ValidationError("paid_leave_balance cannot be negative")
        if "work_email" in fields:
            fields["work_email"] = require_non_empty(fields["work_email"], "work_email").lower()
        if "password" in changes:
            require_min_length(changes["password"], "password", 6)
            fields["password_hash"] = generate_password_hash(changes["password"])
        if not fields:
            raise ValidationError("Nothing to update")

        self._users.update(int(employee_id), fields=fields)
        return self.get(employee_id)

    def delete_employee(self, *, current_role: Role, current_user_id: int, employee_id: int) -> None:
        self._require_admin(current_role)
        if int(employee_id) == int(current_user_id):
            raise ValidationError("You cannot delete your own account")
        self.get(employee_id)
        if not self._users.delete_by_id(int(employee_id)):
            raise ValidationError("Failed to delete employee")
        logger.info("Employee %s deleted", employee_id)

    def assign_manager(self, *, current_role: Role, employee_id: int, manager_id: Optional[int]) -> Employee:
        self._require_admin(current_role)
        self.get(employee_id)
        if manager_id is not None:
            if int(manager_id) == int(employee_id):
                raise ValidationError("An employee cannot report to themselves")
            manager = self.get(manager_id)
            if manager.role not in (Role.TEAMLEADER, Role.ADMIN):
                raise ValidationError("Reporting manager must be a team leader or admin")

        self._users.update(
            int(employee_id),
            fields={"reporting_manager_id": int(manager_id) if manager_id is not None else None},
        )
        return self.get(employee_id)

    def team_members(self, leader_id: int) -> Sequence[Employee]:
        leader = self.get(leader_id)
        if leader.role not in (Role.TEAMLEADER, Role.ADMIN):
            raise AuthorizationError("Only team leaders have a team")
        return self._users.list_reports_of(leader.employee_id)

    def stats(self, *, current_role: Role) -> DashboardStats:
        self._require_admin(current_role)
        return self._users.stats()
