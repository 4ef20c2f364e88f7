from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_PAID_LEAVE_BALANCE
from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee account.

    Plain data object; no DB access here.
    """

    employee_id: int
    first_name: str
    last_name: str
    work_email: str
    password_hash: str
    role: Role
    department: Optional[str] = None
    shift_label: Optional[str] = None
    reporting_manager_id: Optional[int] = None
    paid_leave_balance: float = DEFAULT_PAID_LEAVE_BALANCE
    employee_code: Optional[str] = None
    mobile_number: Optional[str] = None
    designation: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_public(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "work_email": self.work_email,
            "role": self.role.value,
            "department": self.department,
            "shift_label": self.shift_label,
            "reporting_manager_id": self.reporting_manager_id,
            "paid_leave_balance": self.paid_leave_balance,
            "employee_code": self.employee_code,
            "mobile_number": self.mobile_number,
            "designation": self.designation,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    active_users: int
    team_leaders: int
    admins: int
