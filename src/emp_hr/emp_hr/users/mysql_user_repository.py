from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_guard
from .model import DashboardStats, Employee
from .repository import UserRepository

_COLUMNS = (
    "employee_id, first_name, last_name, work_email, password_hash, role, department, shift_label, "
    "reporting_manager_id, paid_leave_balance, employee_code, mobile_number, designation, is_active"
)

# Employee attributes that may be written; anything else in ``fields`` is ignored.
_WRITABLE = (
    "first_name",
    "last_name",
    "work_email",
    "password_hash",
    "role",
    "department",
    "shift_label",
    "reporting_manager_id",
    "paid_leave_balance",
    "employee_code",
    "mobile_number",
    "designation",
    "is_active",
)

_DUPLICATE_MSG = "An employee with this email or employee code already exists"


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        work_email=r["work_email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        department=r.get("department"),
        shift_label=r.get("shift_label"),
        reporting_manager_id=int(r["reporting_manager_id"]) if r.get("reporting_manager_id") else None,
        paid_leave_balance=float(r.get("paid_leave_balance") or 0),
        employee_code=r.get("employee_code"),
        mobile_number=r.get("mobile_number"),
        designation=r.get("designation"),
        is_active=bool(r.get("is_active", 1)),
    )


def _db_value(value):
    return value.value if isinstance(value, Role) else value


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_email(self, work_email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE work_email=%s", (work_email,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY first_name, last_name")
            return [_to_employee(r) for r in fetchall(cur)]

    def list_reports_of(self, manager_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE reporting_manager_id=%s ORDER BY first_name, last_name",
                (int(manager_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, *, fields: dict) -> int:
        cols = [c for c in _WRITABLE if c in fields]
        placeholders = ", ".join(["%s"] * len(cols))
        with unique_guard(_DUPLICATE_MSG), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees ({', '.join(cols)}) VALUES ({placeholders})",
                tuple(_db_value(fields[c]) for c in cols),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, *, fields: dict) -> bool:
        cols = [c for c in _WRITABLE if c in fields]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with unique_guard(_DUPLICATE_MSG), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                tuple(_db_value(fields[c]) for c in cols) + (int(employee_id),),
            )
            return cur.rowcount > 0

    def deduct_paid_leave(self, employee_id: int, days: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees SET paid_leave_balance = paid_leave_balance - %s
                WHERE employee_id=%s AND paid_leave_balance >= %s
                """,
                (float(days), int(employee_id), float(days)),
            )
            return cur.rowcount > 0

    def refund_paid_leave(self, employee_id: int, days: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET paid_leave_balance = paid_leave_balance + %s WHERE employee_id=%s",
                (float(days), int(employee_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def stats(self) -> DashboardStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_users,
                       COALESCE(SUM(is_active = 1), 0) AS active_users,
                       COALESCE(SUM(role = 'teamleader'), 0) AS team_leaders,
                       COALESCE(SUM(role = 'admin'), 0) AS admins
                FROM employees
                """
            )
            r = fetchone(cur) or {}
            return DashboardStats(
                total_users=int(r.get("total_users") or 0),
                active_users=int(r.get("active_users") or 0),
                team_leaders=int(r.get("team_leaders") or 0),
                admins=int(r.get("admins") or 0),
            )
