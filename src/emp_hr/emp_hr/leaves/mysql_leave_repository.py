from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveHalf, LeaveKind, LeavePortion, LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_guard
from .model import LeaveRecord
from .repository import LeaveRepository

_COLUMNS = (
    "leave_id, employee_id, leave_date, kind, portion, half, status, reason, "
    "applied_on, decided_by, decided_on, rejection_reason"
)


def _to_leave(r: dict) -> LeaveRecord:
    return LeaveRecord(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_date=r["leave_date"],
        kind=LeaveKind(r["kind"]),
        portion=LeavePortion(r["portion"]),
        half=LeaveHalf(r["half"]),
        status=LeaveStatus(r["status"]),
        reason=r.get("reason"),
        applied_on=r["applied_on"],
        decided_by=int(r["decided_by"]) if r.get("decided_by") else None,
        decided_on=r.get("decided_on"),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        leave_date: date,
        kind: LeaveKind,
        portion: LeavePortion,
        half: LeaveHalf,
        reason: str,
        status: LeaveStatus,
        applied_on: datetime,
    ) -> int:
        with unique_guard("Leave already applied for this date"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(employee_id, leave_date, kind, portion, half, status, reason, applied_on)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), leave_date, kind.value, portion.value, half.value, status.value, reason, applied_on),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leaves WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, leave_date: date) -> Optional[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves WHERE employee_id=%s AND leave_date=%s",
                (int(employee_id), leave_date),
            )
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_range(self, *, employee_id: int, start: date, end: date) -> Sequence[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM leaves
                WHERE employee_id=%s AND leave_date BETWEEN %s AND %s
                ORDER BY leave_date
                """,
                (int(employee_id), start, end),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_for_employee(self, *, employee_id: int, offset: int, limit: int) -> Sequence[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves WHERE employee_id=%s ORDER BY leave_date DESC LIMIT %s OFFSET %s",
                (int(employee_id), int(limit), int(offset)),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def count_for_employee(self, employee_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM leaves WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur) or {}
            return int(r.get("n") or 0)

    def list_pending(self, *, employee_ids: Optional[Sequence[int]] = None) -> Sequence[LeaveRecord]:
        sql = f"SELECT {_COLUMNS} FROM leaves WHERE status='pending'"
        params: tuple = ()
        if employee_ids is not None:
            if not employee_ids:
                return []
            sql += f" AND employee_id IN ({', '.join(['%s'] * len(employee_ids))})"
            params = tuple(int(i) for i in employee_ids)
        sql += " ORDER BY leave_date"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_leave(r) for r in fetchall(cur)]

    def sum_approved_days(self, employee_id: int, kind: LeaveKind) -> float:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(CASE portion WHEN 'half' THEN 0.5 ELSE 1 END), 0) AS days
                FROM leaves
                WHERE employee_id=%s AND kind=%s AND status='approved'
                """,
                (int(employee_id), kind.value),
            )
            r = fetchone(cur) or {}
            return float(r.get("days") or 0)

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_on: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, decided_by=%s, decided_on=%s, rejection_reason=%s
                WHERE leave_id=%s AND status='pending'
                """,
                (status.value, int(decided_by), decided_on, rejection_reason, int(leave_id)),
            )
            return cur.rowcount > 0

    def delete_pending(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE leave_id=%s AND status='pending'", (int(leave_id),))
            return cur.rowcount > 0
