from __future__ import annotations

from datetime import date
from typing import FrozenSet, Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DepartmentWeekOff, WeekOffOverride
from .repository import WeekOffRepository


def _encode_days(days: FrozenSet[Weekday]) -> str:
    return ",".join(d.name for d in sorted(days))


def _decode_days(value: Optional[str]) -> FrozenSet[Weekday]:
    return frozenset(Weekday.parse(part) for part in (value or "").split(",") if part.strip())


def _to_override(r: dict) -> WeekOffOverride:
    return WeekOffOverride(
        employee_id=int(r["employee_id"]),
        day=r["day"],
        is_week_off=bool(r["is_week_off"]),
        reason=r.get("reason"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") else None,
    )


class MySQLWeekOffRepository(WeekOffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_department(self, department: str) -> Optional[DepartmentWeekOff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department, week_off_days FROM department_week_offs WHERE department=%s",
                (department,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return DepartmentWeekOff(department=r["department"], week_off_days=_decode_days(r["week_off_days"]))

    def upsert_department(self, *, department: str, week_off_days: FrozenSet[Weekday], updated_by: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO department_week_offs(department, week_off_days, updated_by)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE week_off_days=VALUES(week_off_days), updated_by=VALUES(updated_by)
                """,
                (department, _encode_days(week_off_days), int(updated_by)),
            )

    def get_override(self, *, employee_id: int, day: date) -> Optional[WeekOffOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, day, is_week_off, reason, approved_by
                FROM week_off_overrides WHERE employee_id=%s AND day=%s
                """,
                (int(employee_id), day),
            )
            r = fetchone(cur)
            return _to_override(r) if r else None

    def list_overrides(self, *, employee_id: int, start: date, end: date) -> Sequence[WeekOffOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, day, is_week_off, reason, approved_by
                FROM week_off_overrides
                WHERE employee_id=%s AND day BETWEEN %s AND %s
                ORDER BY day
                """,
                (int(employee_id), start, end),
            )
            return [_to_override(r) for r in fetchall(cur)]

    def upsert_override(
        self,
        *,
        employee_id: int,
        day: date,
        is_week_off: bool,
        reason: Optional[str],
        approved_by: int,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO week_off_overrides(employee_id, day, is_week_off, reason, approved_by)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE is_week_off=VALUES(is_week_off), reason=VALUES(reason),
                                        approved_by=VALUES(approved_by)
                """,
                (int(employee_id), day, int(bool(is_week_off)), reason, int(approved_by)),
            )

    def delete_override(self, *, employee_id: int, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM week_off_overrides WHERE employee_id=%s AND day=%s", (int(employee_id), day))
            return cur.rowcount > 0
