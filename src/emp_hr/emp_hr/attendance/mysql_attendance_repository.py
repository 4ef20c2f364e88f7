from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_guard
from .model import AttendancePunch, Location
from .repository import AttendanceRepository

_COLUMNS = """
    punch_id, employee_id, work_date, check_in, check_out,
    check_in_lat, check_in_lng, check_in_address,
    check_out_lat, check_out_lng, check_out_address,
    remarks, corrected_check_in, corrected_check_out, corrected_at, corrected_by
"""


def _to_punch(r: dict) -> AttendancePunch:
    return AttendancePunch(
        punch_id=int(r["punch_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=r["check_in"],
        check_out=r.get("check_out"),
        check_in_location=Location(r.get("check_in_lat"), r.get("check_in_lng"), r.get("check_in_address")),
        check_out_location=Location(r.get("check_out_lat"), r.get("check_out_lng"), r.get("check_out_address")),
        remarks=r.get("remarks"),
        corrected_check_in=r.get("corrected_check_in"),
        corrected_check_out=r.get("corrected_check_out"),
        corrected_at=r.get("corrected_at"),
        corrected_by=int(r["corrected_by"]) if r.get("corrected_by") else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, punch_id: int) -> Optional[AttendancePunch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_punches WHERE punch_id=%s", (int(punch_id),))
            r = fetchone(cur)
            return _to_punch(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendancePunch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_punches WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_punch(r) if r else None

    def list_range(self, *, employee_id: int, start: Optional[date], end: Optional[date]) -> Sequence[AttendancePunch]:
        clauses = ["employee_id=%s"]
        params: list = [int(employee_id)]
        if start:
            clauses.append("work_date >= %s")
            params.append(start)
        if end:
            clauses.append("work_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_punches WHERE {' AND '.join(clauses)} ORDER BY work_date DESC",
                tuple(params),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: datetime,
        location: Location,
    ) -> int:
        with unique_guard("Already checked in today"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_punches(employee_id, work_date, check_in, check_in_lat, check_in_lng, check_in_address)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, check_in, location.lat, location.lng, location.address),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, punch_id: int, check_out: datetime, location: Location) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_punches
                SET check_out=%s, check_out_lat=%s, check_out_lng=%s, check_out_address=%s
                WHERE punch_id=%s AND check_out IS NULL
                """,
                (check_out, location.lat, location.lng, location.address, int(punch_id)),
            )
            return cur.rowcount > 0

    def save_correction(
        self,
        *,
        punch_id: int,
        corrected_check_in: Optional[datetime],
        corrected_check_out: Optional[datetime],
        remarks: Optional[str],
        corrected_by: int,
        corrected_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_punches
                SET corrected_check_in=COALESCE(%s, corrected_check_in),
                    corrected_check_out=COALESCE(%s, corrected_check_out),
                    remarks=COALESCE(%s, remarks),
                    corrected_by=%s,
                    corrected_at=%s
                WHERE punch_id=%s
                """,
                (corrected_check_in, corrected_check_out, remarks, int(corrected_by), corrected_at, int(punch_id)),
            )
            return cur.rowcount > 0
