from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ShiftWindow
from .repository import ShiftRepository


def _to_shift(r: dict) -> ShiftWindow:
    return ShiftWindow(
        label=r["label"],
        start=normalize_mysql_time(r["start_time"]),
        end=normalize_mysql_time(r["end_time"]),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ShiftWindow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT label, start_time, end_time FROM shifts ORDER BY shift_id")
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_label(self, label: str) -> Optional[ShiftWindow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT label, start_time, end_time FROM shifts WHERE label=%s", (label,))
            r = fetchone(cur)
            return _to_shift(r) if r else None
