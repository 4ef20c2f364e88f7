from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_guard
from .model import Batch, Program, TrainingSession
from .repository import TrainingRepository

_PROGRAM_COLS = ("name", "duration", "description")
_BATCH_COLS = ("batch_number", "program_id", "start_date", "end_date")
_SESSION_COLS = (
    "batch_id",
    "session_date",
    "day_number",
    "session_time",
    "meeting_link",
    "assigned_tutor",
    "assigned_counselor",
    "quiz_link",
    "counseling_link",
)

_BATCH_SELECT = """
    SELECT b.batch_id, b.batch_number, b.program_id, b.start_date, b.end_date, p.name AS program_name
    FROM batches b
    JOIN programs p ON p.program_id = b.program_id
"""

_DUPLICATE_BATCH = "Batch number already exists"


def _to_program(r: dict) -> Program:
    return Program(
        program_id=int(r["program_id"]),
        name=r["name"],
        duration=r["duration"],
        description=r.get("description"),
    )


def _to_batch(r: dict) -> Batch:
    return Batch(
        batch_id=int(r["batch_id"]),
        batch_number=r["batch_number"],
        program_id=int(r["program_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        program_name=r.get("program_name"),
    )


def _to_session(r: dict) -> TrainingSession:
    return TrainingSession(
        session_id=int(r["session_id"]),
        batch_id=int(r["batch_id"]) if r.get("batch_id") else None,
        session_date=r["session_date"],
        day_number=r.get("day_number"),
        session_time=r.get("session_time"),
        meeting_link=r.get("meeting_link"),
        assigned_tutor=r.get("assigned_tutor"),
        assigned_counselor=r.get("assigned_counselor"),
        quiz_link=r.get("quiz_link"),
        counseling_link=r.get("counseling_link"),
    )


class MySQLTrainingRepository(TrainingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _insert(self, table: str, allowed: tuple, fields: dict) -> int:
        cols = [c for c in allowed if c in fields]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                tuple(fields[c] for c in cols),
            )
            return int(cur.lastrowid)

    def _update(self, table: str, key: str, key_value: int, allowed: tuple, fields: dict) -> bool:
        cols = [c for c in allowed if c in fields]
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {table} SET {', '.join(f'{c}=%s' for c in cols)} WHERE {key}=%s",
                tuple(fields[c] for c in cols) + (int(key_value),),
            )
            return cur.rowcount > 0

    def _delete(self, table: str, key: str, key_value: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {table} WHERE {key}=%s", (int(key_value),))
            return cur.rowcount > 0

    # programs
    def list_programs(self) -> Sequence[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT program_id, name, duration, description FROM programs ORDER BY name")
            return [_to_program(r) for r in fetchall(cur)]

    def get_program(self, program_id: int) -> Optional[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT program_id, name, duration, description FROM programs WHERE program_id=%s",
                (int(program_id),),
            )
            r = fetchone(cur)
            return _to_program(r) if r else None

    def create_program(self, *, fields: dict) -> int:
        return self._insert("programs", _PROGRAM_COLS, fields)

    def update_program(self, program_id: int, *, fields: dict) -> bool:
        return self._update("programs", "program_id", program_id, _PROGRAM_COLS, fields)

    def delete_program(self, program_id: int) -> bool:
        return self._delete("programs", "program_id", program_id)

    # batches
    def list_batches(self) -> Sequence[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_BATCH_SELECT + " ORDER BY b.start_date DESC")
            return [_to_batch(r) for r in fetchall(cur)]

    def get_batch(self, batch_id: int) -> Optional[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_BATCH_SELECT + " WHERE b.batch_id=%s", (int(batch_id),))
            r = fetchone(cur)
            return _to_batch(r) if r else None

    def create_batch(self, *, fields: dict) -> int:
        with unique_guard(_DUPLICATE_BATCH):
            return self._insert("batches", _BATCH_COLS, fields)

    def update_batch(self, batch_id: int, *, fields: dict) -> bool:
        with unique_guard(_DUPLICATE_BATCH):
            return self._update("batches", "batch_id", batch_id, _BATCH_COLS, fields)

    def delete_batch(self, batch_id: int) -> bool:
        return self._delete("batches", "batch_id", batch_id)

    # sessions
    def list_sessions(self, *, batch_id: Optional[int] = None) -> Sequence[TrainingSession]:
        sql = f"SELECT session_id, {', '.join(_SESSION_COLS)} FROM training_sessions"
        params: tuple = ()
        if batch_id is not None:
            sql += " WHERE batch_id=%s"
            params = (int(batch_id),)
        sql += " ORDER BY session_date, day_number"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_session(r) for r in fetchall(cur)]

    def get_session(self, session_id: int) -> Optional[TrainingSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT session_id, {', '.join(_SESSION_COLS)} FROM training_sessions WHERE session_id=%s",
                (int(session_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_session(self, *, fields: dict) -> int:
        return self._insert("training_sessions", _SESSION_COLS, fields)

    def update_session(self, session_id: int, *, fields: dict) -> bool:
        return self._update("training_sessions", "session_id", session_id, _SESSION_COLS, fields)

    def delete_session(self, session_id: int) -> bool:
        return self._delete("training_sessions", "session_id", session_id)
