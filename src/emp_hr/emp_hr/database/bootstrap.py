"""Schema and seed helpers used by ``create_app`` (AUTO_INIT_DB / AUTO_SEED_DB) and ``scripts/``."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_ADMIN_EMAIL = "admin@emp-hr.local"
DEMO_ADMIN_PASSWORD = "admin123"

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")


@contextmanager
def _admin_cursor(db_config: dict, *, with_database: bool = True, dictionary: bool = False) -> Iterator:
    target = DBConfig.from_mapping(db_config)
    conn = mysql.connector.connect(**target.connect_kwargs(with_database=with_database))
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield target, cur
        conn.commit()
    finally:
        conn.close()


def _split_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""

    # schema.sql must stay usable whatever DB_NAME is configured
    sql = _CREATE_DB_OR_USE.sub("", sql)

    start = 0
    quote = None
    escaped = False
    for i, ch in enumerate(sql):
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            start = i + 1
            if stmt:
                yield stmt

    tail = sql[start:].strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    count = 0
    with _admin_cursor(db_config) as (_, cur):
        for stmt in _split_statements(Path(path).read_text(encoding="utf-8")):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    with _admin_cursor(db_config, with_database=False) as (target, cur):
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Schema applied from %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Seed data applied from %s (%d statements)", seed_path, count)


def ensure_demo_admin(
    db_config: dict,
    *,
    email: str = DEMO_ADMIN_EMAIL,
    password: str = DEMO_ADMIN_PASSWORD,
) -> None:
    """Create the demo admin, or reset its password and role if it exists."""

    email = email.strip().lower()
    password_hash = generate_password_hash(password)
    with _admin_cursor(db_config, dictionary=True) as (_, cur):
        cur.execute("SELECT employee_id FROM employees WHERE work_email=%s", (email,))
        if cur.fetchone():
            cur.execute(
                "UPDATE employees SET password_hash=%s, role='admin', is_active=1 WHERE work_email=%s",
                (password_hash, email),
            )
            logger.info("Demo admin %s reset", email)
            return
        cur.execute(
            """
            INSERT INTO employees (first_name, last_name, work_email, password_hash, role, department, shift_label)
            VALUES ('Admin', 'Demo', %s, %s, 'admin', 'Administration', 'General')
            """,
            (email, password_hash),
        )
        logger.info("Demo admin %s created", email)


def list_tables(db_config: dict) -> list[str]:
    with _admin_cursor(db_config) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
