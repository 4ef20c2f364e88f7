from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into naive local time.

    An explicit offset (or ``Z``) is converted to the server's local zone first,
    so the wall-clock value lines up with ``now_local``.
    """
    dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_minute(value: datetime) -> datetime:
    """Truncate an instant to whole minutes."""
    return value.replace(second=0, microsecond=0)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return int((to_minute(end) - to_minute(start)) // timedelta(minutes=1))


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def fmt_hhmm(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "-"


def iso_or_none(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
