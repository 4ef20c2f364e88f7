from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class ShiftWindow:
    """Named shift: expected start/end wall-clock time, no date component."""

    label: str
    start: time
    end: time

    @property
    def crosses_midnight(self) -> bool:
        return self.end <= self.start

    def anchor(self, day: date) -> tuple[datetime, datetime]:
        """Place the window on ``day``; the end rolls to the next day for overnight shifts."""

        start = datetime.combine(day, self.start)
        end = datetime.combine(day, self.end)
        if self.crosses_midnight:
            end += timedelta(days=1)
        return start, end

    def describe(self) -> str:
        return f"{self.label} ({self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')})"
