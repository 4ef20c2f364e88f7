from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from ..core.exceptions import ConfigurationError
from ..users.repository import UserRepository
from .model import ShiftWindow


class ShiftCalendar:
    """Maps an employee to the shift window they are expected to work on a day.

    The shift table is loaded once at startup. An employee without an assigned
    (or with an unknown) shift label gets the configured default window.
    """

    def __init__(
        self,
        shifts: Iterable[ShiftWindow],
        users: UserRepository,
        *,
        default_label: Optional[str],
    ):
        self._by_label: Mapping[str, ShiftWindow] = {s.label: s for s in shifts}
        self._users = users
        self._default: Optional[ShiftWindow] = None

        if default_label:
            self._default = self._by_label.get(default_label)
            if self._default is None:
                raise ConfigurationError(f"Default shift {default_label!r} is not defined in the shift table")

    @property
    def default(self) -> Optional[ShiftWindow]:
        return self._default

    def labels(self) -> list[str]:
        return list(self._by_label)

    def window_for(self, label: Optional[str]) -> Optional[ShiftWindow]:
        if not label:
            return None
        return self._by_label.get(label)

    def window_or_default(self, label: Optional[str], *, employee_id: Optional[int] = None) -> ShiftWindow:
        window = self.window_for(label) or self._default
        if window is None:
            raise ConfigurationError(f"Misconfigured shift for employee {employee_id}: no assigned or default shift")
        return window

    def resolve_shift(self, employee_id: int, day: date) -> ShiftWindow:
        # Shift assignment is per employee, not per day; ``day`` keeps the
        # contract open for dated rosters.
        employee = self._users.get_by_id(int(employee_id))
        return self.window_or_default(employee.shift_label if employee else None, employee_id=employee_id)
