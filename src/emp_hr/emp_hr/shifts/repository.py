from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ShiftWindow


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[ShiftWindow]:
        raise NotImplementedError

    def get_by_label(self, label: str) -> Optional[ShiftWindow]:
        raise NotImplementedError
