from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Batch, Program, TrainingSession


class TrainingRepository(Protocol):
    """Programs, batches and sessions; ``fields`` dicts use model attribute names."""

    def list_programs(self) -> Sequence[Program]:
        raise NotImplementedError

    def get_program(self, program_id: int) -> Optional[Program]:
        raise NotImplementedError

    def create_program(self, *, fields: dict) -> int:
        raise NotImplementedError

    def update_program(self, program_id: int, *, fields: dict) -> bool:
        raise NotImplementedError

    def delete_program(self, program_id: int) -> bool:
        raise NotImplementedError

    def list_batches(self) -> Sequence[Batch]:
        raise NotImplementedError

    def get_batch(self, batch_id: int) -> Optional[Batch]:
        raise NotImplementedError

    def create_batch(self, *, fields: dict) -> int:
        """ConflictError when the batch number is taken."""

        raise NotImplementedError

    def update_batch(self, batch_id: int, *, fields: dict) -> bool:
        raise NotImplementedError

    def delete_batch(self, batch_id: int) -> bool:
        raise NotImplementedError

    def list_sessions(self, *, batch_id: Optional[int] = None) -> Sequence[TrainingSession]:
        raise NotImplementedError

    def get_session(self, session_id: int) -> Optional[TrainingSession]:
        raise NotImplementedError

    def create_session(self, *, fields: dict) -> int:
        raise NotImplementedError

    def update_session(self, session_id: int, *, fields: dict) -> bool:
        raise NotImplementedError

    def delete_session(self, session_id: int) -> bool:
        raise NotImplementedError
