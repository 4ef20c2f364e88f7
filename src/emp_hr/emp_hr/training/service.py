from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_str, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Batch, Program, TrainingSession
from .repository import TrainingRepository

logger = logging.getLogger(__name__)

_SESSION_TEXT_FIELDS = (
    "session_time",
    "meeting_link",
    "assigned_tutor",
    "assigned_counselor",
    "quiz_link",
    "counseling_link",
)


class TrainingService:
    """Programs, batches and their sessions. Reads are open, writes are admin only."""

    def __init__(self, training: TrainingRepository):
        self._training = training

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin privileges required")

    # programs
    def list_programs(self) -> Sequence[Program]:
        return self._training.list_programs()

    def get_program(self, program_id: int) -> Program:
        program = self._training.get_program(int(program_id))
        if not program:
            raise NotFoundError("Program not found")
        return program

    def create_program(self, *, current_role: Role, name: str, duration: str, description: Optional[str] = None) -> Program:
        self._require_admin(current_role)
        program_id = self._training.create_program(
            fields={
                "name": require_non_empty(name, "name"),
                "duration": require_non_empty(duration, "duration"),
                "description": optional_str(description),
            }
        )
        logger.info("Program %s created", program_id)
        return self.get_program(program_id)

    def update_program(self, *, current_role: Role, program_id: int, changes: dict) -> Program:
        self._require_admin(current_role)
        self.get_program(program_id)
        fields = {}
        for key in ("name", "duration"):
            if key in changes:
                fields[key] = require_non_empty(changes[key], key)
        if "description" in changes:
            fields["description"] = optional_str(changes["description"])
        if not fields:
            raise ValidationError("Nothing to update")
        self._training.update_program(int(program_id), fields=fields)
        return self.get_program(program_id)

    def delete_program(self, *, current_role: Role, program_id: int) -> None:
        self._require_admin(current_role)
        if not self._training.delete_program(int(program_id)):
            raise NotFoundError("Program not found")

    # batches
    def list_batches(self) -> Sequence[Batch]:
        return self._training.list_batches()

    def get_batch(self, batch_id: int) -> Batch:
        batch = self._training.get_batch(int(batch_id))
        if not batch:
            raise NotFoundError("Batch not found")
        return batch

    @staticmethod
    def _check_dates(start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

    def create_batch(
        self,
        *,
        current_role: Role,
        batch_number: str,
        program_id: int,
        start_date: date,
        end_date: date,
    ) -> Batch:
        self._require_admin(current_role)
        batch_number = require_non_empty(batch_number, "batch_number")
        self._check_dates(start_date, end_date)
        self.get_program(program_id)

        batch_id = self._training.create_batch(
            fields={
                "batch_number": batch_number,
                "program_id": int(program_id),
                "start_date": start_date,
                "end_date": end_date,
            }
        )
        logger.info("Batch %s (%s) created", batch_id, batch_number)
        return self.get_batch(batch_id)

    def update_batch(self, *, current_role: Role, batch_id: int, changes: dict) -> Batch:
        self._require_admin(current_role)
        current = self.get_batch(batch_id)

        fields = {}
        if "batch_number" in changes:
            fields["batch_number"] = require_non_empty(changes["batch_number"], "batch_number")
        if "program_id" in changes:
            self.get_program(changes["program_id"])
            fields["program_id"] = int(changes["program_id"])
        for key in ("start_date", "end_date"):
            if key in changes:
                fields[key] = changes[key]
        self._check_dates(fields.get("start_date", current.start_date), fields.get("end_date", current.end_date))
        if not fields:
            raise ValidationError("Nothing to update")

        self._training.update_batch(int(batch_id), fields=fields)
        return self.get_batch(batch_id)

    def delete_batch(self, *, current_role: Role, batch_id: int) -> None:
        self._require_admin(current_role)
        if not self._training.delete_batch(int(batch_id)):
            raise NotFoundError("Batch not found")

    # sessions
    def list_sessions(self, *, batch_id: Optional[int] = None) -> Sequence[TrainingSession]:
        return self._training.list_sessions(batch_id=int(batch_id) if batch_id is not None else None)

    def get_session(self, session_id: int) -> TrainingSession:
        session = self._training.get_session(int(session_id))
        if not session:
            raise NotFoundError("Session not found")
        return session

    def _session_fields(self, changes: dict) -> dict:
        fields = {k: optional_str(changes[k]) for k in _SESSION_TEXT_FIELDS if k in changes}
        if "batch_id" in changes:
            batch_id = changes["batch_id"]
            if batch_id is not None:
                self.get_batch(batch_id)
                batch_id = int(batch_id)
            fields["batch_id"] = batch_id
        if "day_number" in changes:
            try:
                fields["day_number"] = int(changes["day_number"]) if changes["day_number"] is not None else None
            except (TypeError, ValueError):
                raise ValidationError("Invalid day_number") from None
        if "session_date" in changes:
            fields["session_date"] = changes["session_date"]
        return fields

    def create_session(self, *, current_role: Role, session_date: date, **changes) -> TrainingSession:
        self._require_admin(current_role)
        if session_date is None:
            raise ValidationError("session_date is required")
        fields = self._session_fields({"batch_id": None, **changes, "session_date": session_date})
        session_id = self._training.create_session(fields=fields)
        return self.get_session(session_id)

    def update_session(self, *, current_role: Role, session_id: int, changes: dict) -> TrainingSession:
        self._require_admin(current_role)
        self.get_session(session_id)
        fields = self._session_fields(changes)
        if not fields:
            raise ValidationError("Nothing to update")
        self._training.update_session(int(session_id), fields=fields)
        return self.get_session(session_id)

    def delete_session(self, *, current_role: Role, session_id: int) -> None:
        self._require_admin(current_role)
        if not self._training.delete_session(int(session_id)):
            raise NotFoundError("Session not found")
