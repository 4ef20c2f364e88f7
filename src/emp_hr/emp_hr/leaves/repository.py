from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveHalf, LeaveKind, LeavePortion, LeaveStatus
from .model import LeaveRecord


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_date: date,
        kind: LeaveKind,
        portion: LeavePortion,
        half: LeaveHalf,
        reason: str,
        status: LeaveStatus,
        applied_on: datetime,
    ) -> int:
        """Insert a leave; ConflictError if one exists for (employee_id, leave_date)."""

        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, leave_date: date) -> Optional[LeaveRecord]:
        raise NotImplementedError

    def list_range(self, *, employee_id: int, start: date, end: date) -> Sequence[LeaveRecord]:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: int, offset: int, limit: int) -> Sequence[LeaveRecord]:
        """Newest leave date first."""

        raise NotImplementedError

    def count_for_employee(self, employee_id: int) -> int:
        raise NotImplementedError

    def list_pending(self, *, employee_ids: Optional[Sequence[int]] = None) -> Sequence[LeaveRecord]:
        """Pending leaves, optionally restricted to some employees (None means all)."""

        raise NotImplementedError

    def sum_approved_days(self, employee_id: int, kind: LeaveKind) -> float:
        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_on: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending leave to approved/rejected; False if it was not pending."""

        raise NotImplementedError

    def delete_pending(self, leave_id: int) -> bool:
        raise NotImplementedError
