from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import LeaveHalf, LeaveKind, LeavePortion, LeaveStatus


@dataclass(frozen=True)
class LeaveRecord:
    """Domain entity: a leave request for one employee on one day."""

    leave_id: int
    employee_id: int
    leave_date: date
    kind: LeaveKind
    portion: LeavePortion
    half: LeaveHalf
    status: LeaveStatus
    reason: Optional[str]
    applied_on: datetime
    decided_by: Optional[int] = None
    decided_on: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def days(self) -> float:
        return self.portion.days

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.APPROVED

    def to_dict(self) -> dict:
        return {
            "leave_id": self.leave_id,
            "employee_id": self.employee_id,
            "date": self.leave_date.isoformat(),
            "type": self.kind.value,
            "portion": self.portion.value,
            "duration": self.days,
            "half": self.half.value,
            "status": self.status.value,
            "reason": self.reason,
            "applied_on": iso_or_none(self.applied_on),
            "decided_by": self.decided_by,
            "decided_on": iso_or_none(self.decided_on),
            "rejection_reason": self.rejection_reason,
        }


@dataclass(frozen=True)
class LeaveBalance:
    employee_id: int
    paid_leave_balance: float
    paid_days_taken: float
    unpaid_days_taken: float

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "paid_leave_balance": self.paid_leave_balance,
            "paid_leaves_taken": self.paid_days_taken,
            "unpaid_leaves_taken": self.unpaid_days_taken,
        }
