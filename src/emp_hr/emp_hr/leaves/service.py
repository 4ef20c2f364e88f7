from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_enum, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import LeaveHalf, LeaveKind, LeavePortion, LeaveStatus, NotificationType, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.model import Employee
from ..users.repository import UserRepository
from .model import LeaveBalance, LeaveRecord
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeavePage:
    leaves: Sequence[LeaveRecord]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    def to_dict(self) -> dict:
        return {
            "leaves": [l.to_dict() for l in self.leaves],
            "total": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.page,
        }


class LeaveService:
    """Leave requests: apply, cancel, approve/reject and balance bookkeeping."""

    def __init__(self, leaves: LeaveRepository, users: UserRepository, notifications: NotificationService):
        self._leaves = leaves
        self._users = users
        self._notifications = notifications

    def _employee(self, employee_id: int) -> Employee:
        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    @staticmethod
    def _parse_request(kind, portion, half, reason) -> tuple[LeaveKind, LeavePortion, LeaveHalf, str]:
        reason = require_non_empty(reason, "reason")
        kind = require_enum(kind, LeaveKind, "leave type")
        portion = require_enum(portion or LeavePortion.FULL, LeavePortion, "leave duration")

        if portion == LeavePortion.HALF:
            half = require_enum(half, LeaveHalf, "half")
            if half == LeaveHalf.NONE:
                raise ValidationError("Half-day leave must specify first or second half")
        else:
            half = LeaveHalf.NONE
        return kind, portion, half, reason

    def apply(
        self,
        employee_id: int,
        *,
        leave_date: date,
        kind: str | LeaveKind,
        portion: str | LeavePortion = LeavePortion.FULL,
        half: str | LeaveHalf | None = None,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> LeaveRecord:
        now = now or now_local()
        employee = self._employee(employee_id)
        kind, portion, half, reason = self._parse_request(kind, portion, half, reason)

        if kind == LeaveKind.PAID and employee.paid_leave_balance < portion.days:
            raise ValidationError("Insufficient paid leave balance")

        leave_id = self._leaves.create(
            employee_id=employee.employee_id,
            leave_date=leave_date,
            kind=kind,
            portion=portion,
            half=half,
            reason=reason,
            status=LeaveStatus.PENDING,
            applied_on=now,
        )
        logger.info("Leave %s applied by %s for %s", leave_id, employee.employee_id, leave_date.isoformat())

        if employee.reporting_manager_id:
            self._notifications.notify(
                employee.reporting_manager_id,
                "Leave request",
                f"{employee.full_name} applied for {kind.value} leave on {leave_date.isoformat()}",
                type=NotificationType.APPROVAL,
                created_by=employee.employee_id,
                now=now,
            )
        return self._leaves.get_by_id(leave_id)

    def record_past(
        self,
        employee_id: int,
        *,
        leave_date: date,
        kind: str | LeaveKind,
        portion: str | LeavePortion = LeavePortion.FULL,
        half: str | LeaveHalf | None = None,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> LeaveRecord:
        """Back-dated leave, approved on entry; falls back to unpaid when the balance is short."""

        now = now or now_local()
        if leave_date > now.date():
            raise ValidationError("Past leave must be dated today or earlier")

        employee = self._employee(employee_id)
        kind, portion, half, reason = self._parse_request(kind, portion, half, reason)
        if kind == LeaveKind.PAID and not self._users.deduct_paid_leave(employee.employee_id, portion.days):
            logger.info("Past leave for %s on %s recorded as unpaid: balance too low", employee.employee_id, leave_date)
            kind = LeaveKind.UNPAID

        try:
            leave_id = self._leaves.create(
                employee_id=employee.employee_id,
                leave_date=leave_date,
                kind=kind,
                portion=portion,
                half=half,
                reason=reason,
                status=LeaveStatus.APPROVED,
                applied_on=now,
            )
        except ConflictError:
            if kind == LeaveKind.PAID:
                self._users.refund_paid_leave(employee.employee_id, portion.days)
            raise
        return self._leaves.get_by_id(leave_id)

    def cancel(self, employee_id: int, leave_id: int) -> None:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave or leave.employee_id != int(employee_id):
            raise NotFoundError("Leave not found")
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError("Only pending leaves can be cancelled")
        if not self._leaves.delete_pending(leave.leave_id):
            raise ValidationError("Only pending leaves can be cancelled")
        logger.info("Leave %s cancelled by %s", leave.leave_id, employee_id)

    def _require_approver(self, approver_id: int, leave: LeaveRecord) -> Employee:
        approver = self._employee(approver_id)
        if approver.role == Role.ADMIN:
            return approver
        if approver.role == Role.TEAMLEADER:
            owner = self._users.get_by_id(leave.employee_id)
            if owner and owner.reporting_manager_id == approver.employee_id:
                return approver
        raise AuthorizationError("Not allowed to decide this leave")

    def _pending(self, leave_id: int) -> LeaveRecord:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave not found")
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError("Leave already processed")
        return leave

    def approve(self, approver_id: int, leave_id: int, *, now: datetime | None = None) -> LeaveRecord:
        now = now or now_local()
        leave = self._pending(leave_id)
        approver = self._require_approver(approver_id, leave)
        owner = self._employee(leave.employee_id)

        paid = leave.kind == LeaveKind.PAID
        if paid and not self._users.deduct_paid_leave(owner.employee_id, leave.days):
            raise ValidationError("Insufficient paid leave balance")

        if not self._leaves.decide(
            leave_id=leave.leave_id,
            status=LeaveStatus.APPROVED,
            decided_by=approver.employee_id,
            decided_on=now,
        ):
            # another approver decided first
            if paid:
                self._users.refund_paid_leave(owner.employee_id, leave.days)
            raise ValidationError("Leave already processed")

        logger.info("Leave %s approved by %s", leave.leave_id, approver.employee_id)
        self._notifications.notify(
            owner.employee_id,
            "Leave approved",
            f"Your leave on {leave.leave_date.isoformat()} was approved",
            type=NotificationType.APPROVAL,
            created_by=approver.employee_id,
            now=now,
        )
        return self._leaves.get_by_id(leave.leave_id)

    def reject(
        self,
        approver_id: int,
        leave_id: int,
        *,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> LeaveRecord:
        now = now or now_local()
        leave = self._pending(leave_id)
        approver = self._require_approver(approver_id, leave)
        reason = optional_str(reason)

        if not self._leaves.decide(
            leave_id=leave.leave_id,
            status=LeaveStatus.REJECTED,
            decided_by=approver.employee_id,
            decided_on=now,
            rejection_reason=reason,
        ):
            raise ValidationError("Leave already processed")

        logger.info("Leave %s rejected by %s", leave.leave_id, approver.employee_id)
        message = f"Your leave on {leave.leave_date.isoformat()} was rejected"
        if reason:
            message = f"{message}: {reason}"
        self._notifications.notify(
            leave.employee_id,
            "Leave rejected",
            message,
            type=NotificationType.APPROVAL,
            created_by=approver.employee_id,
            now=now,
        )
        return self._leaves.get_by_id(leave.leave_id)

    def history(self, employee_id: int, *, page: int = 1, limit: int = DEFAULT_HISTORY_LIMIT) -> LeavePage:
        page = max(int(page or 1), 1)
        limit = max(int(limit or DEFAULT_HISTORY_LIMIT), 1)
        total = self._leaves.count_for_employee(int(employee_id))
        rows = self._leaves.list_for_employee(employee_id=int(employee_id), offset=(page - 1) * limit, limit=limit)
        return LeavePage(leaves=list(rows), total=total, page=page, limit=limit)

    def balance(self, employee_id: int) -> LeaveBalance:
        employee = self._employee(employee_id)
        return LeaveBalance(
            employee_id=employee.employee_id,
            paid_leave_balance=employee.paid_leave_balance,
            paid_days_taken=self._leaves.sum_approved_days(employee.employee_id, LeaveKind.PAID),
            unpaid_days_taken=self._leaves.sum_approved_days(employee.employee_id, LeaveKind.UNPAID),
        )

    def pending_for(self, approver_id: int) -> Sequence[LeaveRecord]:
        approver = self._employee(approver_id)
        if approver.role == Role.ADMIN:
            return self._leaves.list_pending()
        if approver.role == Role.TEAMLEADER:
            team = [e.employee_id for e in self._users.list_reports_of(approver.employee_id)]
            return self._leaves.list_pending(employee_ids=team) if team else []
        raise AuthorizationError("Not allowed to review leaves")
