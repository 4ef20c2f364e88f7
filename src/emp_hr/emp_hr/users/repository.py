from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import DashboardStats, Employee


class UserRepository(Protocol):
    """Repository interface for Employee.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, work_email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_reports_of(self, manager_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, *, fields: dict) -> int:
        """Insert an employee; ``fields`` uses Employee attribute names."""

        raise NotImplementedError

    def update(self, employee_id: int, *, fields: dict) -> bool:
        raise NotImplementedError

    def deduct_paid_leave(self, employee_id: int, days: float) -> bool:
        """Atomically take ``days`` off the paid balance; False if the balance is short."""

        raise NotImplementedError

    def refund_paid_leave(self, employee_id: int, days: float) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def stats(self) -> DashboardStats:
        raise NotImplementedError
