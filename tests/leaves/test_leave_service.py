from __future__ import annotations

from datetime import date, datetime

import pytest

from src.emp_hr.emp_hr.core.enums import LeaveKind, LeaveStatus, Role
from src.emp_hr.emp_hr.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from src.emp_hr.emp_hr.leaves.service import LeaveService
from src.emp_hr.emp_hr.notifications.service import NotificationService
from tests.fakes import BrokenNotifications, InMemoryLeaves, InMemoryNotifications, InMemoryUsers, make_employee

NOW = datetime(2026, 2, 4, 9, 0)


def build(notifications=None, balance: float = 12.0):
    users = InMemoryUsers(
        make_employee(1, reporting_manager_id=10, paid_leave_balance=balance),
        make_employee(2),
        make_employee(10, role=Role.TEAMLEADER),
        make_employee(11, role=Role.TEAMLEADER),
        make_employee(99, role=Role.ADMIN),
    )
    leaves = InMemoryLeaves()
    notifications = notifications or InMemoryNotifications()
    svc = LeaveService(leaves, users, NotificationService(notifications, users))
    return svc, users, leaves, notifications


def apply_paid(svc, day=date(2026, 2, 10), **kwargs):
    values = dict(leave_date=day, kind="paid", portion="full", reason="family event", now=NOW)
    values.update(kwargs)
    return svc.apply(1, **values)


def test_apply_creates_pending_leave_and_notifies_manager():
    svc, _, _, notifications = build()
    leave = apply_paid(svc)

    assert leave.status == LeaveStatus.PENDING
    feed = notifications.feed_for(user_id=10, now=NOW, limit=50)
    assert [i.notification.title for i in feed] == ["Leave request"]


def test_apply_requires_reason_and_half_for_half_days():
    svc, *_ = build()
    with pytest.raises(ValidationError):
        apply_paid(svc, reason="  ")
    with pytest.raises(ValidationError):
        apply_paid(svc, portion="half", half=None)
    with pytest.raises(ValidationError):
        apply_paid(svc, portion="half", half="none")

    leave = apply_paid(svc, portion="half", half="second")
    assert leave.days == 0.5


def test_paid_leave_with_insufficient_balance_is_rejected():
    svc, *_ = build(balance=0.5)
    with pytest.raises(ValidationError, match="Insufficient paid leave balance"):
        apply_paid(svc)
    assert apply_paid(svc, portion="half", half="first").kind == LeaveKind.PAID


def test_second_leave_on_same_day_conflicts():
    svc, *_ = build()
    apply_paid(svc)
    with pytest.raises(ConflictError, match="Leave already applied for this date"):
        apply_paid(svc, kind="unpaid")


def test_reporting_manager_approval_deducts_balance_and_notifies():
    svc, users, _, notifications = build()
    leave = apply_paid(svc)

    approved = svc.approve(10, leave.leave_id, now=NOW)

    assert approved.status == LeaveStatus.APPROVED
    assert approved.decided_by == 10
    assert users.get_by_id(1).paid_leave_balance == 11.0
    assert notifications.feed_for(user_id=1, now=NOW, limit=50)[0].notification.title == "Leave approved"


def test_unpaid_approval_keeps_balance():
    svc, users, *_ = build()
    leave = apply_paid(svc, kind="unpaid")
    svc.approve(99, leave.leave_id, now=NOW)
    assert users.get_by_id(1).paid_leave_balance == 12.0


def test_only_admin_or_own_manager_may_decide():
    svc, *_ = build()
    leave = apply_paid(svc)
    with pytest.raises(AuthorizationError):
        svc.approve(11, leave.leave_id, now=NOW)
    with pytest.raises(AuthorizationError):
        svc.reject(2, leave.leave_id, reason="no", now=NOW)


def test_only_pending_leaves_can_be_approved():
    svc, *_ = build()
    leave = apply_paid(svc)
    svc.reject(99, leave.leave_id, reason="peak season", now=NOW)
    with pytest.raises(ValidationError, match="already processed"):
        svc.approve(99, leave.leave_id, now=NOW)


def test_approval_fails_when_balance_dropped_meanwhile():
    svc, users, *_ = build(balance=1.0)
    first = apply_paid(svc, day=date(2026, 2, 10))
    second = apply_paid(svc, day=date(2026, 2, 11))
    svc.approve(99, first.leave_id, now=NOW)
    with pytest.raises(ValidationError, match="Insufficient"):
        svc.approve(99, second.leave_id, now=NOW)
    assert users.get_by_id(1).paid_leave_balance == 0.0


def test_concurrent_approvals_each_deduct_from_the_stored_balance(monkeypatch):
    svc, users, *_ = build()
    first = apply_paid(svc, day=date(2026, 2, 10))
    second = apply_paid(svc, day=date(2026, 2, 11))

    # both approvers loaded the employee before either approval was written
    stale = users.get_by_id(1)
    load = users.get_by_id
    monkeypatch.setattr(users, "get_by_id", lambda eid: stale if int(eid) == 1 else load(eid))

    svc.approve(10, first.leave_id, now=NOW)
    svc.approve(99, second.leave_id, now=NOW)

    assert load(1).paid_leave_balance == 10.0


def test_approval_lost_to_another_approver_refunds_balance(monkeypatch):
    svc, users, leaves, _ = build()
    leave = apply_paid(svc)
    monkeypatch.setattr(leaves, "decide", lambda **kwargs: False)

    with pytest.raises(ValidationError, match="already processed"):
        svc.approve(99, leave.leave_id, now=NOW)
    assert users.get_by_id(1).paid_leave_balance == 12.0


def test_reject_stores_reason():
    svc, *_ = build()
    leave = apply_paid(svc)
    rejected = svc.reject(10, leave.leave_id, reason="deadline", now=NOW)
    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.rejection_reason == "deadline"


def test_cancel_only_own_pending():
    svc, *_ = build()
    leave = apply_paid(svc)
    with pytest.raises(NotFoundError):
        svc.cancel(2, leave.leave_id)
    svc.cancel(1, leave.leave_id)

    again = apply_paid(svc)
    svc.approve(99, again.leave_id, now=NOW)
    with pytest.raises(ValidationError, match="Only pending"):
        svc.cancel(1, again.leave_id)


def test_record_past_switches_to_unpaid_when_balance_is_short():
    svc, users, *_ = build(balance=0.0)
    leave = svc.record_past(1, leave_date=date(2026, 2, 2), kind="paid", reason="sick", now=NOW)
    assert leave.status == LeaveStatus.APPROVED
    assert leave.kind == LeaveKind.UNPAID
    assert users.get_by_id(1).paid_leave_balance == 0.0


def test_record_past_paid_deducts_balance():
    svc, users, *_ = build()
    svc.record_past(1, leave_date=date(2026, 2, 2), kind="paid", portion="half", half="first", reason="sick", now=NOW)
    assert users.get_by_id(1).paid_leave_balance == 11.5
    with pytest.raises(ValidationError):
        svc.record_past(1, leave_date=date(2026, 2, 20), kind="paid", reason="future", now=NOW)


def test_record_past_on_a_taken_date_keeps_balance():
    svc, users, *_ = build()
    apply_paid(svc, day=date(2026, 2, 2), kind="unpaid")
    with pytest.raises(ConflictError):
        svc.record_past(1, leave_date=date(2026, 2, 2), kind="paid", reason="sick", now=NOW)
    assert users.get_by_id(1).paid_leave_balance == 12.0


def test_history_is_paginated():
    svc, *_ = build()
    for day in range(10, 15):
        apply_paid(svc, day=date(2026, 2, day), kind="unpaid")

    page = svc.history(1, page=2, limit=2)
    assert page.total == 5
    assert page.total_pages == 3
    assert [l.leave_date.day for l in page.leaves] == [12, 11]
    assert page.to_dict()["currentPage"] == 2


def test_balance_reports_days_taken():
    svc, *_ = build()
    paid = apply_paid(svc, day=date(2026, 2, 10))
    unpaid = apply_paid(svc, day=date(2026, 2, 11), kind="unpaid", portion="half", half="first")
    svc.approve(99, paid.leave_id, now=NOW)
    svc.approve(99, unpaid.leave_id, now=NOW)

    balance = svc.balance(1)
    assert (balance.paid_leave_balance, balance.paid_days_taken, balance.unpaid_days_taken) == (11.0, 1.0, 0.5)


def test_pending_for_scopes_team_leaders_to_their_reports():
    svc, *_ = build()
    mine = apply_paid(svc)
    other = svc.apply(2, leave_date=date(2026, 2, 10), kind="unpaid", reason="errand", now=NOW)

    assert [l.leave_id for l in svc.pending_for(10)] == [mine.leave_id]
    assert [l.leave_id for l in svc.pending_for(11)] == []
    assert {l.leave_id for l in svc.pending_for(99)} == {mine.leave_id, other.leave_id}
    with pytest.raises(AuthorizationError):
        svc.pending_for(2)


def test_notification_failure_does_not_undo_the_leave():
    svc, _, leaves, _ = build(notifications=BrokenNotifications())
    leave = apply_paid(svc)
    assert leaves.get_by_id(leave.leave_id).status == LeaveStatus.PENDING
