from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.emp_hr.emp_hr.core.enums import NotificationType, Role
from src.emp_hr.emp_hr.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.emp_hr.emp_hr.notifications.service import NotificationService
from tests.fakes import BrokenNotifications, InMemoryNotifications, InMemoryUsers, make_employee

NOW = datetime(2026, 2, 4, 9, 0)


def build(repo=None):
    users = InMemoryUsers(make_employee(1), make_employee(2), make_employee(99, role=Role.ADMIN))
    return NotificationService(repo or InMemoryNotifications(), users)


def send(svc, **kwargs):
    values = dict(current_role=Role.ADMIN, created_by=99, title="Hello", message="World", now=NOW)
    values.update(kwargs)
    return svc.send(**values)


def test_global_notification_reaches_every_user_with_separate_read_receipts():
    svc = build()
    note = send(svc, is_global=True)

    svc.mark_read(1, note.notification_id, now=NOW)

    assert svc.for_user(1, now=NOW).items[0].is_read
    assert not svc.for_user(2, now=NOW).items[0].is_read
    assert svc.for_user(2, now=NOW).unread_count == 1


def test_direct_notification_is_private():
    svc = build()
    send(svc, recipient_id=1)
    assert len(svc.for_user(1, now=NOW).items) == 1
    assert svc.for_user(2, now=NOW).items == []


def test_mark_read_is_idempotent():
    svc = build()
    note = send(svc, recipient_id=1)
    svc.mark_read(1, note.notification_id, now=NOW)
    svc.mark_read(1, note.notification_id, now=NOW + timedelta(hours=1))
    assert svc.for_user(1, now=NOW).items[0].read_at == NOW


def test_expired_notifications_are_hidden():
    svc = build()
    send(svc, is_global=True, expires_at=NOW + timedelta(hours=1))
    assert len(svc.for_user(1, now=NOW).items) == 1
    assert svc.for_user(1, now=NOW + timedelta(hours=2)).items == []


def test_feed_is_newest_first():
    svc = build()
    send(svc, recipient_id=1, title="old", now=NOW)
    send(svc, recipient_id=1, title="new", now=NOW + timedelta(minutes=5))
    titles = [i.notification.title for i in svc.for_user(1, now=NOW + timedelta(minutes=10)).items]
    assert titles == ["new", "old"]


def test_send_validation():
    svc = build()
    with pytest.raises(AuthorizationError):
        send(svc, current_role=Role.EMPLOYEE, recipient_id=1)
    with pytest.raises(ValidationError):
        send(svc, title="", recipient_id=1)
    with pytest.raises(ValidationError):
        send(svc)
    with pytest.raises(NotFoundError):
        send(svc, recipient_id=404)
    with pytest.raises(ValidationError):
        send(svc, recipient_id=1, type="carrier-pigeon")


def test_cannot_read_someone_elses_notification():
    svc = build()
    note = send(svc, recipient_id=1)
    with pytest.raises(NotFoundError):
        svc.mark_read(2, note.notification_id, now=NOW)


def test_delete_requires_admin():
    svc = build()
    note = send(svc, recipient_id=1)
    with pytest.raises(AuthorizationError):
        svc.delete(current_role=Role.EMPLOYEE, notification_id=note.notification_id)
    svc.delete(current_role=Role.ADMIN, notification_id=note.notification_id)
    with pytest.raises(NotFoundError):
        svc.delete(current_role=Role.ADMIN, notification_id=note.notification_id)


def test_notify_swallows_and_logs_failures(caplog):
    svc = build(BrokenNotifications())
    assert svc.notify(1, "Leave approved", "ok", type=NotificationType.APPROVAL, now=NOW) is None
    assert "Failed to notify user 1" in caplog.text
