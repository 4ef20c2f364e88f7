from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import NOTIFICATION_FEED_LIMIT
from ..core.enums import NotificationPriority, NotificationType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import FeedItem, Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationFeed:
    items: Sequence[FeedItem]

    @property
    def unread_count(self) -> int:
        return sum(1 for i in self.items if not i.is_read)

    def to_dict(self) -> dict:
        return {
            "notifications": [i.to_dict() for i in self.items],
            "unread_count": self.unread_count,
        }


class NotificationService:
    """Admin-authored notifications plus internal dispatch for workflow events."""

    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def send(
        self,
        *,
        current_role: Role,
        created_by: int,
        title: str,
        message: str,
        recipient_id: Optional[int] = None,
        is_global: bool = False,
        type: str | NotificationType = NotificationType.ANNOUNCEMENT,
        priority: str | NotificationPriority = NotificationPriority.NORMAL,
        expires_at: Optional[datetime] = None,
        now: datetime | None = None,
    ) -> Notification:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin privileges required")

        title = require_non_empty(title, "title")
        message = require_non_empty(message, "message")
        ntype = require_enum(type, NotificationType, "type")
        prio = require_enum(priority, NotificationPriority, "priority")

        if not is_global:
            if recipient_id is None:
                raise ValidationError("recipient_id required unless is_global is set")
            if not self._users.get_by_id(int(recipient_id)):
                raise NotFoundError("Recipient not found")

        now = now or now_local()
        if expires_at is not None and expires_at <= now:
            raise ValidationError("expires_at must be in the future")

        notification_id = self._notifications.create(
            title=title,
            message=message,
            type=ntype,
            recipient_id=None if is_global else int(recipient_id),
            is_global=bool(is_global),
            priority=prio,
            expires_at=expires_at,
            created_by=int(created_by),
            created_at=now,
        )
        logger.info("Notification %s sent by %s (global=%s)", notification_id, created_by, bool(is_global))
        return self._notifications.get_by_id(notification_id)

    def notify(
        self,
        recipient_id: int,
        title: str,
        message: str,
        *,
        type: NotificationType = NotificationType.UPDATE,
        priority: NotificationPriority = NotificationPriority.NORMAL,
        created_by: Optional[int] = None,
        now: datetime | None = None,
    ) -> Optional[int]:
        """Best-effort dispatch; a failure here must not undo the caller's work."""

        try:
            return self._notifications.create(
                title=title,
                message=message,
                type=type,
                recipient_id=int(recipient_id),
                is_global=False,
                priority=priority,
                expires_at=None,
                created_by=created_by,
                created_at=now or now_local(),
            )
        except Exception:
            logger.exception("Failed to notify user %s: %s", recipient_id, title)
            return None

    def for_user(self, user_id: int, *, now: datetime | None = None) -> NotificationFeed:
        now = now or now_local()
        items = self._notifications.feed_for(user_id=int(user_id), now=now, limit=NOTIFICATION_FEED_LIMIT)
        return NotificationFeed(items=list(items))

    def mark_read(self, user_id: int, notification_id: int, *, now: datetime | None = None) -> None:
        notification = self._notifications.get_by_id(int(notification_id))
        if not notification or not notification.visible_to(int(user_id), now or now_local()):
            raise NotFoundError("Notification not found")
        self._notifications.mark_read(notification_id=int(notification_id), user_id=int(user_id), read_at=now or now_local())

    def delete(self, *, current_role: Role, notification_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin privileges required")
        if not self._notifications.delete(int(notification_id)):
            raise NotFoundError("Notification not found")
        logger.info("Notification %s deleted", notification_id)
