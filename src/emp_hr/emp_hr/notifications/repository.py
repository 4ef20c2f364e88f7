from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationPriority, NotificationType
from .model import FeedItem, Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        title: str,
        message: str,
        type: NotificationType,
        recipient_id: Optional[int],
        is_global: bool,
        priority: NotificationPriority,
        expires_at: Optional[datetime],
        created_by: Optional[int],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def feed_for(self, *, user_id: int, now: datetime, limit: int) -> Sequence[FeedItem]:
        """Active, unexpired notifications addressed to ``user_id`` or global, newest first."""

        raise NotImplementedError

    def mark_read(self, *, notification_id: int, user_id: int, read_at: datetime) -> None:
        """Record a read receipt; a second call keeps the first read time."""

        raise NotImplementedError

    def delete(self, notification_id: int) -> bool:
        raise NotImplementedError
