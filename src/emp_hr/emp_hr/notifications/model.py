from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import NotificationPriority, NotificationType


@dataclass(frozen=True)
class Notification:
    """Message to one recipient, or to everyone when ``is_global``."""

    notification_id: int
    title: str
    message: str
    type: NotificationType
    recipient_id: Optional[int]
    is_global: bool
    priority: NotificationPriority
    created_by: Optional[int]
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool = True

    def visible_to(self, user_id: int, now: datetime) -> bool:
        if not self.is_active:
            return False
        if self.expires_at is not None and self.expires_at <= now:
            return False
        return self.is_global or self.recipient_id == int(user_id)

    def to_dict(self) -> dict:
        return {
            "notification_id": self.notification_id,
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "recipient_id": self.recipient_id,
            "is_global": self.is_global,
            "priority": self.priority.value,
            "created_by": self.created_by,
            "created_at": iso_or_none(self.created_at),
            "expires_at": iso_or_none(self.expires_at),
        }


@dataclass(frozen=True)
class FeedItem:
    notification: Notification
    read_at: Optional[datetime]

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def to_dict(self) -> dict:
        out = self.notification.to_dict()
        out["is_read"] = self.is_read
        out["read_at"] = iso_or_none(self.read_at)
        return out
