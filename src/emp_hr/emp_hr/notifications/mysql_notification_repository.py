from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationPriority, NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import FeedItem, Notification
from .repository import NotificationRepository

_COLUMNS = (
    "n.notification_id, n.title, n.message, n.type, n.recipient_id, n.is_global, n.priority, "
    "n.created_by, n.created_at, n.expires_at, n.is_active"
)


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        title=r["title"],
        message=r["message"],
        type=NotificationType(r["type"]),
        recipient_id=int(r["recipient_id"]) if r.get("recipient_id") else None,
        is_global=bool(r["is_global"]),
        priority=NotificationPriority(r["priority"]),
        created_by=int(r["created_by"]) if r.get("created_by") else None,
        created_at=r["created_at"],
        expires_at=r.get("expires_at"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(title, message, type, recipient_id, is_global, priority,
                                          expires_at, created_by, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    title,
                    message,
                    type.value,
                    recipient_id,
                    int(bool(is_global)),
                    priority.value,
                    expires_at,
                    created_by,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications n WHERE n.notification_id=%s", (int(notification_id),))
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def feed_for(self, *, user_id: int, now: datetime, limit: int) -> Sequence[FeedItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, r.read_at
                FROM notifications n
                LEFT JOIN notification_reads r
                       ON r.notification_id = n.notification_id AND r.user_id = %s
                WHERE n.is_active = 1
                  AND (n.recipient_id = %s OR n.is_global = 1)
                  AND (n.expires_at IS NULL OR n.expires_at > %s)
                ORDER BY n.created_at DESC
                LIMIT %s
                """,
                (int(user_id), int(user_id), now, int(limit)),
            )
            return [FeedItem(notification=_to_notification(r), read_at=r.get("read_at")) for r in fetchall(cur)]

    def mark_read(self, *, notification_id: int, user_id: int, read_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO notification_reads(notification_id, user_id, read_at) VALUES(%s,%s,%s)",
                (int(notification_id), int(user_id), read_at),
            )

    def delete(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0
