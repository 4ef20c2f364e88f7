from __future__ import annotations

from flask import Flask, g

from ..common.http import datetime_value, int_value, json_body, ok, roles_required, token_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_feed")
    @token_required
    def feed():
        return ok(**container.notification_service.for_user(g.user.employee_id).to_dict())

    @app.route("/api/notifications", methods=["POST"], endpoint="notifications_send")
    @roles_required(Role.ADMIN)
    def send():
        body = json_body()
        notification = container.notification_service.send(
            current_role=g.user.role,
            created_by=g.user.employee_id,
            title=body.get("title", ""),
            message=body.get("message", ""),
            recipient_id=int_value(body.get("recipient_id"), "recipient_id", required=False),
            is_global=bool(body.get("is_global", False)),
            type=body.get("type", "announcement"),
            priority=body.get("priority", "normal"),
            expires_at=datetime_value(body.get("expires_at"), "expires_at"),
        )
        return ok("Notification sent", 201, notification=notification.to_dict())

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_read")
    @token_required
    def mark_read(notification_id: int):
        container.notification_service.mark_read(g.user.employee_id, notification_id)
        return ok("Marked as read")

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="notifications_delete")
    @roles_required(Role.ADMIN)
    def delete(notification_id: int):
        container.notification_service.delete(current_role=g.user.role, notification_id=notification_id)
        return ok("Notification deleted")
