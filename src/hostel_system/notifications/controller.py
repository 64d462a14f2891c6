from __future__ import annotations

from flask import Flask

from ..common.web import current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    notifications = container.notification_service

    def me():
        return container.user_service.get(current_user_id())

    @app.route("/api/notifications", endpoint="notifications")
    @login_required
    def notifications_index():
        user = me()
        return ok(notifications=notifications.list_for(user), unread=notifications.unread_count(user))

    @app.route("/api/notifications/<notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: str):
        notifications.mark_read(me(), notification_id)
        return ok()

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="read_all_notifications")
    @login_required
    def read_all_notifications():
        return ok(marked=notifications.mark_all_read(me()))
