from __future__ import annotations

from flask import Flask, request

from ..common.web import body, current_role, current_user_id, login_required, ok, roles_required
from ..container import Container
from ..core.enums import Audience, Role


def register(app: Flask, container: Container) -> None:
    announcements = container.announcement_service

    @app.route("/api/announcements", methods=["GET", "POST"], endpoint="announcements")
    @login_required
    def announcements_index():
        me = container.user_service.get(current_user_id())
        if request.method == "POST":
            data = body()
            a = announcements.create(
                author=me,
                title=data.get("title", ""),
                content=data.get("content", ""),
                target_audience=data.get("target_audience") or Audience.ALL,
            )
            return ok(announcement=announcements.to_row(a, me), message="Announcement posted"), 201

        return ok(announcements=announcements.list_for(me))

    @app.route("/api/announcements/<announcement_id>", methods=["DELETE"], endpoint="delete_announcement")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def delete_announcement(announcement_id: str):
        announcements.delete(current_role=current_role(), announcement_id=announcement_id)
        return ok(message="Announcement deleted")

    @app.route("/api/announcements/<announcement_id>/react", methods=["POST"], endpoint="react_announcement")
    @login_required
    def react_announcement(announcement_id: str):
        me = container.user_service.get(current_user_id())
        data = body()
        a = announcements.react(
            user=me,
            announcement_id=announcement_id,
            kind=data.get("type"),
            reason=data.get("feedback"),
        )
        return ok(announcement=announcements.to_row(a, me))

    @app.route("/api/announcements/<announcement_id>/feedback", endpoint="announcement_feedback")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def announcement_feedback(announcement_id: str):
        return ok(feedback=announcements.feedback(current_role=current_role(), announcement_id=announcement_id))
