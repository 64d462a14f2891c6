from __future__ import annotations

from flask import Flask, request

from ..common.web import body, current_role, current_user_id, date_field, fail, image_field, ok, roles_required
from ..container import Container
from ..core.constants import DEFAULT_BLOCK_DAYS
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    disciplinary = container.disciplinary_service

    @app.route("/api/disciplinary", methods=["GET", "POST"], endpoint="disciplinary")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def disciplinary_index():
        if request.method == "POST":
            data = body()
            report = disciplinary.report(
                current_role=current_role(),
                reporter_id=current_user_id(),
                student_id=data.get("student_id", ""),
                reason=data.get("reason", ""),
                incident_date=date_field(data, "date"),
                proof_image=image_field(data, "proof_image"),
            )
            return ok(report=disciplinary.to_row(report), message="Report sent to admin"), 201

        return ok(reports=[disciplinary.to_row(r) for r in disciplinary.list_reports(current_role=current_role())])

    @app.route("/api/disciplinary/<action_id>/<decision>", methods=["POST"], endpoint="decide_disciplinary")
    @roles_required(Role.ADMIN)
    def decide_disciplinary(action_id: str, decision: str):
        if decision == "action":
            data = body()
            report = disciplinary.take_action(
                current_role=current_role(),
                admin_id=current_user_id(),
                action_id=action_id,
                action=data.get("action") or "Temporary block",
                block_days=data.get("block_days") or DEFAULT_BLOCK_DAYS,
            )
        elif decision == "dismiss":
            report = disciplinary.dismiss(current_role=current_role(), admin_id=current_user_id(), action_id=action_id)
        else:
            return fail("Unknown decision", 404)
        return ok(report=disciplinary.to_row(report))

    @app.route("/api/users/<student_id>/unblock", methods=["POST"], endpoint="unblock_user")
    @roles_required(Role.ADMIN)
    def unblock_user(student_id: str):
        disciplinary.unblock(current_role=current_role(), student_id=student_id)
        return ok(message="User unblocked")
