from __future__ import annotations

from flask import Flask, request, send_file

from ..common.images import ALLOWED_DOCUMENT_TYPES
from ..common.web import body, current_role, current_user_id, date_field, fail, image_field, login_required, ok, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    leaves = container.leave_service

    @app.route("/api/leaves", methods=["GET", "POST"], endpoint="leaves")
    @login_required
    def leaves_index():
        me = container.user_service.get(current_user_id())
        if request.method == "POST":
            data = body()
            req = leaves.create(
                user=me,
                from_date=date_field(data, "from_date"),
                to_date=date_field(data, "to_date"),
                reason=data.get("reason", ""),
                time_out=data.get("time_out", ""),
                time_in=data.get("time_in", ""),
                mentor_proof=image_field(data, "mentor_proof", allowed=ALLOWED_DOCUMENT_TYPES),
            )
            return ok(request=leaves.to_row(req), message="Leave request submitted"), 201

        return ok(requests=[leaves.to_row(r) for r in leaves.list_visible(me)])

    @app.route("/api/leaves/<request_id>/<decision>", methods=["POST"], endpoint="decide_leave")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def decide_leave(request_id: str, decision: str):
        me = container.user_service.get(current_user_id())
        if decision == "approve":
            req = leaves.approve(decider=me, request_id=request_id)
        elif decision == "reject":
            req = leaves.reject(decider=me, request_id=request_id)
        else:
            return fail("Unknown decision", 404)
        return ok(request=leaves.to_row(req))

    @app.route("/api/leaves/<request_id>/gate-pass", endpoint="gate_pass")
    @roles_required(Role.STUDENT)
    def gate_pass(request_id: str):
        me = container.user_service.get(current_user_id())
        gp = leaves.gate_pass(user=me, request_id=request_id)
        return ok(gate_pass=leaves.gate_pass_to_row(gp))

    @app.route("/api/leaves/<request_id>/gate-pass/qr", endpoint="gate_pass_qr")
    @roles_required(Role.STUDENT)
    def gate_pass_qr(request_id: str):
        me = container.user_service.get(current_user_id())
        buf = leaves.gate_pass_qr_png(user=me, request_id=request_id)
        return send_file(buf, mimetype="image/png")

    @app.route("/api/leaves/<request_id>/gate-pass/verify", methods=["POST"], endpoint="verify_gate_pass")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def verify_gate_pass(request_id: str):
        valid = leaves.verify_gate_pass(
            current_role=current_role(), request_id=request_id, code=body().get("code", "")
        )
        return ok(valid=valid)
