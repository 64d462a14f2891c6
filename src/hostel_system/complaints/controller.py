from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    body,
    current_role,
    current_user_id,
    date_field,
    image_field,
    image_list,
    login_required,
    ok,
    roles_required,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    complaints = container.complaint_service

    def row(c):
        return complaints.to_row(c)

    @app.route("/api/complaints", methods=["GET", "POST"], endpoint="complaints")
    @login_required
    def complaints_index():
        me = container.user_service.get(current_user_id())
        if request.method == "POST":
            data = body()
            c = complaints.submit(
                current_role=me.role,
                student_id=me.register_number,
                description=data.get("description", ""),
                category=data.get("category"),
                images=image_list(data, "images"),
            )
            return ok(complaint=row(c), message="Complaint submitted"), 201

        return ok(complaints=[row(c) for c in complaints.list_for(me)])

    @app.route("/api/complaints/flagged", endpoint="flagged_complaints")
    @roles_required(Role.ADMIN)
    def flagged_complaints():
        return ok(complaints=[row(c) for c in complaints.list_flagged(current_role=current_role())])

    @app.route("/api/complaints/<complaint_id>", methods=["GET", "DELETE"], endpoint="complaint_detail")
    @login_required
    def complaint_detail(complaint_id: str):
        if request.method == "DELETE":
            complaints.delete(current_role=current_role(), complaint_id=complaint_id)
            return ok(message="Complaint deleted")
        me = container.user_service.get(current_user_id())
        return ok(complaint=row(complaints.get_for(me, complaint_id)))

    # Warden / admin

    @app.route("/api/complaints/<complaint_id>/approve", methods=["POST"], endpoint="approve_complaint")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def approve_complaint(complaint_id: str):
        data = body()
        if data.get("worker_id"):
            c = complaints.approve_and_assign(
                current_role=current_role(),
                complaint_id=complaint_id,
                worker_id=data["worker_id"],
                start_date=date_field(data, "start_date"),
                completion_date=date_field(data, "completion_date"),
                note=data.get("note", ""),
            )
        else:
            c = complaints.approve(current_role=current_role(), complaint_id=complaint_id, note=data.get("note", ""))
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/assign", methods=["POST"], endpoint="assign_complaint")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def assign_complaint(complaint_id: str):
        data = body()
        c = complaints.assign(
            current_role=current_role(),
            complaint_id=complaint_id,
            worker_id=data.get("worker_id", ""),
            start_date=date_field(data, "start_date"),
            completion_date=date_field(data, "completion_date"),
        )
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/reject", methods=["POST"], endpoint="reject_complaint")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def reject_complaint(complaint_id: str):
        c = complaints.reject(current_role=current_role(), complaint_id=complaint_id, reason=body().get("reason", ""))
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/extend", methods=["POST"], endpoint="extend_complaint")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def extend_complaint(complaint_id: str):
        data = body()
        c = complaints.extend_deadline(
            current_role=current_role(),
            complaint_id=complaint_id,
            reason=data.get("reason", ""),
            completion_date=date_field(data, "completion_date"),
        )
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/delay-reply", methods=["POST"], endpoint="reply_delay")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def reply_delay(complaint_id: str):
        c = complaints.reply_delay(
            current_role=current_role(), complaint_id=complaint_id, response=body().get("response", "")
        )
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/parts", methods=["POST", "PUT"], endpoint="complaint_parts")
    @login_required
    def complaint_parts(complaint_id: str):
        data = body()
        if request.method == "PUT":
            c = complaints.update_parts_status(
                current_role=current_role(), complaint_id=complaint_id, status=data.get("status")
            )
        else:
            c = complaints.request_parts(
                current_role=current_role(),
                worker_id=current_user_id(),
                complaint_id=complaint_id,
                description=data.get("description", ""),
                image=image_field(data, "image"),
            )
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/clear-flag", methods=["POST"], endpoint="clear_complaint_flag")
    @roles_required(Role.ADMIN)
    def clear_complaint_flag(complaint_id: str):
        return ok(complaint=row(complaints.clear_flag(current_role=current_role(), complaint_id=complaint_id)))

    # Student

    @app.route("/api/complaints/<complaint_id>/delay", methods=["POST"], endpoint="report_delay")
    @roles_required(Role.STUDENT)
    def report_delay(complaint_id: str):
        c = complaints.report_delay(
            current_role=current_role(),
            student_id=current_user_id(),
            complaint_id=complaint_id,
            reason=body().get("reason", ""),
        )
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/review", methods=["POST"], endpoint="review_complaint")
    @roles_required(Role.STUDENT)
    def review_complaint(complaint_id: str):
        data = body()
        c = complaints.submit_review(
            current_role=current_role(),
            student_id=current_user_id(),
            complaint_id=complaint_id,
            rating=data.get("rating"),
            comment=data.get("comment", ""),
        )
        return ok(complaint=row(c), message="Review submitted")

    # Worker

    @app.route("/api/complaints/<complaint_id>/worker-status", methods=["POST"], endpoint="worker_status")
    @roles_required(Role.WORKER)
    def worker_status(complaint_id: str):
        c = complaints.update_worker_status(
            current_role=current_role(),
            worker_id=current_user_id(),
            complaint_id=complaint_id,
            worker_status=body().get("status"),
        )
        return ok(complaint=row(c))

    @app.route("/api/complaints/<complaint_id>/proof", methods=["POST"], endpoint="upload_proof")
    @roles_required(Role.WORKER)
    def upload_proof(complaint_id: str):
        data = body()
        c = complaints.upload_proof(
            current_role=current_role(),
            worker_id=current_user_id(),
            complaint_id=complaint_id,
            stage=data.get("stage"),
            image=image_field(data, "image") or "",
        )
        return ok(complaint=row(c))
