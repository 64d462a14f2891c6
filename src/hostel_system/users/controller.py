from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.datetime_utils import isoformat_or_none
from ..common.web import (
    SESSION_KEY,
    body,
    current_role,
    current_user_id,
    fail,
    image_field,
    login_required,
    ok,
    roles_required,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import ProfileChangeRequest, UserRequest
from .service import user_to_row

logger = logging.getLogger(__name__)


def _user_request_row(r: UserRequest) -> dict:
    return {
        "id": r.request_id,
        "requested_by": r.requested_by,
        "user_type": r.user_type.value,
        "name": r.name,
        "identifier": r.identifier,
        "phone_number": r.phone_number,
        "dob": r.dob,
        "father_name": r.father_name,
        "blood_group": r.blood_group,
        "address": r.address,
        "hostel_valid_upto": r.hostel_valid_upto,
        "room_number": r.room_number,
        "work_category": r.work_category,
        "status": r.status.value,
        "created_at": r.created_at.isoformat(),
        "decided_by": r.decided_by,
        "decided_at": isoformat_or_none(r.decided_at),
    }


def _profile_request_row(r: ProfileChangeRequest) -> dict:
    return {
        "id": r.request_id,
        "user_id": r.user_id,
        "user_name": r.user_name,
        "user_role": r.user_role.value,
        "type": r.change_type.value,
        "reason": r.reason,
        "date": r.requested_date,
        "status": r.status.value,
        "created_at": r.created_at.isoformat(),
        "decided_by": r.decided_by,
        "decided_at": isoformat_or_none(r.decided_at),
    }


def register(app: Flask, container: Container) -> None:
    users = container.user_service

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = body()
        try:
            s_user = container.auth_service.authenticate(data.get("register_number", ""), data.get("password", ""))
        except AuthenticationError as e:
            logger.info("login failed id=%s", (data.get("register_number") or "").strip())
            return fail(str(e), 401)

        session.clear()
        session.permanent = bool(data.get("remember", True))
        session[SESSION_KEY] = s_user.register_number
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        logger.info("login ok id=%s role=%s", s_user.register_number, s_user.role.value)
        return ok(user=user_to_row(users.get(s_user.register_number)))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        return ok(user=user_to_row(users.get(current_user_id())))

    @app.route("/api/me/profile-image", methods=["PUT", "DELETE"], endpoint="profile_image")
    @login_required
    def profile_image():
        image = None
        if request.method == "PUT":
            image = image_field(body(), "image")
            if not image:
                return fail("Image is required", 400)
        updated = users.update_profile_image(user_id=current_user_id(), image=image)
        return ok(user=user_to_row(updated))

    @app.route("/api/users", endpoint="list_users")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def list_users():
        return ok(users=users.list_users(current_role=current_role()))

    @app.route("/api/users/<register_number>", methods=["DELETE"], endpoint="delete_user")
    @roles_required(Role.ADMIN)
    def delete_user(register_number: str):
        users.delete_user(current_role=current_role(), register_number=register_number)
        return ok(message="User deleted")

    @app.route("/api/workers", endpoint="list_workers")
    @login_required
    def list_workers():
        return ok(workers=users.list_workers(category=request.args.get("category")))

    @app.route("/api/workers/<worker_id>/availability", methods=["PUT"], endpoint="worker_availability")
    @roles_required(Role.WORKER, Role.WARDEN, Role.ADMIN)
    def worker_availability(worker_id: str):
        updated = users.set_worker_availability(
            current_role=current_role(),
            current_user_id=current_user_id(),
            worker_id=worker_id,
            availability=body().get("status"),
        )
        return ok(user=user_to_row(updated))

    # Onboarding

    @app.route("/api/user-requests", methods=["GET", "POST"], endpoint="user_requests")
    @roles_required(Role.WARDEN, Role.ADMIN)
    def user_requests():
        if request.method == "POST":
            data = body()
            request_id = users.submit_user_request(
                current_role=current_role(),
                current_user_id=current_user_id(),
                user_type=data.get("user_type"),
                name=data.get("name", ""),
                identifier=data.get("identifier", ""),
                phone_number=data.get("phone_number", ""),
                dob=data.get("dob", ""),
                father_name=data.get("father_name", ""),
                blood_group=data.get("blood_group", ""),
                address=data.get("address", ""),
                hostel_valid_upto=data.get("hostel_valid_upto", ""),
                room_number=data.get("room_number", ""),
                work_category=data.get("work_category", ""),
            )
            return ok(id=request_id, message="Request sent to admin"), 201

        pending_only = request.args.get("all") not in {"1", "true"}
        rows = users.list_user_requests(current_role=current_role(), pending_only=pending_only)
        return ok(requests=[_user_request_row(r) for r in rows])

    @app.route("/api/user-requests/<request_id>/<decision>", methods=["POST"], endpoint="decide_user_request")
    @roles_required(Role.ADMIN)
    def decide_user_request(request_id: str, decision: str):
        if decision == "approve":
            user = users.approve_user_request(
                current_role=current_role(), admin_id=current_user_id(), request_id=request_id
            )
            return ok(user=user_to_row(user))
        if decision == "reject":
            users.reject_user_request(current_role=current_role(), admin_id=current_user_id(), request_id=request_id)
            return ok(message="Request rejected")
        return fail("Unknown decision", 404)

    # Profile change requests

    @app.route("/api/profile-requests", methods=["GET", "POST"], endpoint="profile_requests")
    @login_required
    def profile_requests():
        if request.method == "POST":
            data = body()
            request_id = users.request_profile_change(
                user_id=current_user_id(),
                change_type=data.get("type"),
                reason=data.get("reason", ""),
                requested_date=data.get("date", ""),
            )
            return ok(id=request_id, message="Request sent to admin"), 201

        rows = users.list_profile_requests(current_role=current_role(), current_user_id=current_user_id())
        return ok(requests=[_profile_request_row(r) for r in rows])

    @app.route("/api/profile-requests/<request_id>/<decision>", methods=["POST"], endpoint="decide_profile_request")
    @roles_required(Role.ADMIN)
    def decide_profile_request(request_id: str, decision: str):
        if decision not in {"approve", "reject"}:
            return fail("Unknown decision", 404)
        users.decide_profile_change(
            current_role=current_role(),
            admin_id=current_user_id(),
            request_id=request_id,
            approve=decision == "approve",
        )
        return ok(message=f"Request {decision}d")
