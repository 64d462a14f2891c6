from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.images import parse_data_url
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.constants import DEFAULT_NEW_USER_PASSWORD
from ..core.enums import ProfileChangeType, RequestStatus, Role, WorkerAvailability
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from ..notifications.service import NotificationService
from .model import ProfileChangeRequest, User, UserRequest
from .repository import UserRepository, UserRequestRepository

logger = logging.getLogger(__name__)

STAFF_ROLES = {Role.WARDEN, Role.ADMIN}


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    register_number: str
    name: str
    role: Role


def user_to_row(user: User) -> dict:
    """Public profile, never includes the password hash."""
    return {
        "register_number": user.register_number,
        "name": user.name,
        "role": user.role.value,
        "room_number": user.room_number,
        "phone_number": user.phone_number,
        "profile_image": user.profile_image,
        "address": user.address,
        "details": user.details,
        "blood_group": user.blood_group,
        "dob": user.dob,
        "father_name": user.father_name,
        "hostel_valid_upto": user.hostel_valid_upto,
        "work_category": user.work_category,
        "current_status": user.current_status.value if user.current_status else None,
        "is_blocked": user.is_blocked,
        "blocked_until": user.blocked_until.isoformat() if user.blocked_until else None,
    }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _find(self, register_number: str) -> Optional[User]:
        key = (register_number or "").strip()
        return self._users.get_by_id(key) or self._users.get_by_id(key.upper())

    def authenticate(self, register_number: str, password: str, *, now: Optional[datetime] = None) -> SessionUser:
        user = self._find(register_number)
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hash values
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        if user.is_blocked:
            now = now or now_local()
            if user.blocked_until is None or user.blocked_until > now:
                raise AuthenticationError(
                    "Your account has been temporarily blocked due to disciplinary action. Contact Admin."
                )
            user = replace(user, is_blocked=False, blocked_until=None)
            self._users.save(user)
            logger.info("block expired user=%s", user.register_number)

        return SessionUser(register_number=user.register_number, name=user.name, role=user.role)

    def session_is_valid(self, register_number: str, *, now: Optional[datetime] = None) -> bool:
        """False once the account is deleted or under an active block."""
        user = self._users.get_by_id(register_number)
        if not user:
            return False
        if user.is_blocked:
            now = now or now_local()
            return user.blocked_until is not None and user.blocked_until <= now
        return True


class UserService:
    """Use cases: user records, onboarding and profile change requests."""

    def __init__(
        self,
        users: UserRepository,
        requests: UserRequestRepository,
        notifications: NotificationService,
    ):
        self._users = users
        self._requests = requests
        self._notifications = notifications

    def get(self, register_number: str) -> User:
        user = self._users.get_by_id(register_number)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, current_role: Role) -> list[dict]:
        if current_role not in STAFF_ROLES:
            raise AuthorizationError("You do not have permission")
        return [user_to_row(u) for u in self._users.list_all() if u.role != Role.ADMIN]

    def list_workers(self, *, category: Optional[str] = None) -> list[dict]:
        workers = self._users.list_all(role=Role.WORKER)
        if category:
            workers = [w for w in workers if (w.work_category or "").lower() == category.lower()]
        return [user_to_row(w) for w in workers]

    def delete_user(self, *, current_role: Role, register_number: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self._users.get_by_id(register_number)
        if not user:
            raise NotFoundError("User not found")
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_by_id(register_number):
            raise ValidationError("Failed to delete user")
        logger.info("user deleted id=%s", register_number)

    def update_profile_image(self, *, user_id: str, image: Optional[str]) -> User:
        user = self.get(user_id)
        stored = parse_data_url(image).to_data_url() if image else None
        updated = replace(user, profile_image=stored)
        self._users.save(updated)
        return updated

    def set_worker_availability(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        worker_id: str,
        availability,
    ) -> User:
        status = require_enum(WorkerAvailability, availability, "Availability")
        if current_role == Role.WORKER and current_user_id != worker_id:
            raise AuthorizationError("Workers can only change their own availability")
        if current_role not in {Role.WORKER, Role.ADMIN, Role.WARDEN}:
            raise AuthorizationError("You do not have permission")

        worker = self.get(worker_id)
        if worker.role != Role.WORKER:
            raise ValidationError("User is not a worker")
        updated = replace(worker, current_status=status)
        self._users.save(updated)
        return updated

    # Onboarding requests

    def submit_user_request(
        self,
        *,
        current_role: Role,
        current_user_id: str,
        user_type,
        name: str,
        identifier: str,
        phone_number: str = "",
        dob: str = "",
        father_name: str = "",
        blood_group: str = "",
        address: str = "",
        hostel_valid_upto: str = "",
        room_number: str = "",
        work_category: str = "",
    ) -> str:
        if current_role != Role.WARDEN:
            raise AuthorizationError("Only wardens can request new accounts")

        user_type = require_enum(Role, user_type, "User type")
        if user_type not in {Role.STUDENT, Role.WORKER}:
            raise ValidationError("Only student or worker accounts can be requested")

        name = require_non_empty(name, "Name")
        identifier = require_non_empty(identifier, "Identifier")
        if self._users.get_by_id(identifier):
            raise ValidationError("A user with this identifier already exists")

        is_student = user_type == Role.STUDENT
        req = UserRequest(
            request_id=str(uuid.uuid4()),
            requested_by=current_user_id,
            user_type=user_type,
            name=name,
            identifier=identifier,
            phone_number=(phone_number or "").strip(),
            dob=(dob or "").strip(),
            status=RequestStatus.PENDING,
            created_at=now_local(),
            father_name=optional_text(father_name) if is_student else None,
            blood_group=optional_text(blood_group) if is_student else None,
            address=optional_text(address) if is_student else None,
            hostel_valid_upto=optional_text(hostel_valid_upto) if is_student else None,
            room_number=optional_text(room_number) if is_student else None,
            work_category=optional_text(work_category) if not is_student else None,
        )
        self._requests.add_user_request(req)
        self._notifications.notify("Account Request", f"New {user_type.value} account request for {name}", Role.ADMIN)
        return req.request_id

    def list_user_requests(self, *, current_role: Role, pending_only: bool = True) -> list[UserRequest]:
        if current_role not in STAFF_ROLES:
            raise AuthorizationError("You do not have permission")
        return list(self._requests.list_user_requests(status=RequestStatus.PENDING if pending_only else None))

    def _pending_user_request(self, request_id: str) -> UserRequest:
        req = self._requests.get_user_request(request_id)
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been processed")
        return req

    def approve_user_request(self, *, current_role: Role, admin_id: str, request_id: str) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        req = self._pending_user_request(request_id)
        if self._users.get_by_id(req.identifier):
            raise ValidationError("A user with this identifier already exists")

        is_worker = req.user_type == Role.WORKER
        user = User(
            register_number=req.identifier,
            name=req.name,
            role=req.user_type,
            room_number=req.room_number or ("MAINTENANCE" if is_worker else "N/A"),
            phone_number=req.phone_number,
            password_hash=generate_password_hash(DEFAULT_NEW_USER_PASSWORD),
            address=req.address or "",
            blood_group=req.blood_group,
            dob=req.dob or None,
            father_name=req.father_name,
            hostel_valid_upto=req.hostel_valid_upto,
            work_category=req.work_category,
            current_status=WorkerAvailability.FREE if is_worker else None,
        )
        self._users.add(user)
        self._requests.save_user_request(
            replace(req, status=RequestStatus.APPROVED, decided_by=admin_id, decided_at=now_local())
        )
        logger.info("user request approved id=%s user=%s", request_id, user.register_number)
        return user

    def reject_user_request(self, *, current_role: Role, admin_id: str, request_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        req = self._pending_user_request(request_id)
        self._requests.save_user_request(
            replace(req, status=RequestStatus.REJECTED, decided_by=admin_id, decided_at=now_local())
        )

    # Profile change requests

    def request_profile_change(
        self,
        *,
        user_id: str,
        change_type,
        reason: str,
        requested_date: str,
    ) -> str:
        user = self.get(user_id)
        change_type = require_enum(ProfileChangeType, change_type, "Request type")
        if user.role == Role.STUDENT and change_type != ProfileChangeType.DETAILS_UPDATE:
            raise ValidationError("Students can only request a details update")

        reason = require_non_empty(reason, "Reason")
        requested_date = require_non_empty(requested_date, "Date")

        req = ProfileChangeRequest(
            request_id=str(uuid.uuid4()),
            user_id=user.register_number,
            user_name=user.name,
            user_role=user.role,
            change_type=change_type,
            reason=reason,
            requested_date=requested_date,
            status=RequestStatus.PENDING,
            created_at=now_local(),
        )
        self._requests.add_profile_request(req)
        self._notifications.notify("Profile Request", f"New Change Request from {user.name}", Role.ADMIN)
        self._notifications.notify("Request Sent", "Your profile update request has been sent to Admin.", user.role)
        return req.request_id

    def list_profile_requests(self, *, current_role: Role, current_user_id: str) -> list[ProfileChangeRequest]:
        if current_role == Role.ADMIN:
            return list(self._requests.list_profile_requests())
        return list(self._requests.list_profile_requests(user_id=current_user_id))

    def decide_profile_change(self, *, current_role: Role, admin_id: str, request_id: str, approve: bool) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        req = self._requests.get_profile_request(request_id)
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been processed")

        status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
        self._requests.save_profile_request(replace(req, status=status, decided_by=admin_id, decided_at=now_local()))
        self._notifications.notify(
            "Profile Request",
            f"{req.change_type.value} request for {req.user_name} was {status.value.lower()}.",
            req.user_role,
        )
