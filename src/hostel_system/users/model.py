from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ProfileChangeType, RequestStatus, Role, WorkerAvailability


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object; role-specific fields stay None for other roles.
    """

    register_number: str
    name: str
    role: Role
    room_number: str
    phone_number: str
    password_hash: str
    profile_image: Optional[str] = None
    address: Optional[str] = None
    details: Optional[str] = None
    blood_group: Optional[str] = None
    dob: Optional[str] = None
    father_name: Optional[str] = None
    hostel_valid_upto: Optional[str] = None
    # Worker specific
    work_category: Optional[str] = None
    current_status: Optional[WorkerAvailability] = None
    # Disciplinary blocking
    is_blocked: bool = False
    blocked_until: Optional[datetime] = None


@dataclass(frozen=True)
class UserRequest:
    """Onboarding request raised by a warden, decided by an admin."""

    request_id: str
    requested_by: str
    user_type: Role
    name: str
    identifier: str
    phone_number: str
    dob: str
    status: RequestStatus
    created_at: datetime
    father_name: Optional[str] = None
    blood_group: Optional[str] = None
    address: Optional[str] = None
    hostel_valid_upto: Optional[str] = None
    room_number: Optional[str] = None
    work_category: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class ProfileChangeRequest:
    request_id: str
    user_id: str
    user_name: str
    user_role: Role
    change_type: ProfileChangeType
    reason: str
    requested_date: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
