from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .announcements.memory_announcement_repository import InMemoryAnnouncementRepository
from .announcements.service import AnnouncementService
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.service import AttendanceService
from .complaints.memory_complaint_repository import InMemoryComplaintRepository
from .complaints.service import ComplaintService
from .dashboard.service import DashboardService
from .disciplinary.memory_disciplinary_repository import InMemoryDisciplinaryRepository
from .disciplinary.service import DisciplinaryService
from .leaves.memory_leave_repository import InMemoryLeaveRepository
from .leaves.service import LeaveService
from .moderation.factory import ModeratorFactory
from .moderation.gateway import ContentModerator
from .moderation.service import ModerationService
from .notifications.memory_notification_repository import InMemoryNotificationRepository
from .notifications.service import NotificationService
from .seed.mock_data import load_mock_data
from .users.memory_user_repository import InMemoryUserRepository, InMemoryUserRequestRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: InMemoryUserRepository
    user_requests_repo: InMemoryUserRequestRepository
    complaints_repo: InMemoryComplaintRepository
    leaves_repo: InMemoryLeaveRepository
    attendance_repo: InMemoryAttendanceRepository
    announcements_repo: InMemoryAnnouncementRepository
    disciplinary_repo: InMemoryDisciplinaryRepository
    notifications_repo: InMemoryNotificationRepository

    moderation_service: ModerationService
    notification_service: NotificationService
    auth_service: AuthService
    user_service: UserService
    complaint_service: ComplaintService
    leave_service: LeaveService
    attendance_service: AttendanceService
    announcement_service: AnnouncementService
    disciplinary_service: DisciplinaryService
    dashboard_service: DashboardService


def build_container(*, settings: dict, moderator: Optional[ContentModerator] = None) -> Container:
    """Wire repositories and services. ``moderator`` overrides the configured backend."""
    if moderator is None:
        moderator = ModeratorFactory(
            backend=settings.get("MODERATION_BACKEND", "keyword"),
            url=settings.get("MODERATION_URL") or None,
            api_key=settings.get("MODERATION_API_KEY") or None,
            timeout=float(settings.get("MODERATION_TIMEOUT", 30.0)),
        ).create()

    users_repo = InMemoryUserRepository()
    user_requests_repo = InMemoryUserRequestRepository()
    complaints_repo = InMemoryComplaintRepository()
    leaves_repo = InMemoryLeaveRepository()
    attendance_repo = InMemoryAttendanceRepository()
    announcements_repo = InMemoryAnnouncementRepository()
    disciplinary_repo = InMemoryDisciplinaryRepository()
    notifications_repo = InMemoryNotificationRepository()

    if settings.get("SEED_MOCK_DATA", False):
        load_mock_data(users=users_repo, complaints=complaints_repo, attendance=attendance_repo)

    moderation_service = ModerationService(moderator, fail_open=bool(settings.get("MODERATION_FAIL_OPEN", False)))
    notification_service = NotificationService(notifications_repo)
    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, user_requests_repo, notification_service)
    complaint_service = ComplaintService(complaints_repo, users_repo, moderation_service, notification_service)
    leave_service = LeaveService(
        leaves_repo,
        moderation_service,
        notification_service,
        gate_pass_secret=str(settings["SECRET_KEY"]),
    )
    attendance_service = AttendanceService(attendance_repo, users_repo, notification_service)
    announcement_service = AnnouncementService(announcements_repo, moderation_service, notification_service)
    disciplinary_service = DisciplinaryService(disciplinary_repo, users_repo, notification_service)
    dashboard_service = DashboardService(
        complaint_service,
        complaints_repo,
        users_repo,
        leaves_repo,
        disciplinary_repo,
    )

    return Container(
        users_repo=users_repo,
        user_requests_repo=user_requests_repo,
        complaints_repo=complaints_repo,
        leaves_repo=leaves_repo,
        attendance_repo=attendance_repo,
        announcements_repo=announcements_repo,
        disciplinary_repo=disciplinary_repo,
        notifications_repo=notifications_repo,
        moderation_service=moderation_service,
        notification_service=notification_service,
        auth_service=auth_service,
        user_service=user_service,
        complaint_service=complaint_service,
        leave_service=leave_service,
        attendance_service=attendance_service,
        announcement_service=announcement_service,
        disciplinary_service=disciplinary_service,
        dashboard_service=dashboard_service,
    )
