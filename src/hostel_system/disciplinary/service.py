from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.images import parse_data_url
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_BLOCK_DAYS
from ..core.enums import DisciplinaryStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import DisciplinaryAction
from .repository import DisciplinaryRepository

logger = logging.getLogger(__name__)


class DisciplinaryService:
    def __init__(
        self,
        reports: DisciplinaryRepository,
        users: UserRepository,
        notifications: NotificationService,
    ):
        self._reports = reports
        self._users = users
        self._notifications = notifications

    def _pending(self, action_id: str) -> DisciplinaryAction:
        report = self._reports.get(action_id)
        if not report:
            raise NotFoundError("Report not found")
        if report.status != DisciplinaryStatus.REPORTED:
            raise ValidationError("Report has already been processed")
        return report

    def report(
        self,
        *,
        current_role: Role,
        reporter_id: str,
        student_id: str,
        reason: str,
        incident_date: Optional[date],
        proof_image: Optional[str] = None,
    ) -> DisciplinaryAction:
        if current_role != Role.WARDEN:
            raise AuthorizationError("Only wardens can file disciplinary reports")
        student = self._users.get_by_id((student_id or "").strip())
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")
        reason = require_non_empty(reason, "Reason")
        if not incident_date:
            raise ValidationError("Incident date is required")

        report = DisciplinaryAction(
            action_id=str(uuid.uuid4()),
            student_id=student.register_number,
            student_name=student.name,
            reason=reason,
            incident_date=incident_date,
            reported_by=reporter_id,
            reported_at=now_local(),
            status=DisciplinaryStatus.REPORTED,
            proof_image=parse_data_url(proof_image).to_data_url() if proof_image else None,
        )
        self._reports.add(report)
        self._notifications.notify("Disciplinary Report", f"New report filed against {student.name}", Role.ADMIN)
        logger.info("disciplinary report filed id=%s student=%s", report.action_id, student.register_number)
        return report

    def take_action(
        self,
        *,
        current_role: Role,
        admin_id: str,
        action_id: str,
        action: str = "Temporary block",
        block_days: int = DEFAULT_BLOCK_DAYS,
    ) -> DisciplinaryAction:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        report = self._pending(action_id)
        try:
            block_days = int(block_days)
        except (TypeError, ValueError):
            raise ValidationError("Block duration must be a number of days")
        if block_days < 1:
            raise ValidationError("Block duration must be at least one day")

        now = now_local()
        student = self._users.get_by_id(report.student_id)
        if student:
            self._users.save(replace(student, is_blocked=True, blocked_until=now + timedelta(days=block_days)))

        updated = replace(
            report,
            status=DisciplinaryStatus.ACTION_TAKEN,
            action_taken=require_non_empty(action, "Action"),
            block_duration_days=block_days,
            decided_by=admin_id,
            decided_at=now,
        )
        self._reports.save(updated)
        logger.info("disciplinary action id=%s student=%s days=%s", action_id, report.student_id, block_days)
        return updated

    def dismiss(self, *, current_role: Role, admin_id: str, action_id: str) -> DisciplinaryAction:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        report = self._pending(action_id)
        updated = replace(report, status=DisciplinaryStatus.DISMISSED, decided_by=admin_id, decided_at=now_local())
        self._reports.save(updated)
        return updated

    def unblock(self, *, current_role: Role, student_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        student = self._users.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        if not student.is_blocked:
            raise ValidationError("Student is not blocked")
        self._users.save(replace(student, is_blocked=False, blocked_until=None))

    def list_reports(self, *, current_role: Role) -> list[DisciplinaryAction]:
        if current_role not in {Role.WARDEN, Role.ADMIN}:
            raise AuthorizationError("You do not have permission")
        return list(self._reports.list_all())

    @staticmethod
    def to_row(a: DisciplinaryAction) -> dict:
        return {
            "id": a.action_id,
            "student_id": a.student_id,
            "student_name": a.student_name,
            "reason": a.reason,
            "date": a.incident_date.isoformat(),
            "reported_by": a.reported_by,
            "status": a.status.value,
            "action_taken": a.action_taken,
            "block_duration_days": a.block_duration_days,
            "proof_image": a.proof_image,
        }
