from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.images import parse_data_url
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.constants import COMPLETION_HOUR, MAX_COMPLAINT_IMAGES, MAX_RATING, MIN_RATING
from ..core.enums import (
    Category,
    ComplaintStatus,
    EvidenceStage,
    PartsStatus,
    Role,
    WorkerAvailability,
    WorkerStatus,
)
from ..core.exceptions import (
    AuthorizationError,
    ContentRejectedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..moderation.service import ModerationService
from ..notifications.service import NotificationService
from ..users.model import User
from ..users.repository import UserRepository
from . import workflow
from .model import Complaint, PartsRequest, Review
from .repository import ComplaintRepository

logger = logging.getLogger(__name__)

STAFF_ROLES = {Role.WARDEN, Role.ADMIN}

_PARTS_ORDER = [PartsStatus.REQUESTED, PartsStatus.ORDERED, PartsStatus.RECEIVED]


def is_overdue(complaint: Complaint, now: datetime) -> bool:
    return (
        complaint.estimated_completion is not None
        and complaint.estimated_completion < now
        and complaint.status not in workflow.CLOSED
    )


class ComplaintService:
    def __init__(
        self,
        complaints: ComplaintRepository,
        users: UserRepository,
        moderation: ModerationService,
        notifications: NotificationService,
    ):
        self._complaints = complaints
        self._users = users
        self._moderation = moderation
        self._notifications = notifications

    # Helpers

    def _get(self, complaint_id: str) -> Complaint:
        c = self._complaints.get(complaint_id)
        if not c:
            raise NotFoundError("Complaint not found")
        return c

    def _get_worker(self, worker_id: str) -> User:
        worker = self._users.get_by_id((worker_id or "").strip())
        if not worker or worker.role != Role.WORKER:
            raise ValidationError("Selected worker does not exist")
        if worker.current_status == WorkerAvailability.UNAVAILABLE:
            raise ValidationError("Selected worker is unavailable")
        return worker

    def _refresh_worker_availability(self, worker_id: Optional[str]) -> None:
        """Recompute availability from the worker's open tasks; Unavailable is left alone."""
        if not worker_id:
            return
        worker = self._users.get_by_id(worker_id)
        if not worker or worker.role != Role.WORKER:
            return
        if worker.current_status == WorkerAvailability.UNAVAILABLE:
            return
        open_statuses = {c.status for c in self._complaints.list_all(worker_id=worker_id)}
        if ComplaintStatus.IN_PROGRESS in open_statuses:
            availability = WorkerAvailability.WORKING
        elif ComplaintStatus.ASSIGNED in open_statuses:
            availability = WorkerAvailability.BUSY
        else:
            availability = WorkerAvailability.FREE
        if worker.current_status != availability:
            self._users.save(replace(worker, current_status=availability))

    @staticmethod
    def _require_staff(current_role: Role) -> None:
        if current_role not in STAFF_ROLES:
            raise AuthorizationError("Only wardens and admins can manage complaints")

    @staticmethod
    def _completion_datetime(value: date) -> datetime:
        return datetime.combine(value, time(COMPLETION_HOUR, 0))

    def _save(self, complaint: Complaint) -> Complaint:
        self._complaints.save(complaint)
        return complaint

    # Student

    def submit(
        self,
        *,
        current_role: Role,
        student_id: str,
        description: str,
        category,
        images: Sequence[str],
    ) -> Complaint:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can raise complaints")
        student = self._users.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")

        if not category:
            raise ValidationError("Please select a problem category.")
        category = require_enum(Category, category, "Category")
        description = require_non_empty(description, "Description")
        if not images:
            raise ValidationError("At least one image is mandatory for proof.")
        if len(images) > MAX_COMPLAINT_IMAGES:
            raise ValidationError(f"Maximum {MAX_COMPLAINT_IMAGES} photos allowed.")
        inline = [parse_data_url(i) for i in images]

        analysis = self._moderation.analyze_complaint(description, inline, category.value)
        if not analysis.is_safe:
            logger.warning("complaint rejected by moderation student=%s", student_id)
            raise ContentRejectedError(
                f"Submission rejected: {analysis.rejection_reason or 'Content violation detected.'}",
                analysis.rejection_reason,
            )
        if not analysis.matches_description:
            logger.warning("complaint evidence mismatch student=%s", student_id)
            raise ContentRejectedError(
                "Evidence Mismatch: The uploaded image does not match your description. "
                "You must upload valid proof of the specific problem.",
                analysis.rejection_reason,
            )

        complaint = Complaint(
            complaint_id=self._complaints.next_id(student_id=student.register_number, room=student.room_number),
            student_id=student.register_number,
            student_name=student.name,
            student_room=student.room_number,
            title=analysis.title,
            description=description,
            clean_description=analysis.clean_description,
            images=tuple(i.to_data_url() for i in inline),
            category=analysis.category,
            urgency=analysis.urgency,
            status=ComplaintStatus.SUBMITTED,
            submitted_at=now_local(),
        )
        self._complaints.add(complaint)
        self._notifications.notify(
            "New Complaint", f"{complaint.title} raised from room {complaint.student_room}", Role.WARDEN
        )
        logger.info("complaint submitted id=%s category=%s", complaint.complaint_id, complaint.category.value)
        return complaint

    def report_delay(self, *, current_role: Role, student_id: str, complaint_id: str, reason: str) -> Complaint:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can report delays")
        c = self._get(complaint_id)
        if c.student_id != student_id:
            raise AuthorizationError("You can only report delays on your own complaints")
        if not is_overdue(c, now_local()):
            raise ValidationError("Complaint is not overdue")
        if c.is_delayed:
            raise ValidationError("Delay has already been reported")
        reason = require_non_empty(reason, "Reason")

        self._notifications.notify("Delay Reported", f"Student reported a delay on {c.title}", Role.WARDEN)
        return self._save(replace(c, is_delayed=True, delay_reason=reason))

    def submit_review(
        self,
        *,
        current_role: Role,
        student_id: str,
        complaint_id: str,
        rating: int,
        comment: str = "",
    ) -> Complaint:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can review complaints")
        c = self._get(complaint_id)
        if c.student_id != student_id:
            raise AuthorizationError("You can only review your own complaints")
        if c.status != ComplaintStatus.COMPLETED:
            raise ValidationError("Only completed complaints can be reviewed")
        if c.review is not None:
            raise ValidationError("Complaint has already been reviewed")
        try:
            rating = int(rating)
        except (TypeError, ValueError):
            raise ValidationError("Rating must be a number")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        text = (comment or "").strip()
        if text:
            verdict = self._moderation.moderate_text(text)
            if not verdict.approved:
                raise ContentRejectedError(verdict.reason or "Improper words detected.", verdict.reason)
            text = verdict.clean_text

        return self._save(replace(c, review=Review(rating=rating, comment=text)))

    # Warden / admin

    def approve(self, *, current_role: Role, complaint_id: str, note: str = "") -> Complaint:
        self._require_staff(current_role)
        c = self._get(complaint_id)
        workflow.require_transition(c.status, ComplaintStatus.APPROVED)
        if c.status != ComplaintStatus.SUBMITTED:
            raise InvalidTransitionError("Only submitted complaints can be approved")
        logger.info("complaint approved id=%s", complaint_id)
        return self._save(replace(c, status=ComplaintStatus.APPROVED, warden_note=optional_text(note)))

    def assign(
        self,
        *,
        current_role: Role,
        complaint_id: str,
        worker_id: str,
        start_date: date,
        completion_date: date,
    ) -> Complaint:
        self._require_staff(current_role)
        c = self._get(complaint_id)
        workflow.require_transition(c.status, ComplaintStatus.ASSIGNED)
        if c.status != ComplaintStatus.APPROVED:
            raise InvalidTransitionError("Only approved complaints can be assigned")
        if not start_date or not completion_date:
            raise ValidationError("Start date and completion date are required")
        if completion_date < start_date:
            raise ValidationError("Completion date cannot be before start date")

        worker = self._get_worker(worker_id)
        updated = replace(
            c,
            status=ComplaintStatus.ASSIGNED,
            worker_status=WorkerStatus.ASSIGNED,
            assigned_worker=worker.name,
            assigned_worker_id=worker.register_number,
            start_date=start_date,
            estimated_completion=self._completion_datetime(completion_date),
        )
        self._save(updated)
        self._refresh_worker_availability(worker.register_number)
        self._notifications.notify("New Task", f"{c.title} assigned to {worker.name}", Role.WORKER)
        self._notifications.notify("Complaint Assigned", f"{c.title} has been assigned to a worker", Role.STUDENT)
        logger.info("complaint assigned id=%s worker=%s", complaint_id, worker.register_number)
        return updated

    def approve_and_assign(
        self,
        *,
        current_role: Role,
        complaint_id: str,
        worker_id: str,
        start_date: date,
        completion_date: date,
        note: str = "",
    ) -> Complaint:
        self._require_staff(current_role)
        # Validate everything before the first write so a bad worker id leaves the complaint untouched.
        c = self._get(complaint_id)
        if c.status != ComplaintStatus.SUBMITTED:
            raise InvalidTransitionError("Only submitted complaints can be approved")
        self._get_worker(worker_id)
        if not start_date or not completion_date:
            raise ValidationError("Start date and completion date are required")
        if completion_date < start_date:
            raise ValidationError("Completion date cannot be before start date")

        self.approve(current_role=current_role, complaint_id=complaint_id, note=note)
        return self.assign(
            current_role=current_role,
            complaint_id=complaint_id,
            worker_id=worker_id,
            start_date=start_date,
            completion_date=completion_date,
        )

    def reject(self, *, current_role: Role, complaint_id: str, reason: str) -> Complaint:
        self._require_staff(current_role)
        c = self._get(complaint_id)
        reason = require_non_empty(reason, "Rejection reason")
        workflow.require_transition(c.status, ComplaintStatus.REJECTED)
        if c.status == ComplaintStatus.REJECTED:
            raise InvalidTransitionError("Complaint is already rejected")

        self._notifications.notify("Complaint Rejected", f"{c.title}: {reason}", Role.STUDENT)
        logger.info("complaint rejected id=%s", complaint_id)
        return self._save(replace(c, status=ComplaintStatus.REJECTED, rejection_reason=reason))

    def extend_deadline(
        self,
        *,
        current_role: Role,
        complaint_id: str,
        reason: str,
        completion_date: date,
    ) -> Complaint:
        self._require_staff(current_role)
        c = self._get(complaint_id)
        if c.status in workflow.CLOSED:
            raise InvalidTransitionError("Closed complaints cannot be extended")
        if not is_overdue(c, now_local()):
            raise ValidationError("Only overdue complaints can be extended")
        reason = require_non_empty(reason, "Extension reason")
        if not completion_date:
            raise ValidationError("New completion date is required")
        new_deadline = self._completion_datetime(completion_date)
        if c.estimated_completion and new_deadline <= c.estimated_completion:
            raise ValidationError("New completion date must be after the current deadline")

        verdict = self._moderation.validate_extension_reason(reason)
        if verdict.flag_for_admin:
            self._notifications.notify("Extension Flagged", f"Deadline extension on {c.title} needs review", Role.ADMIN)
            logger.warning("extension flagged for admin id=%s", complaint_id)

        return self._save(
            replace(
                c,
                estimated_completion=new_deadline,
                extension_reason=reason,
                admin_flagged=c.admin_flagged or verdict.flag_for_admin,
            )
        )

    def reply_delay(self, *, current_role: Role, complaint_id: str, response: str) -> Complaint:
        self._require_staff(current_role)
        c = self._get(complaint_id)
        if not c.is_delayed:
            raise ValidationError("No delay has been reported on this complaint")
        response = require_non_empty(response, "Response")
        self._notifications.notify("Delay Update", f"Warden replied on {c.title}", Role.STUDENT)
        return self._save(replace(c, warden_delay_response=response))

    def update_parts_status(self, *, current_role: Role, complaint_id: str, status) -> Complaint:
        self._require_staff(current_role)
        status = require_enum(PartsStatus, status, "Parts status")
        c = self._get(complaint_id)
        if not c.parts:
            raise ValidationError("No parts have been requested")
        if _PARTS_ORDER.index(status) <= _PARTS_ORDER.index(c.parts.status):
            raise InvalidTransitionError(f"Parts are already {c.parts.status.value}")
        return self._save(replace(c, parts=replace(c.parts, status=status)))

    def clear_flag(self, *, current_role: Role, complaint_id: str) -> Complaint:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        c = self._get(complaint_id)
        return self._save(replace(c, admin_flagged=False))

    def delete(self, *, current_role: Role, complaint_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        c = self._get(complaint_id)
        if not self._complaints.delete(complaint_id):
            raise ValidationError("Failed to delete complaint")
        self._refresh_worker_availability(c.assigned_worker_id)
        logger.info("complaint deleted id=%s", complaint_id)

    # Worker

    def _get_own_task(self, *, current_role: Role, worker_id: str, complaint_id: str) -> Complaint:
        if current_role != Role.WORKER:
            raise AuthorizationError("Only workers can update work progress")
        c = self._get(complaint_id)
        if c.assigned_worker_id != worker_id:
            raise AuthorizationError("This complaint is not assigned to you")
        return c

    def update_worker_status(
        self,
        *,
        current_role: Role,
        worker_id: str,
        complaint_id: str,
        worker_status,
    ) -> Complaint:
        worker_status = require_enum(WorkerStatus, worker_status, "Worker status")
        c = self._get_own_task(current_role=current_role, worker_id=worker_id, complaint_id=complaint_id)
        effect = workflow.apply_worker_status(c.status, worker_status)
        workflow.require_transition(c.status, effect.status)

        if effect.clears_assignment:
            updated = replace(
                c,
                status=effect.status,
                worker_status=worker_status,
                assigned_worker=None,
                assigned_worker_id=None,
            )
            self._notifications.notify("Task Declined", f"Worker declined {c.title}; reassign it.", Role.WARDEN)
        else:
            updated = replace(c, status=effect.status, worker_status=worker_status)
            if effect.status == ComplaintStatus.COMPLETED:
                updated = replace(updated, completed_at=now_local())
        self._save(updated)
        self._refresh_worker_availability(worker_id)

        if worker_status == WorkerStatus.REPAIRING:
            self._notifications.notify("Work Started", f"Worker started repair for {c.title}", Role.STUDENT)
            self._notifications.notify("Work Update", f"Worker started {c.title} in {c.student_room}", Role.WARDEN)
        elif worker_status == WorkerStatus.COMPLETED:
            self._notifications.notify("Work Completed", f"Repair for {c.title} marked done by worker.", Role.STUDENT)
            self._notifications.notify("Task Done", f"Worker completed {c.title}.", Role.WARDEN)

        logger.info(
            "worker update id=%s worker_status=%s status=%s",
            complaint_id,
            worker_status.value,
            effect.status.value,
        )
        return updated

    def upload_proof(
        self,
        *,
        current_role: Role,
        worker_id: str,
        complaint_id: str,
        stage,
        image: str,
    ) -> Complaint:
        stage = require_enum(EvidenceStage, stage, "Stage")
        c = self._get_own_task(current_role=current_role, worker_id=worker_id, complaint_id=complaint_id)
        if c.status not in workflow.ACTIVE_WORK and not (
            c.status == ComplaintStatus.COMPLETED and stage == EvidenceStage.COMPLETED
        ):
            raise InvalidTransitionError("Proof can only be added to active work")

        inline = parse_data_url(image)
        verdict = self._moderation.validate_worker_evidence(inline, stage, c.clean_description)
        if not verdict.is_valid:
            logger.warning("worker proof rejected id=%s stage=%s", complaint_id, stage.value)
            raise ContentRejectedError(verdict.reason or "Proof image rejected.", verdict.reason)

        proofs = dict(c.proof_images)
        proofs[stage] = inline.to_data_url()
        return self._save(replace(c, proof_images=proofs))

    def request_parts(
        self,
        *,
        current_role: Role,
        worker_id: str,
        complaint_id: str,
        description: str,
        image: Optional[str] = None,
    ) -> Complaint:
        c = self._get_own_task(current_role=current_role, worker_id=worker_id, complaint_id=complaint_id)
        description = require_non_empty(description, "Parts description")
        stored_image = parse_data_url(image).to_data_url() if image else None

        effect = workflow.apply_worker_status(c.status, WorkerStatus.WAITING)
        parts = PartsRequest(
            description=description,
            status=PartsStatus.REQUESTED,
            requested_at=now_local(),
            image=stored_image,
        )
        self._notifications.notify("Parts Requested", f"Parts needed for {c.title}: {description}", Role.WARDEN)
        return self._save(replace(c, status=effect.status, worker_status=WorkerStatus.WAITING, parts=parts))

    # Queries

    def get_for(self, user: User, complaint_id: str) -> Complaint:
        c = self._get(complaint_id)
        if user.role == Role.STUDENT and c.student_id != user.register_number:
            raise AuthorizationError("You do not have permission")
        if user.role == Role.WORKER and c.assigned_worker_id != user.register_number:
            raise AuthorizationError("You do not have permission")
        return c

    def list_for(self, user: User) -> list[Complaint]:
        if user.role == Role.STUDENT:
            return list(self._complaints.list_all(student_id=user.register_number))
        if user.role == Role.WORKER:
            return list(self._complaints.list_all(worker_id=user.register_number))
        return list(self._complaints.list_all())

    def list_flagged(self, *, current_role: Role) -> list[Complaint]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return [c for c in self._complaints.list_all() if c.admin_flagged]

    def to_row(self, c: Complaint, *, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        return {
            "id": c.complaint_id,
            "student_id": c.student_id,
            "student_name": c.student_name,
            "student_room": c.student_room,
            "title": c.title,
            "description": c.description,
            "clean_description": c.clean_description,
            "image_url": c.image_url,
            "images": list(c.images),
            "category": c.category.value,
            "urgency": c.urgency.value,
            "status": c.status.value,
            "worker_status": c.worker_status.value if c.worker_status else None,
            "submitted_at": c.submitted_at.isoformat(),
            "start_date": c.start_date.isoformat() if c.start_date else None,
            "estimated_completion": c.estimated_completion.isoformat() if c.estimated_completion else None,
            "completed_at": c.completed_at.isoformat() if c.completed_at else None,
            "warden_note": c.warden_note,
            "assigned_worker": c.assigned_worker,
            "assigned_worker_id": c.assigned_worker_id,
            "rejection_reason": c.rejection_reason,
            "is_overdue": is_overdue(c, now),
            "is_delayed": c.is_delayed,
            "delay_reason": c.delay_reason,
            "warden_delay_response": c.warden_delay_response,
            "extension_reason": c.extension_reason,
            "admin_flagged": c.admin_flagged,
            "proof_images": {stage.value: url for stage, url in c.proof_images.items()},
            "parts": (
                {
                    "description": c.parts.description,
                    "status": c.parts.status.value,
                    "requested_at": c.parts.requested_at.isoformat(),
                    "image": c.parts.image,
                }
                if c.parts
                else None
            ),
            "review": {"rating": c.review.rating, "comment": c.review.comment} if c.review else None,
            "tracking": workflow.tracking_steps(c.status, c.worker_status),
        }
