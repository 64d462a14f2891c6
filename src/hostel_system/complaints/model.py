from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import Category, ComplaintStatus, EvidenceStage, PartsStatus, Urgency, WorkerStatus


@dataclass(frozen=True)
class PartsRequest:
    description: str
    status: PartsStatus
    requested_at: datetime
    image: Optional[str] = None


@dataclass(frozen=True)
class Review:
    rating: int
    comment: str


@dataclass(frozen=True)
class Complaint:
    """Domain entity: a maintenance complaint raised by a student.

    ``status`` is the main lifecycle; ``worker_status`` tracks the assigned
    worker's progress and is folded into ``status`` by the workflow rules.
    """

    complaint_id: str
    student_id: str
    student_name: str
    student_room: str
    title: str
    description: str
    clean_description: str
    images: tuple[str, ...]
    category: Category
    urgency: Urgency
    status: ComplaintStatus
    submitted_at: datetime
    worker_status: Optional[WorkerStatus] = None
    start_date: Optional[date] = None
    estimated_completion: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    warden_note: Optional[str] = None
    assigned_worker: Optional[str] = None
    assigned_worker_id: Optional[str] = None
    rejection_reason: Optional[str] = None
    is_delayed: bool = False
    delay_reason: Optional[str] = None
    warden_delay_response: Optional[str] = None
    extension_reason: Optional[str] = None
    admin_flagged: bool = False
    proof_images: dict[EvidenceStage, str] = field(default_factory=dict)
    parts: Optional[PartsRequest] = None
    review: Optional[Review] = None

    @property
    def image_url(self) -> Optional[str]:
        return self.images[0] if self.images else None
