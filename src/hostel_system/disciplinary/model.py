from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DisciplinaryStatus


@dataclass(frozen=True)
class DisciplinaryAction:
    action_id: str
    student_id: str
    student_name: str
    reason: str
    incident_date: date
    reported_by: str
    reported_at: datetime
    status: DisciplinaryStatus
    action_taken: Optional[str] = None
    block_duration_days: Optional[int] = None
    proof_image: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
