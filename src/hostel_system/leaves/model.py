from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import RequestStatus, Role


@dataclass(frozen=True)
class LeaveRequest:
    request_id: str
    user_id: str
    user_name: str
    user_role: Role
    from_date: date
    to_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
    # Student outing specific
    time_out: Optional[time] = None
    time_in: Optional[time] = None
    mentor_proof: Optional[str] = None
    # Gate pass pre-fill
    room_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    father_name: Optional[str] = None
    gate_pass_generated: bool = False


@dataclass(frozen=True)
class GatePass:
    """Printable authorisation for an approved student leave."""

    request_id: str
    holder_id: str
    holder_name: str
    room_number: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    father_name: Optional[str]
    from_date: date
    to_date: date
    time_out: Optional[time]
    time_in: Optional[time]
    reason: str
    approved_by: Optional[str]
    approved_at: Optional[datetime]
    verification_code: str
