"""Complaint lifecycle rules.

Main status:  Submitted -> Approved -> Assigned -> In Progress -> Completed,
              Submitted -> Rejected.
Assigned / In Progress may fall back to Approved when the worker declines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ComplaintStatus, WorkerStatus
from ..core.exceptions import InvalidTransitionError

TRANSITIONS: dict[ComplaintStatus, frozenset[ComplaintStatus]] = {
    ComplaintStatus.SUBMITTED: frozenset({ComplaintStatus.APPROVED, ComplaintStatus.REJECTED}),
    ComplaintStatus.APPROVED: frozenset({ComplaintStatus.ASSIGNED}),
    ComplaintStatus.ASSIGNED: frozenset({ComplaintStatus.IN_PROGRESS, ComplaintStatus.COMPLETED, ComplaintStatus.APPROVED}),
    ComplaintStatus.IN_PROGRESS: frozenset({ComplaintStatus.COMPLETED, ComplaintStatus.APPROVED}),
    ComplaintStatus.COMPLETED: frozenset(),
    ComplaintStatus.REJECTED: frozenset(),
}

CLOSED = frozenset({ComplaintStatus.COMPLETED, ComplaintStatus.REJECTED})
ACTIVE_WORK = frozenset({ComplaintStatus.ASSIGNED, ComplaintStatus.IN_PROGRESS})


def can_transition(current: ComplaintStatus, target: ComplaintStatus) -> bool:
    return target == current or target in TRANSITIONS[current]


def require_transition(current: ComplaintStatus, target: ComplaintStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(f"Cannot move complaint from {current.value} to {target.value}")


@dataclass(frozen=True)
class WorkerUpdate:
    """Effect of a worker status change on the main complaint."""

    status: ComplaintStatus
    clears_assignment: bool = False


def apply_worker_status(current: ComplaintStatus, worker_status: WorkerStatus) -> WorkerUpdate:
    if current not in ACTIVE_WORK:
        raise InvalidTransitionError(f"Worker updates are not allowed while the complaint is {current.value}")

    if worker_status == WorkerStatus.REJECTED_BY_WORKER:
        return WorkerUpdate(status=ComplaintStatus.APPROVED, clears_assignment=True)
    if worker_status == WorkerStatus.COMPLETED:
        return WorkerUpdate(status=ComplaintStatus.COMPLETED)
    if worker_status in {WorkerStatus.REACHED, WorkerStatus.CHECKING, WorkerStatus.REPAIRING}:
        return WorkerUpdate(status=ComplaintStatus.IN_PROGRESS)
    # Assigned, Accepted and Waiting for Parts keep the main status.
    return WorkerUpdate(status=current)


def tracking_steps(status: ComplaintStatus, worker_status: Optional[WorkerStatus] = None) -> dict:
    if status == ComplaintStatus.REJECTED:
        return {"rejected": True, "steps": []}

    steps = [
        ("Raised", True),
        ("Approved", status != ComplaintStatus.SUBMITTED),
        ("Assigned", status in {ComplaintStatus.ASSIGNED, ComplaintStatus.IN_PROGRESS, ComplaintStatus.COMPLETED}),
        ("Working", status in {ComplaintStatus.IN_PROGRESS, ComplaintStatus.COMPLETED}),
        ("Done", status == ComplaintStatus.COMPLETED),
    ]
    return {
        "rejected": False,
        "worker_status": worker_status.value if worker_status else None,
        "steps": [{"label": label, "active": active} for label, active in steps],
    }
