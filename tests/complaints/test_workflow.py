import pytest

from hostel_system.complaints import workflow
from hostel_system.core.enums import ComplaintStatus, WorkerStatus
from hostel_system.core.exceptions import InvalidTransitionError


def test_transition_table_allows_main_lifecycle():
    path = [
        ComplaintStatus.SUBMITTED,
        ComplaintStatus.APPROVED,
        ComplaintStatus.ASSIGNED,
        ComplaintStatus.IN_PROGRESS,
        ComplaintStatus.COMPLETED,
    ]
    for current, target in zip(path, path[1:]):
        assert workflow.can_transition(current, target)


def test_closed_states_are_terminal():
    for target in ComplaintStatus:
        if target != ComplaintStatus.COMPLETED:
            assert not workflow.can_transition(ComplaintStatus.COMPLETED, target)
    with pytest.raises(InvalidTransitionError):
        workflow.require_transition(ComplaintStatus.REJECTED, ComplaintStatus.APPROVED)


def test_submitted_cannot_skip_to_in_progress():
    assert not workflow.can_transition(ComplaintStatus.SUBMITTED, ComplaintStatus.IN_PROGRESS)


def test_worker_status_mapping():
    assigned = ComplaintStatus.ASSIGNED
    assert workflow.apply_worker_status(assigned, WorkerStatus.ACCEPTED).status == ComplaintStatus.ASSIGNED
    assert workflow.apply_worker_status(assigned, WorkerStatus.CHECKING).status == ComplaintStatus.IN_PROGRESS
    assert workflow.apply_worker_status(assigned, WorkerStatus.WAITING).status == ComplaintStatus.ASSIGNED
    in_progress = ComplaintStatus.IN_PROGRESS
    assert workflow.apply_worker_status(in_progress, WorkerStatus.WAITING).status == ComplaintStatus.IN_PROGRESS
    assert workflow.apply_worker_status(assigned, WorkerStatus.COMPLETED).status == ComplaintStatus.COMPLETED

    declined = workflow.apply_worker_status(ComplaintStatus.IN_PROGRESS, WorkerStatus.REJECTED_BY_WORKER)
    assert declined.status == ComplaintStatus.APPROVED
    assert declined.clears_assignment

    with pytest.raises(InvalidTransitionError):
        workflow.apply_worker_status(ComplaintStatus.SUBMITTED, WorkerStatus.ACCEPTED)


def test_tracking_steps_for_rejected():
    assert workflow.tracking_steps(ComplaintStatus.REJECTED) == {"rejected": True, "steps": []}

    steps = workflow.tracking_steps(ComplaintStatus.IN_PROGRESS, WorkerStatus.REPAIRING)
    assert steps["worker_status"] == "Repairing"
    assert [s["label"] for s in steps["steps"] if s["active"]] == ["Raised", "Approved", "Assigned", "Working"]
