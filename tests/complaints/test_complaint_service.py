from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from hostel_system.complaints.memory_complaint_repository import InMemoryComplaintRepository
from hostel_system.complaints.service import ComplaintService, is_overdue
from hostel_system.core.enums import (
    Category,
    ComplaintStatus,
    EvidenceStage,
    PartsStatus,
    Role,
    Urgency,
    WorkerAvailability,
    WorkerStatus,
)
from hostel_system.core.exceptions import (
    AuthorizationError,
    ContentRejectedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from hostel_system.seed.mock_data import seed_complaints

STUDENT = "123456789"
WORKER = "WORKER-01"


@pytest.fixture
def repo():
    return InMemoryComplaintRepository()


@pytest.fixture
def svc(repo, users_repo, moderation, notifications):
    return ComplaintService(repo, users_repo, moderation, notifications)


@pytest.fixture
def submitted(svc, png_data_url):
    return svc.submit(
        current_role=Role.STUDENT,
        student_id=STUDENT,
        description="The ceiling fan in my room is not working",
        category="Electrical",
        images=[png_data_url],
    )


def _assign(svc, complaint_id, *, start=date(2030, 1, 1), completion=date(2030, 1, 3)):
    return svc.approve_and_assign(
        current_role=Role.WARDEN,
        complaint_id=complaint_id,
        worker_id=WORKER,
        start_date=start,
        completion_date=completion,
    )


def _work(svc, complaint_id, status, worker_id=WORKER):
    return svc.update_worker_status(
        current_role=Role.WORKER, worker_id=worker_id, complaint_id=complaint_id, worker_status=status
    )


def test_submit_stores_analysis_and_notifies_warden(submitted, users_repo, notifications):
    assert submitted.complaint_id == "123456789-302A-1"
    assert submitted.status == ComplaintStatus.SUBMITTED
    assert submitted.title == "THE CEILING FAN IN MY"
    assert submitted.clean_description == "The ceiling fan in my room is not working."
    assert submitted.category == Category.ELECTRICAL
    assert submitted.urgency == Urgency.HIGH
    assert submitted.student_room == "302-A"

    warden = users_repo.get_by_id("WARDEN-01")
    assert [n["title"] for n in notifications.list_for(warden)] == ["New Complaint"]


def test_submit_numbers_complaints_per_student(svc, submitted, png_data_url):
    second = svc.submit(
        current_role=Role.STUDENT,
        student_id=STUDENT,
        description="Tap in the washroom is leaking",
        category="Plumbing",
        images=[png_data_url],
    )
    assert second.complaint_id == "123456789-302A-2"


def test_submit_rejects_abusive_text(svc, png_data_url):
    with pytest.raises(ContentRejectedError) as exc:
        svc.submit(
            current_role=Role.STUDENT,
            student_id=STUDENT,
            description="This stupid fan is broken again",
            category="Electrical",
            images=[png_data_url],
        )
    assert str(exc.value).startswith("Submission rejected:")


def test_submit_rejects_image_that_is_not_a_photo(svc, fake_png_data_url):
    with pytest.raises(ContentRejectedError) as exc:
        svc.submit(
            current_role=Role.STUDENT,
            student_id=STUDENT,
            description="Fan not working",
            category="Electrical",
            images=[fake_png_data_url],
        )
    assert str(exc.value).startswith("Evidence Mismatch")


def test_submit_validates_inputs(svc, png_data_url):
    with pytest.raises(ValidationError):
        svc.submit(current_role=Role.STUDENT, student_id=STUDENT, description="Fan", category="", images=[png_data_url])
    with pytest.raises(ValidationError):
        svc.submit(current_role=Role.STUDENT, student_id=STUDENT, description="Fan", category="Electrical", images=[])
    with pytest.raises(ValidationError):
        svc.submit(
            current_role=Role.STUDENT,
            student_id=STUDENT,
            description="Fan",
            category="Electrical",
            images=[png_data_url] * 4,
        )
    with pytest.raises(AuthorizationError):
        svc.submit(
            current_role=Role.WARDEN,
            student_id=STUDENT,
            description="Fan",
            category="Electrical",
            images=[png_data_url],
        )


def test_approve_and_assign_sets_deadline_and_busy_worker(svc, submitted, users_repo):
    c = _assign(svc, submitted.complaint_id)

    assert c.status == ComplaintStatus.ASSIGNED
    assert c.worker_status == WorkerStatus.ASSIGNED
    assert c.assigned_worker_id == WORKER
    assert c.assigned_worker == "Ramesh"
    assert c.estimated_completion == datetime(2030, 1, 3, 18, 0)
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.BUSY


def test_approve_and_assign_with_unknown_worker_leaves_complaint_untouched(svc, submitted, repo):
    with pytest.raises(ValidationError):
        svc.approve_and_assign(
            current_role=Role.WARDEN,
            complaint_id=submitted.complaint_id,
            worker_id="NOBODY",
            start_date=date(2030, 1, 1),
            completion_date=date(2030, 1, 3),
        )
    assert repo.get(submitted.complaint_id).status == ComplaintStatus.SUBMITTED


def test_completion_before_start_is_rejected(svc, submitted):
    with pytest.raises(ValidationError):
        _assign(svc, submitted.complaint_id, start=date(2030, 1, 5), completion=date(2030, 1, 3))


def test_assign_requires_approved_complaint(svc, submitted):
    with pytest.raises(InvalidTransitionError):
        svc.assign(
            current_role=Role.WARDEN,
            complaint_id=submitted.complaint_id,
            worker_id=WORKER,
            start_date=date(2030, 1, 1),
            completion_date=date(2030, 1, 2),
        )

    svc.approve(current_role=Role.WARDEN, complaint_id=submitted.complaint_id, note="Go ahead")
    c = svc.assign(
        current_role=Role.WARDEN,
        complaint_id=submitted.complaint_id,
        worker_id=WORKER,
        start_date=date(2030, 1, 1),
        completion_date=date(2030, 1, 2),
    )
    assert c.status == ComplaintStatus.ASSIGNED
    assert c.warden_note == "Go ahead"


def test_student_cannot_approve(svc, submitted):
    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.STUDENT, complaint_id=submitted.complaint_id)


def test_reject_needs_reason_and_submitted_status(svc, submitted):
    with pytest.raises(ValidationError):
        svc.reject(current_role=Role.WARDEN, complaint_id=submitted.complaint_id, reason="  ")

    c = svc.reject(current_role=Role.WARDEN, complaint_id=submitted.complaint_id, reason="Duplicate")
    assert c.status == ComplaintStatus.REJECTED
    assert c.rejection_reason == "Duplicate"

    with pytest.raises(InvalidTransitionError):
        svc.approve(current_role=Role.WARDEN, complaint_id=submitted.complaint_id)


def test_worker_progress_moves_main_status(svc, submitted, users_repo, notifications):
    cid = submitted.complaint_id
    _assign(svc, cid)

    assert _work(svc, cid, "Accepted").status == ComplaintStatus.ASSIGNED
    assert _work(svc, cid, "Reached Location").status == ComplaintStatus.IN_PROGRESS
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.WORKING

    c = _work(svc, cid, "Repairing")
    assert c.status == ComplaintStatus.IN_PROGRESS
    student = users_repo.get_by_id(STUDENT)
    assert "Work Started" in [n["title"] for n in notifications.list_for(student)]

    c = _work(svc, cid, "Job Completed")
    assert c.status == ComplaintStatus.COMPLETED
    assert c.completed_at is not None
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.FREE
    assert "Work Completed" in [n["title"] for n in notifications.list_for(student)]

    with pytest.raises(InvalidTransitionError):
        _work(svc, cid, "Repairing")


def test_worker_declining_returns_complaint_for_reassignment(svc, submitted, users_repo):
    cid = submitted.complaint_id
    _assign(svc, cid)

    c = _work(svc, cid, "Rejected by Worker")
    assert c.status == ComplaintStatus.APPROVED
    assert c.assigned_worker_id is None
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.FREE

    c = svc.assign(
        current_role=Role.WARDEN,
        complaint_id=cid,
        worker_id="WORKER-02",
        start_date=date(2030, 1, 1),
        completion_date=date(2030, 1, 2),
    )
    assert c.assigned_worker_id == "WORKER-02"


def test_only_assigned_worker_can_update(svc, submitted):
    _assign(svc, submitted.complaint_id)
    with pytest.raises(AuthorizationError):
        _work(svc, submitted.complaint_id, "Accepted", worker_id="WORKER-02")


def test_is_overdue_ignores_closed_complaints(svc, submitted):
    c = _assign(svc, submitted.complaint_id, start=date(2020, 1, 1), completion=date(2020, 1, 2))
    assert is_overdue(c, datetime(2020, 1, 3))
    assert not is_overdue(c, datetime(2020, 1, 2, 12, 0))

    done = _work(svc, c.complaint_id, "Job Completed")
    assert not is_overdue(done, datetime(2020, 1, 3))


def test_extend_deadline_flags_weak_reason_for_admin(svc, submitted, users_repo, notifications):
    cid = submitted.complaint_id
    _assign(svc, cid, start=date(2020, 1, 1), completion=date(2020, 1, 2))

    c = svc.extend_deadline(
        current_role=Role.WARDEN,
        complaint_id=cid,
        reason="Worker forgot about it",
        completion_date=date(2099, 1, 1),
    )
    assert c.admin_flagged is True
    assert c.estimated_completion == datetime(2099, 1, 1, 18, 0)
    assert c.extension_reason == "Worker forgot about it"

    admin = users_repo.get_by_id("ADMIN")
    assert "Extension Flagged" in [n["title"] for n in notifications.list_for(admin)]
    assert [x.complaint_id for x in svc.list_flagged(current_role=Role.ADMIN)] == [cid]


def test_extend_deadline_with_valid_reason_is_not_flagged(svc, submitted):
    cid = submitted.complaint_id
    _assign(svc, cid, start=date(2020, 1, 1), completion=date(2020, 1, 2))

    c = svc.extend_deadline(
        current_role=Role.WARDEN,
        complaint_id=cid,
        reason="Waiting for spare parts from the supplier",
        completion_date=date(2099, 1, 1),
    )
    assert c.admin_flagged is False


def test_extend_deadline_only_for_overdue(svc, submitted):
    _assign(svc, submitted.complaint_id)
    with pytest.raises(ValidationError):
        svc.extend_deadline(
            current_role=Role.WARDEN,
            complaint_id=submitted.complaint_id,
            reason="Parts delayed",
            completion_date=date(2031, 1, 1),
        )


def test_delay_report_and_reply(svc, submitted):
    cid = submitted.complaint_id
    with pytest.raises(ValidationError):
        svc.report_delay(current_role=Role.STUDENT, student_id=STUDENT, complaint_id=cid, reason="Still broken")

    _assign(svc, cid, start=date(2020, 1, 1), completion=date(2020, 1, 2))
    with pytest.raises(ValidationError):
        svc.reply_delay(current_role=Role.WARDEN, complaint_id=cid, response="On it")

    c = svc.report_delay(current_role=Role.STUDENT, student_id=STUDENT, complaint_id=cid, reason="Still broken")
    assert c.is_delayed and c.delay_reason == "Still broken"
    with pytest.raises(ValidationError):
        svc.report_delay(current_role=Role.STUDENT, student_id=STUDENT, complaint_id=cid, reason="Again")

    c = svc.reply_delay(current_role=Role.WARDEN, complaint_id=cid, response="Worker visits tomorrow")
    assert c.warden_delay_response == "Worker visits tomorrow"


def test_review_completed_complaint(svc, repo):
    seed_complaints(repo)
    cid = "123456789-302A-1"

    with pytest.raises(ValidationError):
        svc.submit_review(current_role=Role.STUDENT, student_id=STUDENT, complaint_id=cid, rating=6)

    c = svc.submit_review(
        current_role=Role.STUDENT,
        student_id=STUDENT,
        complaint_id=cid,
        rating=5,
        comment="great  work by the electrician",
    )
    assert c.review.rating == 5
    assert c.review.comment == "Great work by the electrician."

    with pytest.raises(ValidationError):
        svc.submit_review(current_role=Role.STUDENT, student_id=STUDENT, complaint_id=cid, rating=4)


def test_review_comment_is_moderated(svc, repo):
    seed_complaints(repo)
    with pytest.raises(ContentRejectedError):
        svc.submit_review(
            current_role=Role.STUDENT,
            student_id=STUDENT,
            complaint_id="123456789-302A-1",
            rating=1,
            comment="useless idiot",
        )


def test_parts_request_and_status_moves_forward_only(svc, submitted):
    cid = submitted.complaint_id
    _assign(svc, cid)

    c = svc.request_parts(current_role=Role.WORKER, worker_id=WORKER, complaint_id=cid, description="New regulator")
    assert c.worker_status == WorkerStatus.WAITING
    assert c.status == ComplaintStatus.ASSIGNED
    assert c.parts.status == PartsStatus.REQUESTED

    c = svc.update_parts_status(current_role=Role.WARDEN, complaint_id=cid, status="ordered")
    assert c.parts.status == PartsStatus.ORDERED
    with pytest.raises(InvalidTransitionError):
        svc.update_parts_status(current_role=Role.WARDEN, complaint_id=cid, status="requested")


def test_waiting_for_parts_keeps_main_status(svc, submitted):
    cid = submitted.complaint_id
    _assign(svc, cid)

    c = _work(svc, cid, "Waiting for Parts")
    assert c.status == ComplaintStatus.ASSIGNED
    assert c.worker_status == WorkerStatus.WAITING

    _work(svc, cid, "Repairing")
    c = _work(svc, cid, "Waiting for Parts")
    assert c.status == ComplaintStatus.IN_PROGRESS


def test_worker_stays_busy_while_other_tasks_are_open(svc, submitted, users_repo, png_data_url):
    second = svc.submit(
        current_role=Role.STUDENT,
        student_id=STUDENT,
        description="Switch board is loose",
        category="Electrical",
        images=[png_data_url],
    )
    _assign(svc, submitted.complaint_id)
    _assign(svc, second.complaint_id)

    _work(svc, submitted.complaint_id, "Reached Location")
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.WORKING

    _work(svc, submitted.complaint_id, "Job Completed")
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.BUSY

    _work(svc, second.complaint_id, "Rejected by Worker")
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.FREE


def test_unavailable_worker_cannot_be_assigned_and_keeps_status(svc, submitted, repo, users_repo):
    worker = users_repo.get_by_id(WORKER)
    users_repo.save(replace(worker, current_status=WorkerAvailability.UNAVAILABLE))

    with pytest.raises(ValidationError):
        _assign(svc, submitted.complaint_id)
    assert repo.get(submitted.complaint_id).status == ComplaintStatus.SUBMITTED

    users_repo.save(replace(worker, current_status=WorkerAvailability.FREE))
    _assign(svc, submitted.complaint_id)
    users_repo.save(replace(users_repo.get_by_id(WORKER), current_status=WorkerAvailability.UNAVAILABLE))
    _work(svc, submitted.complaint_id, "Job Completed")
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.UNAVAILABLE


def test_upload_proof_validates_photo(svc, submitted, png_data_url, fake_png_data_url):
    cid = submitted.complaint_id
    _assign(svc, cid)

    with pytest.raises(ContentRejectedError):
        svc.upload_proof(
            current_role=Role.WORKER, worker_id=WORKER, complaint_id=cid, stage="reached", image=fake_png_data_url
        )

    c = svc.upload_proof(
        current_role=Role.WORKER, worker_id=WORKER, complaint_id=cid, stage="reached", image=png_data_url
    )
    assert c.proof_images[EvidenceStage.REACHED] == png_data_url


def test_list_for_scopes_by_role(svc, submitted, users_repo, add_student, png_data_url):
    other = add_student("987654321")
    svc.submit(
        current_role=Role.STUDENT,
        student_id=other.register_number,
        description="Chair is broken",
        category="Furniture",
        images=[png_data_url],
    )
    _assign(svc, submitted.complaint_id)

    student = users_repo.get_by_id(STUDENT)
    worker = users_repo.get_by_id(WORKER)
    warden = users_repo.get_by_id("WARDEN-01")

    assert [c.complaint_id for c in svc.list_for(student)] == [submitted.complaint_id]
    assert [c.complaint_id for c in svc.list_for(worker)] == [submitted.complaint_id]
    assert len(svc.list_for(warden)) == 2

    with pytest.raises(AuthorizationError):
        svc.get_for(users_repo.get_by_id(other.register_number), submitted.complaint_id)


def test_admin_delete_frees_worker(svc, submitted, users_repo):
    _assign(svc, submitted.complaint_id)

    with pytest.raises(AuthorizationError):
        svc.delete(current_role=Role.WARDEN, complaint_id=submitted.complaint_id)

    svc.delete(current_role=Role.ADMIN, complaint_id=submitted.complaint_id)
    assert users_repo.get_by_id(WORKER).current_status == WorkerAvailability.FREE
    with pytest.raises(NotFoundError):
        svc.get_for(users_repo.get_by_id("ADMIN"), submitted.complaint_id)


def test_row_carries_tracking_steps(svc, submitted):
    row = svc.to_row(submitted, now=datetime(2030, 1, 1))
    assert row["status"] == "Submitted"
    assert row["image_url"] == submitted.images[0]
    assert [s["active"] for s in row["tracking"]["steps"]] == [True, False, False, False, False]
