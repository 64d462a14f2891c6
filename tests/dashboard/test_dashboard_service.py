from __future__ import annotations

from datetime import date

import pytest

from hostel_system.complaints.memory_complaint_repository import InMemoryComplaintRepository
from hostel_system.complaints.service import ComplaintService
from hostel_system.core.enums import Role
from hostel_system.core.exceptions import AuthorizationError
from hostel_system.dashboard.service import DashboardService
from hostel_system.disciplinary.memory_disciplinary_repository import InMemoryDisciplinaryRepository
from hostel_system.leaves.memory_leave_repository import InMemoryLeaveRepository
from hostel_system.seed.mock_data import seed_complaints


@pytest.fixture
def complaints_repo():
    repo = InMemoryComplaintRepository()
    seed_complaints(repo)
    return repo


@pytest.fixture
def complaint_svc(complaints_repo, users_repo, moderation, notifications):
    return ComplaintService(complaints_repo, users_repo, moderation, notifications)


@pytest.fixture
def svc(complaint_svc, complaints_repo, users_repo):
    return DashboardService(
        complaint_svc,
        complaints_repo,
        users_repo,
        InMemoryLeaveRepository(),
        InMemoryDisciplinaryRepository(),
    )


def test_stats_for_student_and_worker(svc, complaint_svc, users_repo, png_data_url):
    complaint_svc.submit(
        current_role=Role.STUDENT,
        student_id="123456789",
        description="Tap is leaking",
        category="Plumbing",
        images=[png_data_url],
    )

    student = users_repo.get_by_id("123456789")
    assert svc.stats_for(student) == {"total": 2, "completed": 1, "pending": 1}
    assert svc.stats_for(users_repo.get_by_id("WORKER-02")) == {"total": 0, "completed": 0, "pending": 0}


def test_worker_performance(svc, complaint_svc, png_data_url):
    c = complaint_svc.submit(
        current_role=Role.STUDENT,
        student_id="123456789",
        description="Switch is loose",
        category="Electrical",
        images=[png_data_url],
    )
    complaint_svc.approve_and_assign(
        current_role=Role.WARDEN,
        complaint_id=c.complaint_id,
        worker_id="WORKER-01",
        start_date=date(2030, 1, 1),
        completion_date=date(2030, 1, 2),
    )

    rows = {r["register_number"]: r for r in svc.worker_performance(current_role=Role.WARDEN)}
    assert rows["WORKER-01"]["assigned"] == 2
    assert rows["WORKER-01"]["completed"] == 1
    assert rows["WORKER-01"]["efficiency"] == 50
    assert rows["WORKER-01"]["availability"] == "Busy"
    assert rows["WORKER-02"]["efficiency"] == 100

    with pytest.raises(AuthorizationError):
        svc.worker_performance(current_role=Role.WORKER)


def test_admin_overview(svc):
    overview = svc.admin_overview(current_role=Role.ADMIN)
    assert overview["users"] == {"student": 1, "warden": 1, "worker": 3, "admin": 1}
    assert overview["complaints_by_status"] == {"Completed": 1}
    assert overview["complaints_by_category"] == {"Electrical": 1}
    assert overview["leaves_by_status"] == {}
    assert overview["open_disciplinary_reports"] == 0
    assert overview["flagged_complaints"] == 0

    with pytest.raises(AuthorizationError):
        svc.admin_overview(current_role=Role.WARDEN)
