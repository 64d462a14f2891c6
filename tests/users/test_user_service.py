from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest
from werkzeug.security import check_password_hash

from hostel_system.core.enums import RequestStatus, Role, WorkerAvailability
from hostel_system.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from hostel_system.users.memory_user_repository import InMemoryUserRequestRepository
from hostel_system.users.service import AuthService, UserService


@pytest.fixture
def svc(users_repo, notifications):
    return UserService(users_repo, InMemoryUserRequestRepository(), notifications)


def test_login_with_demo_credentials(users_repo):
    auth = AuthService(users_repo)
    s_user = auth.authenticate("warden-01", "admin")
    assert s_user.register_number == "WARDEN-01"
    assert s_user.role == Role.WARDEN

    with pytest.raises(AuthenticationError):
        auth.authenticate("123456789", "wrong")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody", "1234")


def test_blocked_student_cannot_login_until_block_expires(users_repo):
    auth = AuthService(users_repo)
    student = users_repo.get_by_id("123456789")
    users_repo.save(replace(student, is_blocked=True, blocked_until=datetime(2030, 1, 8)))

    with pytest.raises(AuthenticationError) as exc:
        auth.authenticate("123456789", "1234", now=datetime(2030, 1, 1))
    assert "disciplinary" in str(exc.value)

    s_user = auth.authenticate("123456789", "1234", now=datetime(2030, 1, 9))
    assert s_user.name == "Arjun Reddy"
    assert users_repo.get_by_id("123456789").is_blocked is False


def test_list_users_hides_admins(svc):
    rows = svc.list_users(current_role=Role.WARDEN)
    assert "ADMIN" not in [r["register_number"] for r in rows]
    assert all("password_hash" not in r for r in rows)
    with pytest.raises(AuthorizationError):
        svc.list_users(current_role=Role.STUDENT)


def test_list_workers_by_category(svc):
    assert [w["name"] for w in svc.list_workers(category="plumbing")] == ["Suresh"]
    assert len(svc.list_workers()) == 3


def test_delete_user_rules(svc):
    with pytest.raises(AuthorizationError):
        svc.delete_user(current_role=Role.WARDEN, register_number="123456789")
    with pytest.raises(ValidationError):
        svc.delete_user(current_role=Role.ADMIN, register_number="ADMIN")
    with pytest.raises(NotFoundError):
        svc.delete_user(current_role=Role.ADMIN, register_number="GHOST")

    svc.delete_user(current_role=Role.ADMIN, register_number="WORKER-03")
    with pytest.raises(NotFoundError):
        svc.get("WORKER-03")


def test_profile_image_set_and_removed(svc, png_data_url):
    assert svc.update_profile_image(user_id="123456789", image=png_data_url).profile_image == png_data_url
    assert svc.update_profile_image(user_id="123456789", image=None).profile_image is None


def test_profile_image_must_be_an_image_data_url(svc, png_data_url, pdf_data_url):
    svc.update_profile_image(user_id="123456789", image=png_data_url)

    for bad in ("not-an-image", pdf_data_url):
        with pytest.raises(ValidationError):
            svc.update_profile_image(user_id="123456789", image=bad)
    assert svc.get("123456789").profile_image == png_data_url


def test_worker_availability(svc):
    updated = svc.set_worker_availability(
        current_role=Role.WORKER, current_user_id="WORKER-01", worker_id="WORKER-01", availability="Unavailable"
    )
    assert updated.current_status == WorkerAvailability.UNAVAILABLE

    with pytest.raises(AuthorizationError):
        svc.set_worker_availability(
            current_role=Role.WORKER, current_user_id="WORKER-01", worker_id="WORKER-02", availability="Free"
        )
    with pytest.raises(ValidationError):
        svc.set_worker_availability(
            current_role=Role.ADMIN, current_user_id="ADMIN", worker_id="123456789", availability="Free"
        )


def test_onboarding_request_approved_by_admin(svc, users_repo, notifications):
    request_id = svc.submit_user_request(
        current_role=Role.WARDEN,
        current_user_id="WARDEN-01",
        user_type="worker",
        name="Dinesh",
        identifier="WORKER-09",
        phone_number="111",
        dob="1990-02-02",
        father_name="ignored for workers",
        work_category="Carpentry",
    )
    admin = users_repo.get_by_id("ADMIN")
    assert [n["title"] for n in notifications.list_for(admin)] == ["Account Request"]

    pending = svc.list_user_requests(current_role=Role.ADMIN)
    assert [r.request_id for r in pending] == [request_id]
    assert pending[0].father_name is None

    user = svc.approve_user_request(current_role=Role.ADMIN, admin_id="ADMIN", request_id=request_id)
    assert user.role == Role.WORKER
    assert user.room_number == "MAINTENANCE"
    assert user.current_status == WorkerAvailability.FREE
    assert check_password_hash(users_repo.get_by_id("WORKER-09").password_hash, "password123")

    assert svc.list_user_requests(current_role=Role.ADMIN) == []
    with pytest.raises(ValidationError):
        svc.reject_user_request(current_role=Role.ADMIN, admin_id="ADMIN", request_id=request_id)


def test_student_onboarding_defaults_room(svc):
    request_id = svc.submit_user_request(
        current_role=Role.WARDEN,
        current_user_id="WARDEN-01",
        user_type="student",
        name="Kiran",
        identifier="222333444",
        work_category="ignored for students",
    )
    user = svc.approve_user_request(current_role=Role.ADMIN, admin_id="ADMIN", request_id=request_id)
    assert user.room_number == "N/A"
    assert user.work_category is None
    assert user.current_status is None


def test_onboarding_validation(svc):
    with pytest.raises(AuthorizationError):
        svc.submit_user_request(
            current_role=Role.ADMIN, current_user_id="ADMIN", user_type="student", name="A", identifier="1"
        )
    with pytest.raises(ValidationError):
        svc.submit_user_request(
            current_role=Role.WARDEN, current_user_id="WARDEN-01", user_type="admin", name="A", identifier="1"
        )
    with pytest.raises(ValidationError):
        svc.submit_user_request(
            current_role=Role.WARDEN, current_user_id="WARDEN-01", user_type="student", name="A", identifier="ADMIN"
        )
    with pytest.raises(ValidationError):
        svc.submit_user_request(
            current_role=Role.WARDEN, current_user_id="WARDEN-01", user_type="student", name=" ", identifier="9"
        )


def test_profile_change_requests(svc, users_repo, notifications):
    with pytest.raises(ValidationError):
        svc.request_profile_change(
            user_id="123456789", change_type="Password Change", reason="Forgot", requested_date="2030-01-01"
        )

    request_id = svc.request_profile_change(
        user_id="123456789", change_type="Details Update", reason="New phone", requested_date="2030-01-01"
    )
    svc.request_profile_change(
        user_id="WORKER-01", change_type="Password Change", reason="Reset", requested_date="2030-01-01"
    )

    assert len(svc.list_profile_requests(current_role=Role.ADMIN, current_user_id="ADMIN")) == 2
    mine = svc.list_profile_requests(current_role=Role.STUDENT, current_user_id="123456789")
    assert [r.request_id for r in mine] == [request_id]

    with pytest.raises(AuthorizationError):
        svc.decide_profile_change(current_role=Role.WARDEN, admin_id="WARDEN-01", request_id=request_id, approve=True)

    svc.decide_profile_change(current_role=Role.ADMIN, admin_id="ADMIN", request_id=request_id, approve=True)
    assert mine[0].status == RequestStatus.PENDING
    decided = svc.list_profile_requests(current_role=Role.STUDENT, current_user_id="123456789")[0]
    assert decided.status == RequestStatus.APPROVED

    student = users_repo.get_by_id("123456789")
    titles = [n["title"] for n in notifications.list_for(student)]
    assert titles.count("Profile Request") == 1
    assert "Request Sent" in titles

    with pytest.raises(ValidationError):
        svc.decide_profile_change(current_role=Role.ADMIN, admin_id="ADMIN", request_id=request_id, approve=False)
