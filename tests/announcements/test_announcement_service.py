from __future__ import annotations

import pytest

from hostel_system.announcements.memory_announcement_repository import InMemoryAnnouncementRepository
from hostel_system.announcements.service import AnnouncementService
from hostel_system.core.enums import Role
from hostel_system.core.exceptions import AuthorizationError, ContentRejectedError, NotFoundError, ValidationError


@pytest.fixture
def svc(moderation, notifications):
    return AnnouncementService(InMemoryAnnouncementRepository(), moderation, notifications)


@pytest.fixture
def people(users_repo):
    return {
        "warden": users_repo.get_by_id("WARDEN-01"),
        "student": users_repo.get_by_id("123456789"),
        "worker": users_repo.get_by_id("WORKER-01"),
    }


def test_create_requires_staff_and_clean_text(svc, people):
    with pytest.raises(AuthorizationError):
        svc.create(author=people["student"], title="Hi", content="All")
    with pytest.raises(ValidationError):
        svc.create(author=people["warden"], title="", content="All")
    with pytest.raises(ContentRejectedError):
        svc.create(author=people["warden"], title="Notice", content="No stupid noise after 10pm")


def test_audience_visibility_and_notifications(svc, people, notifications):
    svc.create(author=people["warden"], title="Water cut", content="No water on Sunday", target_audience="student")
    svc.create(author=people["warden"], title="Tools", content="Collect new tools", target_audience="worker")
    svc.create(author=people["warden"], title="Holiday", content="Hostel closed Monday")

    assert [a["title"] for a in svc.list_for(people["student"])] == ["Holiday", "Water cut"]
    assert [a["title"] for a in svc.list_for(people["worker"])] == ["Holiday", "Tools"]
    assert len(svc.list_for(people["warden"])) == 3

    titles = [n["message"] for n in notifications.list_for(people["student"])]
    assert titles == ["Holiday", "Water cut"]


def test_reactions_toggle_and_replace(svc, people):
    a = svc.create(author=people["warden"], title="Mess menu", content="Paneer on Friday")
    student = people["student"]

    a = svc.react(user=student, announcement_id=a.announcement_id, kind="thumbsUp")
    row = svc.to_row(a, student)
    assert row["reactions"] == {"thumbsUp": 1, "thumbsDown": 0}
    assert row["user_reaction"] == "thumbsUp"

    a = svc.react(user=student, announcement_id=a.announcement_id, kind="thumbsUp")
    assert svc.to_row(a, student)["user_reaction"] is None

    with pytest.raises(ValidationError):
        svc.react(user=student, announcement_id=a.announcement_id, kind="thumbsDown")

    a = svc.react(user=student, announcement_id=a.announcement_id, kind="thumbsDown", reason="too  spicy")
    assert svc.to_row(a, student)["reactions"] == {"thumbsUp": 0, "thumbsDown": 1}
    feedback = svc.feedback(current_role=Role.WARDEN, announcement_id=a.announcement_id)
    assert feedback == [{"user_id": "123456789", "user_name": "Arjun Reddy", "reason": "Too spicy."}]

    a = svc.react(user=student, announcement_id=a.announcement_id, kind="thumbsUp")
    assert a.feedback == ()


def test_thumbs_down_reason_is_moderated(svc, people):
    a = svc.create(author=people["warden"], title="Mess menu", content="Paneer on Friday")
    with pytest.raises(ContentRejectedError):
        svc.react(user=people["student"], announcement_id=a.announcement_id, kind="thumbsDown", reason="crap food")


def test_hidden_announcement_cannot_be_reacted_to(svc, people):
    a = svc.create(author=people["warden"], title="Tools", content="Collect tools", target_audience="worker")
    with pytest.raises(NotFoundError):
        svc.react(user=people["student"], announcement_id=a.announcement_id, kind="thumbsUp")


def test_delete(svc, people):
    a = svc.create(author=people["warden"], title="Old", content="Old news")
    with pytest.raises(AuthorizationError):
        svc.delete(current_role=Role.STUDENT, announcement_id=a.announcement_id)
    svc.delete(current_role=Role.ADMIN, announcement_id=a.announcement_id)
    with pytest.raises(NotFoundError):
        svc.delete(current_role=Role.ADMIN, announcement_id=a.announcement_id)
