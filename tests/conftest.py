from __future__ import annotations

import base64

import pytest

from hostel_system.core.enums import Role
from hostel_system.main import create_app
from hostel_system.moderation.keyword_moderator import KeywordModerator
from hostel_system.moderation.service import ModerationService
from hostel_system.notifications.memory_notification_repository import InMemoryNotificationRepository
from hostel_system.notifications.service import NotificationService
from hostel_system.seed.mock_data import seed_users
from hostel_system.users.memory_user_repository import InMemoryUserRepository
from hostel_system.users.model import User


def data_url(mime_type: str, payload: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


@pytest.fixture
def png_data_url():
    return data_url("image/png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 24)


@pytest.fixture
def fake_png_data_url():
    # Declared as PNG but the bytes are not a PNG file.
    return data_url("image/png", b"rendered-by-a-generator")


@pytest.fixture
def pdf_data_url():
    return data_url("application/pdf", b"%PDF-1.4\n% mentor approval\n")


@pytest.fixture
def users_repo():
    repo = InMemoryUserRepository()
    seed_users(repo)
    return repo


@pytest.fixture
def notifications():
    return NotificationService(InMemoryNotificationRepository())


@pytest.fixture
def moderation():
    return ModerationService(KeywordModerator())


@pytest.fixture
def add_student(users_repo):
    def _add(register_number: str, name: str = "Second Student", room: str = "204-B") -> User:
        user = User(
            register_number=register_number,
            name=name,
            role=Role.STUDENT,
            room_number=room,
            phone_number="555",
            password_hash="",
        )
        users_repo.add(user)
        return user

    return _add


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(register_number: str, password: str):
        resp = client.post("/api/login", json={"register_number": register_number, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login
