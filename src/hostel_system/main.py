from __future__ import annotations

import atexit
import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .announcements.controller import register as register_announcements
from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .complaints.controller import register as register_complaints
from .container import build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .dashboard.controller import register as register_dashboard
from .disciplinary.controller import register as register_disciplinary
from .leaves.controller import register as register_leaves
from .logging_config import configure_logging
from .moderation.gateway import ContentModerator
from .notifications.controller import register as register_notifications
from .settings import get_settings_module
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SETTING_KEYS = (
    "SECRET_KEY",
    "DEBUG",
    "TESTING",
    "LOG_LEVEL",
    "SEED_MOCK_DATA",
    "SESSION_DAYS",
    "MODERATION_BACKEND",
    "MODERATION_URL",
    "MODERATION_API_KEY",
    "MODERATION_TIMEOUT",
    "MODERATION_FAIL_OPEN",
)


def load_settings(overrides: Optional[dict] = None) -> dict:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {key: getattr(module, key) for key in SETTING_KEYS if hasattr(module, key)}
    settings.update(overrides or {})
    settings["SETTINGS_MODULE"] = settings_module
    return settings


def create_app(overrides: Optional[dict] = None, *, moderator: Optional[ContentModerator] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(overrides)
    configure_logging(settings.get("LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(settings.get("SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    container = build_container(settings=settings, moderator=moderator)
    app.extensions["hostel_container"] = container
    atexit.register(container.moderation_service.close)

    register_error_handlers(app)
    register_users(app, container)
    register_complaints(app, container)
    register_leaves(app, container)
    register_attendance(app, container)
    register_announcements(app, container)
    register_disciplinary(app, container)
    register_notifications(app, container)
    register_dashboard(app, container)

    logger.info(
        "app ready settings=%s moderation=%s seeded=%s",
        settings["SETTINGS_MODULE"],
        settings.get("MODERATION_BACKEND", "keyword"),
        bool(settings.get("SEED_MOCK_DATA", False)),
    )
    return app
