from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.enums import Audience, Reaction, Role
from ..core.exceptions import AuthorizationError, ContentRejectedError, NotFoundError, ValidationError
from ..moderation.service import ModerationService
from ..notifications.service import NotificationService
from ..users.model import User
from .model import Announcement, Feedback
from .repository import AnnouncementRepository

logger = logging.getLogger(__name__)

STAFF_ROLES = {Role.WARDEN, Role.ADMIN}


class AnnouncementService:
    def __init__(
        self,
        announcements: AnnouncementRepository,
        moderation: ModerationService,
        notifications: NotificationService,
    ):
        self._announcements = announcements
        self._moderation = moderation
        self._notifications = notifications

    def _get(self, announcement_id: str) -> Announcement:
        a = self._announcements.get(announcement_id)
        if not a:
            raise NotFoundError("Announcement not found")
        return a

    @staticmethod
    def _visible(a: Announcement, user: User) -> bool:
        if user.role in STAFF_ROLES:
            return True
        return a.target_audience == Audience.ALL or a.target_audience.value == user.role.value

    def create(self, *, author: User, title: str, content: str, target_audience=Audience.ALL) -> Announcement:
        if author.role not in STAFF_ROLES:
            raise AuthorizationError("Only wardens and admins can post announcements")
        title = require_non_empty(title, "Title")
        content = require_non_empty(content, "Content")
        audience = require_enum(Audience, target_audience or Audience.ALL, "Audience")

        verdict = self._moderation.moderate_text(f"{title}\n\n{content}")
        if not verdict.approved:
            logger.warning("announcement rejected by moderation author=%s", author.register_number)
            raise ContentRejectedError(
                verdict.reason or "Content flagged as inappropriate. Please revise.",
                verdict.reason,
            )

        announcement = Announcement(
            announcement_id=str(uuid.uuid4()),
            title=title,
            content=content,
            created_at=now_local(),
            author=author.name,
            target_audience=audience,
        )
        self._announcements.add(announcement)
        self._notifications.notify("New Announcement", title, audience.value)
        return announcement

    def list_for(self, user: User) -> list[dict]:
        return [self.to_row(a, user) for a in self._announcements.list_all() if self._visible(a, user)]

    def react(self, *, user: User, announcement_id: str, kind, reason: Optional[str] = None) -> Announcement:
        kind = require_enum(Reaction, kind, "Reaction")
        a = self._get(announcement_id)
        if not self._visible(a, user):
            raise NotFoundError("Announcement not found")

        reactions = dict(a.reactions)
        feedback = a.feedback
        previous = reactions.get(user.register_number)

        if previous == kind:
            # Repeating the same reaction withdraws it.
            del reactions[user.register_number]
            if kind == Reaction.THUMBS_DOWN:
                feedback = tuple(f for f in feedback if f.user_id != user.register_number)
        else:
            if kind == Reaction.THUMBS_DOWN:
                if not (reason or "").strip():
                    raise ValidationError("Please provide a reason.")
                verdict = self._moderation.moderate_text(reason.strip())
                if not verdict.approved:
                    raise ContentRejectedError(
                        "Your reason contains inappropriate language. Please revise.",
                        verdict.reason,
                    )
                feedback = tuple(f for f in feedback if f.user_id != user.register_number) + (
                    Feedback(user_id=user.register_number, user_name=user.name, reason=verdict.clean_text),
                )
            else:
                feedback = tuple(f for f in feedback if f.user_id != user.register_number)
            reactions[user.register_number] = kind

        updated = replace(a, reactions=reactions, feedback=feedback)
        self._announcements.save(updated)
        return updated

    def feedback(self, *, current_role: Role, announcement_id: str) -> list[dict]:
        if current_role not in STAFF_ROLES:
            raise AuthorizationError("You do not have permission")
        a = self._get(announcement_id)
        return [{"user_id": f.user_id, "user_name": f.user_name, "reason": f.reason} for f in a.feedback]

    def delete(self, *, current_role: Role, announcement_id: str) -> None:
        if current_role not in STAFF_ROLES:
            raise AuthorizationError("You do not have permission")
        if not self._announcements.delete(announcement_id):
            raise NotFoundError("Announcement not found")

    @staticmethod
    def to_row(a: Announcement, viewer: User) -> dict:
        reaction = a.reactions.get(viewer.register_number)
        return {
            "id": a.announcement_id,
            "title": a.title,
            "content": a.content,
            "date": a.created_at.strftime("%b %d, %Y"),
            "created_at": a.created_at.isoformat(),
            "author": a.author,
            "target_audience": a.target_audience.value,
            "reactions": {
                Reaction.THUMBS_UP.value: a.count(Reaction.THUMBS_UP),
                Reaction.THUMBS_DOWN.value: a.count(Reaction.THUMBS_DOWN),
            },
            "user_reaction": reaction.value if reaction else None,
            "feedback_count": len(a.feedback),
        }
