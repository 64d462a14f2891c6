from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Union

from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..users.model import User
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

ALL = "all"


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(self, title: str, message: str, target_role: Union[Role, str]) -> Notification:
        target = target_role.value if isinstance(target_role, Role) else str(target_role)
        notification = Notification(
            notification_id=str(uuid.uuid4()),
            title=title,
            message=message,
            created_at=now_local(),
            target_role=target,
        )
        self._notifications.add(notification)
        logger.info("notify target=%s title=%s", target, title)
        return notification

    def list_for(self, user: User) -> list[dict]:
        rows = self._notifications.list_for_targets({user.role.value, ALL})
        return [self._to_row(n, user) for n in rows]

    def unread_count(self, user: User) -> int:
        rows = self._notifications.list_for_targets({user.role.value, ALL})
        return sum(1 for n in rows if user.register_number not in n.read_by)

    def mark_read(self, user: User, notification_id: str) -> None:
        n = self._notifications.get(notification_id)
        if not n or n.target_role not in {user.role.value, ALL}:
            raise NotFoundError("Notification not found")
        if user.register_number not in n.read_by:
            self._notifications.save(replace(n, read_by=n.read_by | {user.register_number}))

    def mark_all_read(self, user: User) -> int:
        changed = 0
        for n in self._notifications.list_for_targets({user.role.value, ALL}):
            if user.register_number not in n.read_by:
                self._notifications.save(replace(n, read_by=n.read_by | {user.register_number}))
                changed += 1
        return changed

    @staticmethod
    def _to_row(n: Notification, user: User) -> dict:
        return {
            "id": n.notification_id,
            "title": n.title,
            "message": n.message,
            "timestamp": n.created_at.isoformat(),
            "target_role": n.target_role,
            "read": user.register_number in n.read_by,
        }
