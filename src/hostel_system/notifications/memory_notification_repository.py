from __future__ import annotations

from typing import Optional, Sequence

from .model import Notification
from .repository import NotificationRepository


class InMemoryNotificationRepository(NotificationRepository):
    def __init__(self):
        self._items: dict[str, Notification] = {}

    def add(self, notification: Notification) -> None:
        self._items[notification.notification_id] = notification

    def get(self, notification_id: str) -> Optional[Notification]:
        return self._items.get(notification_id)

    def save(self, notification: Notification) -> None:
        self._items[notification.notification_id] = notification

    def list_for_targets(self, targets: set[str]) -> Sequence[Notification]:
        rows = [n for n in reversed(list(self._items.values())) if n.target_role in targets]
        rows.sort(key=lambda n: n.created_at, reverse=True)
        return rows
