from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def add(self, notification: Notification) -> None:
        raise NotImplementedError

    def get(self, notification_id: str) -> Optional[Notification]:
        raise NotImplementedError

    def save(self, notification: Notification) -> None:
        raise NotImplementedError

    def list_for_targets(self, targets: set[str]) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError
