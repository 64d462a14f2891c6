from __future__ import annotations

from typing import Optional, Sequence

from .model import Announcement
from .repository import AnnouncementRepository


class InMemoryAnnouncementRepository(AnnouncementRepository):
    def __init__(self):
        self._items: dict[str, Announcement] = {}

    def add(self, announcement: Announcement) -> None:
        self._items[announcement.announcement_id] = announcement

    def get(self, announcement_id: str) -> Optional[Announcement]:
        return self._items.get(announcement_id)

    def save(self, announcement: Announcement) -> None:
        self._items[announcement.announcement_id] = announcement

    def delete(self, announcement_id: str) -> bool:
        return self._items.pop(announcement_id, None) is not None

    def list_all(self) -> Sequence[Announcement]:
        rows = list(reversed(list(self._items.values())))
        rows.sort(key=lambda a: a.created_at, reverse=True)
        return rows
