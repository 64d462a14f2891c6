from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DisciplinaryStatus
from .model import DisciplinaryAction
from .repository import DisciplinaryRepository


class InMemoryDisciplinaryRepository(DisciplinaryRepository):
    def __init__(self):
        self._items: dict[str, DisciplinaryAction] = {}

    def add(self, action: DisciplinaryAction) -> None:
        self._items[action.action_id] = action

    def get(self, action_id: str) -> Optional[DisciplinaryAction]:
        return self._items.get(action_id)

    def save(self, action: DisciplinaryAction) -> None:
        self._items[action.action_id] = action

    def list_all(self, *, status: Optional[DisciplinaryStatus] = None) -> Sequence[DisciplinaryAction]:
        rows = [a for a in reversed(list(self._items.values())) if status is None or a.status == status]
        rows.sort(key=lambda a: a.reported_at, reverse=True)
        return rows
