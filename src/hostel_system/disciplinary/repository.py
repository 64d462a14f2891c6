from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DisciplinaryStatus
from .model import DisciplinaryAction


class DisciplinaryRepository(Protocol):
    def add(self, action: DisciplinaryAction) -> None:
        raise NotImplementedError

    def get(self, action_id: str) -> Optional[DisciplinaryAction]:
        raise NotImplementedError

    def save(self, action: DisciplinaryAction) -> None:
        raise NotImplementedError

    def list_all(self, *, status: Optional[DisciplinaryStatus] = None) -> Sequence[DisciplinaryAction]:
        """Newest first."""

        raise NotImplementedError
