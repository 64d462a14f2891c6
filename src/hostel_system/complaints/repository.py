from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Complaint


class ComplaintRepository(Protocol):
    def next_id(self, *, student_id: str, room: str) -> str:
        raise NotImplementedError

    def add(self, complaint: Complaint) -> None:
        raise NotImplementedError

    def get(self, complaint_id: str) -> Optional[Complaint]:
        raise NotImplementedError

    def save(self, complaint: Complaint) -> None:
        raise NotImplementedError

    def delete(self, complaint_id: str) -> bool:
        raise NotImplementedError

    def list_all(
        self,
        *,
        student_id: Optional[str] = None,
        worker_id: Optional[str] = None,
    ) -> Sequence[Complaint]:
        """Newest first."""

        raise NotImplementedError
