from __future__ import annotations

import re
from typing import Optional, Sequence

from .model import Complaint
from .repository import ComplaintRepository


class InMemoryComplaintRepository(ComplaintRepository):
    def __init__(self):
        self._items: dict[str, Complaint] = {}
        self._counters: dict[str, int] = {}

    def next_id(self, *, student_id: str, room: str) -> str:
        room_key = re.sub(r"[^A-Za-z0-9]", "", room or "") or "NA"
        n = self._counters.get(student_id, 0) + 1
        candidate = f"{student_id}-{room_key}-{n}"
        while candidate in self._items:
            n += 1
            candidate = f"{student_id}-{room_key}-{n}"
        self._counters[student_id] = n
        return candidate

    def add(self, complaint: Complaint) -> None:
        self._items[complaint.complaint_id] = complaint

    def get(self, complaint_id: str) -> Optional[Complaint]:
        return self._items.get(complaint_id)

    def save(self, complaint: Complaint) -> None:
        self._items[complaint.complaint_id] = complaint

    def delete(self, complaint_id: str) -> bool:
        return self._items.pop(complaint_id, None) is not None

    def list_all(
        self,
        *,
        student_id: Optional[str] = None,
        worker_id: Optional[str] = None,
    ) -> Sequence[Complaint]:
        rows = [
            c
            for c in reversed(list(self._items.values()))
            if (student_id is None or c.student_id == student_id)
            and (worker_id is None or c.assigned_worker_id == worker_id)
        ]
        rows.sort(key=lambda c: c.submitted_at, reverse=True)
        return rows
