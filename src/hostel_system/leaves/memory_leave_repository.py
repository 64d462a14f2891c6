from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest
from .repository import LeaveRepository


class InMemoryLeaveRepository(LeaveRepository):
    def __init__(self):
        self._items: dict[str, LeaveRequest] = {}

    def add(self, req: LeaveRequest) -> None:
        self._items[req.request_id] = req

    def get(self, request_id: str) -> Optional[LeaveRequest]:
        return self._items.get(request_id)

    def save(self, req: LeaveRequest) -> None:
        self._items[req.request_id] = req

    def list_all(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[LeaveRequest]:
        rows = [
            r
            for r in reversed(list(self._items.values()))
            if (user_id is None or r.user_id == user_id) and (status is None or r.status == status)
        ]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows
