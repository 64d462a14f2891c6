from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def add(self, req: LeaveRequest) -> None:
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def save(self, req: LeaveRequest) -> None:
        raise NotImplementedError

    def list_all(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError
