from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RequestStatus, Role
from .model import ProfileChangeRequest, User, UserRequest
from .repository import UserRepository, UserRequestRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self._users: dict[str, User] = {}

    def get_by_id(self, register_number: str) -> Optional[User]:
        return self._users.get(register_number)

    def add(self, user: User) -> None:
        self._users[user.register_number] = user

    def save(self, user: User) -> None:
        self._users[user.register_number] = user

    def delete_by_id(self, register_number: str) -> bool:
        return self._users.pop(register_number, None) is not None

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[User]:
        return [u for u in self._users.values() if role is None or u.role == role]


class InMemoryUserRequestRepository(UserRequestRepository):
    def __init__(self):
        self._user_requests: dict[str, UserRequest] = {}
        self._profile_requests: dict[str, ProfileChangeRequest] = {}

    def add_user_request(self, req: UserRequest) -> None:
        self._user_requests[req.request_id] = req

    def get_user_request(self, request_id: str) -> Optional[UserRequest]:
        return self._user_requests.get(request_id)

    def save_user_request(self, req: UserRequest) -> None:
        self._user_requests[req.request_id] = req

    def list_user_requests(self, *, status: Optional[RequestStatus] = None) -> Sequence[UserRequest]:
        rows = [r for r in reversed(list(self._user_requests.values())) if status is None or r.status == status]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows

    def add_profile_request(self, req: ProfileChangeRequest) -> None:
        self._profile_requests[req.request_id] = req

    def get_profile_request(self, request_id: str) -> Optional[ProfileChangeRequest]:
        return self._profile_requests.get(request_id)

    def save_profile_request(self, req: ProfileChangeRequest) -> None:
        self._profile_requests[req.request_id] = req

    def list_profile_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[ProfileChangeRequest]:
        rows = [
            r
            for r in reversed(list(self._profile_requests.values()))
            if (status is None or r.status == status) and (user_id is None or r.user_id == user_id)
        ]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows
