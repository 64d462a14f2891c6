from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, Role
from .model import ProfileChangeRequest, User, UserRequest


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete store.
    """

    def get_by_id(self, register_number: str) -> Optional[User]:
        raise NotImplementedError

    def add(self, user: User) -> None:
        raise NotImplementedError

    def save(self, user: User) -> None:
        raise NotImplementedError

    def delete_by_id(self, register_number: str) -> bool:
        raise NotImplementedError

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[User]:
        raise NotImplementedError


class UserRequestRepository(Protocol):
    def add_user_request(self, req: UserRequest) -> None:
        raise NotImplementedError

    def get_user_request(self, request_id: str) -> Optional[UserRequest]:
        raise NotImplementedError

    def save_user_request(self, req: UserRequest) -> None:
        raise NotImplementedError

    def list_user_requests(self, *, status: Optional[RequestStatus] = None) -> Sequence[UserRequest]:
        raise NotImplementedError

    def add_profile_request(self, req: ProfileChangeRequest) -> None:
        raise NotImplementedError

    def get_profile_request(self, request_id: str) -> Optional[ProfileChangeRequest]:
        raise NotImplementedError

    def save_profile_request(self, req: ProfileChangeRequest) -> None:
        raise NotImplementedError

    def list_profile_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[ProfileChangeRequest]:
        raise NotImplementedError
