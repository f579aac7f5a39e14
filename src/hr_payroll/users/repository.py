from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    def atomic(self) -> ContextManager[None]:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, email: str, full_name: str, password_hash: str) -> int:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_users(self) -> Sequence[User]:
        raise NotImplementedError
