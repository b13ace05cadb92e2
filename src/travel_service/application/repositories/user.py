from __future__ import annotations

from typing import Protocol

from travel_service.domain.entities.user import User


class UserReader(Protocol):
    async def list_users(self) -> list[User]: ...

    async def get_by_id(self, user_id: int) -> User | None: ...
