from __future__ import annotations

from typing import Protocol

from travel_service.domain.entities.check_in import CheckIn


class CheckInReader(Protocol):
    async def list_for_trip(self, trip_id: int) -> list[CheckIn]: ...

    async def get_for_user(self, trip_id: int, user_id: int) -> CheckIn | None: ...


class CheckInWriter(Protocol):
    async def upsert(self, check_in: CheckIn) -> tuple[CheckIn, bool]:
        """Insert or update on (trip_id, user_id). Return (check_in, created)."""
        ...
