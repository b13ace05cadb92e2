from __future__ import annotations

from typing import Protocol

from travel_service.domain.entities.trip import Trip


class TripReader(Protocol):
    async def get_by_id(self, trip_id: int) -> Trip | None: ...
