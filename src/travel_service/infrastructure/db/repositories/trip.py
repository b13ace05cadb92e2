from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from travel_service.domain.entities.trip import Trip
from travel_service.infrastructure.db.mappers import trip as mapper
from travel_service.infrastructure.db.models.trip import TripModel


class TripReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, trip_id: int) -> Trip | None:
        model = await self._session.get(TripModel, trip_id)
        return mapper.model_to_entity(model) if model else None
