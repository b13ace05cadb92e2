from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_service.domain.entities.user import User
from travel_service.infrastructure.db.mappers import user as mapper
from travel_service.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_users(self) -> list[User]:
        result = await self._session.execute(select(UserModel).order_by(UserModel.id.asc()))
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def get_by_id(self, user_id: int) -> User | None:
        model = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(model) if model else None
