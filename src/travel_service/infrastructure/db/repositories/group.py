from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travel_service.domain.entities.group import Group
from travel_service.infrastructure.db.mappers import group as mapper
from travel_service.infrastructure.db.models.group import GroupMemberModel, GroupModel


class GroupReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, group_id: int) -> Group | None:
        model = await self._session.get(GroupModel, group_id)
        return mapper.model_to_entity(model) if model else None

    async def is_member(self, group_id: int, user_id: int) -> bool:
        stmt = (
            select(GroupMemberModel.id)
            .where(
                GroupMemberModel.group_id == group_id,
                GroupMemberModel.user_id == user_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_member_ids(self, group_id: int) -> list[int]:
        stmt = (
            select(GroupMemberModel.user_id)
            .where(GroupMemberModel.group_id == group_id)
            .order_by(GroupMemberModel.user_id.asc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
