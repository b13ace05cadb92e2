from __future__ import annotations

from sqlalchemy import literal_column, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from travel_service.domain.entities.check_in import CheckIn
from travel_service.infrastructure.db.mappers import check_in as mapper
from travel_service.infrastructure.db.models.check_in import CheckInModel


class CheckInReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_trip(self, trip_id: int) -> list[CheckIn]:
        stmt = (
            select(CheckInModel)
            .where(CheckInModel.trip_id == trip_id)
            .order_by(CheckInModel.checked_in_at.asc(), CheckInModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def get_for_user(self, trip_id: int, user_id: int) -> CheckIn | None:
        stmt = select(CheckInModel).where(
            CheckInModel.trip_id == trip_id,
            CheckInModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class CheckInWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, check_in: CheckIn) -> tuple[CheckIn, bool]:
        stmt = (
            pg_insert(CheckInModel)
            .values(
                trip_id=check_in.trip_id,
                user_id=check_in.user_id,
                status=check_in.status,
                notes=check_in.notes,
                checked_in_at=check_in.checked_in_at,
            )
            .on_conflict_do_update(
                constraint="uq_check_in_trip_user",
                set_={
                    "status": check_in.status,
                    "notes": check_in.notes,
                    "checked_in_at": check_in.checked_in_at,
                },
            )
            # xmax is 0 only for freshly inserted rows
            .returning(CheckInModel, literal_column("(xmax = 0)").label("created"))
        )
        result = await self._session.execute(stmt)
        model, created = result.one()
        return mapper.model_to_entity(model), bool(created)
