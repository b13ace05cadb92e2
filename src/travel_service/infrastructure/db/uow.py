from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from travel_service.infrastructure.db.repositories.check_in import (
    CheckInReaderRepo,
    CheckInWriterRepo,
)
from travel_service.infrastructure.db.repositories.group import GroupReaderRepo
from travel_service.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from travel_service.infrastructure.db.repositories.outbox import OutboxWriterRepo
from travel_service.infrastructure.db.repositories.trip import TripReaderRepo
from travel_service.infrastructure.db.repositories.user import UserReaderRepo


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.users = UserReaderRepo(session)
        self.groups = GroupReaderRepo(session)
        self.trips = TripReaderRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.check_ins = CheckInReaderRepo(session)
        self.check_ins_w = CheckInWriterRepo(session)
        self.outbox = OutboxWriterRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
