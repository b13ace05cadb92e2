from __future__ import annotations

from travel_service.application.uow import UnitOfWork
from travel_service.domain.entities.user import User


async def list_users(uow: UnitOfWork) -> list[User]:
    """Roster used by clients to resolve user ids to names."""
    return await uow.users.list_users()
