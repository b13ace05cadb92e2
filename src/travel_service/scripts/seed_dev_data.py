"""Seed development data: tables, a travel group, a trip and some chat history.

Prints a bearer token per seeded user for use with the client.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

import jwt

from travel_service.config import settings
from travel_service.infrastructure.db.base import Base
from travel_service.infrastructure.db.models import (
    GroupMemberModel,
    GroupModel,
    TripModel,
    UserModel,
)
from travel_service.infrastructure.db.session import AsyncSessionLocal, engine
from travel_service.infrastructure.db.uow import SqlAlchemyUoW
from travel_service.domain.entities.message import Message
from travel_service.logging_config import configure_logging

logger = logging.getLogger(__name__)

USERS = [
    ("alice", "Alice Martin", "alice@example.com"),
    ("bob", "Bob Chen", "bob@example.com"),
    ("carol", "Carol Diaz", "carol@example.com"),
]


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        now = datetime.now(timezone.utc)

        users = [UserModel(username=u, display_name=d, email=e) for u, d, e in USERS]
        session.add_all(users)
        await session.flush()

        group = GroupModel(name="Lake weekend", description="Cabin trip", created_by=users[0].id)
        session.add(group)
        await session.flush()

        session.add_all(
            GroupMemberModel(group_id=group.id, user_id=u.id, role="admin" if i == 0 else "member")
            for i, u in enumerate(users)
        )
        trip = TripModel(
            name="Drive to the lake",
            group_id=group.id,
            created_by=users[0].id,
            start_date=now + timedelta(days=3),
            end_date=now + timedelta(days=5),
        )
        session.add(trip)
        await session.flush()

        uow = SqlAlchemyUoW(session)
        history = [
            (users[0].id, "Who is driving on Friday?"),
            (users[1].id, "I can take four people."),
            (users[1].id, "Leaving at 8am sharp."),
            (users[2].id, "Count me in!"),
        ]
        for offset, (user_id, content) in enumerate(history):
            await uow.messages_w.create(
                Message(
                    id=None,
                    group_id=group.id,
                    user_id=user_id,
                    content=content,
                    created_at=now - timedelta(minutes=len(history) - offset),
                )
            )

        await uow.commit()
        logger.info("Seeded group %d, trip %d, %d messages", group.id, trip.id, len(history))

        for user in users:
            token = jwt.encode(
                {"sub": str(user.id), "roles": []},
                settings.JWT_SECRET,
                algorithm=settings.JWT_ALGORITHM,
            )
            print(f"{user.username} (id={user.id}): {token}")


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
