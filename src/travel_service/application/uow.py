from __future__ import annotations

from typing import Protocol

from travel_service.application.repositories.check_in import CheckInReader, CheckInWriter
from travel_service.application.repositories.group import GroupReader
from travel_service.application.repositories.message import MessageReader, MessageWriter
from travel_service.application.repositories.outbox import OutboxWriter
from travel_service.application.repositories.trip import TripReader
from travel_service.application.repositories.user import UserReader


class UnitOfWork(Protocol):
    users: UserReader
    groups: GroupReader
    trips: TripReader
    messages: MessageReader
    messages_w: MessageWriter
    check_ins: CheckInReader
    check_ins_w: CheckInWriter
    outbox: OutboxWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
