from __future__ import annotations

from typing import Protocol

from travel_service.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_for_group(self, group_id: int) -> list[Message]:
        """All messages of a group, oldest first."""
        ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message:
        """Insert message and return it with its server-assigned id."""
        ...
