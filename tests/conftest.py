"""Shared test fixtures."""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

import pytest

from travel_service.application.dto.principal import Principal
from travel_service.application.repositories.outbox import OutboxRecord
from travel_service.domain.entities.check_in import CheckIn
from travel_service.domain.entities.group import Group
from travel_service.domain.entities.message import Message
from travel_service.domain.entities.trip import Trip
from travel_service.domain.entities.user import User
from travel_service.domain.value_objects.enums import TripStatus


@pytest.fixture
def user_principal() -> Principal:
    return Principal(user_id=42, roles=[])


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(user_id=1, roles=["admin"])


def make_group(*, group_id: int = 10, created_by: int = 42) -> Group:
    return Group(
        id=group_id,
        name="Lake weekend",
        description=None,
        created_by=created_by,
        created_at=datetime.now(timezone.utc),
    )


def make_trip(*, trip_id: int = 100, group_id: int | None = 10, created_by: int = 42) -> Trip:
    return Trip(
        id=trip_id,
        name="Drive to the lake",
        group_id=group_id,
        created_by=created_by,
        status=TripStatus.PLANNING,
        start_date=None,
        end_date=None,
    )


def make_user(user_id: int, username: str, display_name: str = "") -> User:
    return User(
        id=user_id,
        username=username,
        display_name=display_name,
        email=f"{username}@example.com",
        created_at=datetime.now(timezone.utc),
    )


def make_message(*, message_id: int = 1, group_id: int = 10, user_id: int = 42, content: str = "hello") -> Message:
    return Message(
        id=message_id,
        group_id=group_id,
        user_id=user_id,
        content=content,
        created_at=datetime.now(timezone.utc),
    )


@dataclass
class FakeUserReader:
    _users: list[User] = field(default_factory=list)

    async def list_users(self) -> list[User]:
        return list(self._users)

    async def get_by_id(self, user_id: int) -> User | None:
        return next((u for u in self._users if u.id == user_id), None)


@dataclass
class FakeGroupReader:
    _store: dict[int, Group] = field(default_factory=dict)
    _members: dict[int, list[int]] = field(default_factory=dict)

    def add(self, group: Group, member_ids: list[int]) -> None:
        self._store[group.id] = group
        self._members[group.id] = list(member_ids)

    async def get_by_id(self, group_id: int) -> Group | None:
        return self._store.get(group_id)

    async def is_member(self, group_id: int, user_id: int) -> bool:
        return user_id in self._members.get(group_id, [])

    async def list_member_ids(self, group_id: int) -> list[int]:
        return list(self._members.get(group_id, []))


@dataclass
class FakeTripReader:
    _store: dict[int, Trip] = field(default_factory=dict)

    async def get_by_id(self, trip_id: int) -> Trip | None:
        return self._store.get(trip_id)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_for_group(self, group_id: int) -> list[Message]:
        return [m for m in self._messages if m.group_id == group_id]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    async def create(self, message: Message) -> Message:
        stored = replace(message, id=next(self._ids))
        self._reader._messages.append(stored)
        return stored


@dataclass
class FakeCheckInReader:
    _check_ins: list[CheckIn] = field(default_factory=list)

    async def list_for_trip(self, trip_id: int) -> list[CheckIn]:
        return [c for c in self._check_ins if c.trip_id == trip_id]

    async def get_for_user(self, trip_id: int, user_id: int) -> CheckIn | None:
        for c in self._check_ins:
            if c.trip_id == trip_id and c.user_id == user_id:
                return c
        return None


@dataclass
class FakeCheckInWriter:
    _reader: FakeCheckInReader
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    async def upsert(self, check_in: CheckIn) -> tuple[CheckIn, bool]:
        rows = self._reader._check_ins
        for i, existing in enumerate(rows):
            if existing.trip_id == check_in.trip_id and existing.user_id == check_in.user_id:
                rows[i] = replace(check_in, id=existing.id)
                return rows[i], False
        stored = replace(check_in, id=next(self._ids))
        rows.append(stored)
        return stored, True


@dataclass
class FakeOutboxWriter:
    _records: list[dict[str, Any]] = field(default_factory=list)
    _pending: list[OutboxRecord] = field(default_factory=list)
    _sent: list[int] = field(default_factory=list)
    _failed: list[tuple[int, datetime]] = field(default_factory=list)

    async def add(self, event_type: str, payload: dict[str, Any]) -> None:
        self._records.append({"event_type": event_type, "payload": payload})

    async def fetch_pending(self, batch_size: int) -> list[OutboxRecord]:
        return self._pending[:batch_size]

    async def mark_sent(self, ids: list[int]) -> None:
        self._sent.extend(ids)

    async def mark_failed(self, record_id: int, next_retry_at: datetime) -> None:
        self._failed.append((record_id, next_retry_at))


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    groups: FakeGroupReader = field(default_factory=FakeGroupReader)
    trips: FakeTripReader = field(default_factory=FakeTripReader)
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    check_ins: FakeCheckInReader = field(default_factory=FakeCheckInReader)
    check_ins_w: FakeCheckInWriter | None = None
    outbox: FakeOutboxWriter = field(default_factory=FakeOutboxWriter)
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.check_ins_w is None:
            self.check_ins_w = FakeCheckInWriter(self.check_ins)

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass
