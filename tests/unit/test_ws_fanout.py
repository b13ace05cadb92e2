from __future__ import annotations

import json

import pytest

from travel_service.app import dispatch_event
from travel_service.infrastructure.ws.manager import ConnectionManager


class FakeSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.sent: list[dict] = []
        self.broken = broken

    async def send_text(self, raw: str) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(raw))


@pytest.mark.asyncio
async def test_dispatch_event_reaches_only_recipients():
    manager = ConnectionManager()
    alice, bob, carol = FakeSocket(), FakeSocket(), FakeSocket()
    manager.register(alice, 1)
    manager.register(bob, 2)
    manager.register(carol, 3)

    await dispatch_event(
        manager, "message.created", {"message_id": 5, "content": "hi", "recipients": [1, 2]},
    )

    assert alice.sent == [{"type": "message.created", "data": {"message_id": 5, "content": "hi"}}]
    assert bob.sent == alice.sent
    assert carol.sent == []


@pytest.mark.asyncio
async def test_every_connection_of_a_user_receives_event():
    manager = ConnectionManager()
    phone, laptop = FakeSocket(), FakeSocket()
    manager.register(phone, 1)
    manager.register(laptop, 1)

    await manager.send_to_user(1, "check_in.updated", {"status": "ready"})

    assert len(phone.sent) == 1
    assert len(laptop.sent) == 1


@pytest.mark.asyncio
async def test_dead_socket_is_dropped():
    manager = ConnectionManager()
    dead = FakeSocket(broken=True)
    manager.register(dead, 1)

    await manager.send_to_users([1], "message.created", {})

    assert manager.is_connected(1) is False
    assert manager.connected_users == []


@pytest.mark.asyncio
async def test_malformed_recipients_are_ignored():
    manager = ConnectionManager()
    sock = FakeSocket()
    manager.register(sock, 1)

    await dispatch_event(manager, "message.created", {"recipients": ["not-a-user"]})

    assert sock.sent == []


def test_disconnect_is_safe_for_unknown_socket():
    manager = ConnectionManager()
    manager.disconnect(FakeSocket(), 123)

    assert manager.connected_users == []
