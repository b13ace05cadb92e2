from __future__ import annotations

import asyncio
import contextlib

import pytest

from travel_service.client.connection import ConnectionManager, SessionIdentity
from travel_service.client.dispatcher import EventDispatcher
from tests.client.conftest import FakeConnector, FakeSocket, RecordingSleep, wait_for

URL = "ws://travel.test/ws"


def _manager(connector, *, reconnect=False, sleep=None, max_delay=30.0):
    dispatcher = EventDispatcher()
    manager = ConnectionManager(
        URL,
        dispatcher,
        connector=connector,
        reconnect=reconnect,
        base_delay=1.0,
        max_delay=max_delay,
        sleep=sleep or RecordingSleep(limit=1),
    )
    return manager, dispatcher


@pytest.mark.asyncio
async def test_connect_sends_single_auth_frame():
    connector = FakeConnector()
    manager, _ = _manager(connector)

    await manager.connect(SessionIdentity(user_id=7))

    assert manager.connected is True
    assert connector.urls == [URL]
    assert connector.sockets[0].sent_json == [{"type": "auth", "userId": 7}]
    await manager.disconnect()


@pytest.mark.asyncio
async def test_frames_reach_dispatcher():
    connector = FakeConnector()
    manager, dispatcher = _manager(connector)
    await manager.connect(SessionIdentity(user_id=7))

    connector.sockets[0].push('{"type": "message.created", "data": {"message_id": 3}}')
    await wait_for(lambda: dispatcher.last_event is not None)

    assert dispatcher.last_event["data"] == {"message_id": 3}
    await manager.disconnect()


@pytest.mark.asyncio
async def test_same_identity_keeps_one_connection():
    connector = FakeConnector()
    manager, _ = _manager(connector)
    identity = SessionIdentity(user_id=7, token="t")

    await manager.connect(identity)
    await manager.connect(identity)

    assert len(connector.sockets) == 1
    await manager.disconnect()


@pytest.mark.asyncio
async def test_identity_change_replaces_connection():
    connector = FakeConnector()
    manager, _ = _manager(connector)

    await manager.connect(SessionIdentity(user_id=7))
    await manager.connect(SessionIdentity(user_id=8))

    first, second = connector.sockets
    assert first.closed is True
    assert second.sent_json == [{"type": "auth", "userId": 8}]
    assert manager.identity == SessionIdentity(user_id=8)
    await manager.disconnect()


@pytest.mark.asyncio
async def test_no_identity_tears_down():
    connector = FakeConnector()
    manager, _ = _manager(connector)
    await manager.connect(SessionIdentity(user_id=7))

    await manager.connect(None)

    assert manager.connected is False
    assert connector.sockets[0].closed is True


@pytest.mark.asyncio
async def test_disconnect_is_idempotent():
    connector = FakeConnector()
    manager, _ = _manager(connector)

    await manager.disconnect()
    await manager.connect(SessionIdentity(user_id=7))
    await manager.disconnect()
    await manager.disconnect()

    assert manager.connected is False
    assert len(connector.sockets) == 1


@pytest.mark.asyncio
async def test_server_close_without_reconnect():
    connector = FakeConnector()
    manager, _ = _manager(connector, reconnect=False)
    await manager.connect(SessionIdentity(user_id=7))

    connector.sockets[0].drop()
    await wait_for(lambda: not manager.connected)

    assert len(connector.sockets) == 1
    assert await manager.write('{"type": "ping"}') is False
    await manager.disconnect()


@pytest.mark.asyncio
async def test_server_close_reconnects_after_backoff():
    connector = FakeConnector()
    sleep = RecordingSleep(limit=5)
    manager, _ = _manager(connector, reconnect=True, sleep=sleep)
    await manager.connect(SessionIdentity(user_id=7))

    connector.sockets[0].drop()
    await wait_for(lambda: len(connector.sockets) == 2 and manager.connected)

    assert sleep.delays[0] == 1.0
    assert connector.sockets[1].sent_json == [{"type": "auth", "userId": 7}]
    await manager.disconnect()


@pytest.mark.asyncio
async def test_failed_open_backs_off_exponentially_with_cap():
    connector = FakeConnector(fail_times=4)
    sleep = RecordingSleep(limit=10)
    manager, _ = _manager(connector, reconnect=True, sleep=sleep, max_delay=4.0)

    await manager.connect(SessionIdentity(user_id=7))
    assert manager.connected is False

    await wait_for(lambda: manager.connected)

    assert sleep.delays == [1.0, 2.0, 4.0, 4.0]
    assert len(connector.urls) == 5
    await manager.disconnect()


@pytest.mark.asyncio
async def test_disconnect_stops_reconnecting():
    connector = FakeConnector(fail_times=100)
    sleep = RecordingSleep(limit=3)
    manager, _ = _manager(connector, reconnect=True, sleep=sleep)
    await manager.connect(SessionIdentity(user_id=7))
    await wait_for(lambda: len(sleep.delays) == 3)

    await manager.disconnect()
    attempts = len(connector.urls)

    assert manager.connected is False
    assert len(connector.urls) == attempts


def test_backoff_delay_is_capped():
    manager, _ = _manager(FakeConnector(), max_delay=30.0)

    assert [manager.backoff_delay(n) for n in range(7)] == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0, 30.0]


@pytest.mark.asyncio
async def test_dispatcher_send_goes_through_connection():
    connector = FakeConnector()
    manager, dispatcher = _manager(connector)
    await manager.connect(SessionIdentity(user_id=7))

    assert await dispatcher.send_message({"type": "ping"}) is True
    assert connector.sockets[0].sent_json[-1] == {"type": "ping"}

    await manager.disconnect()
    assert await dispatcher.send_message({"type": "ping"}) is False


class _StalledSocket(FakeSocket):
    """Accepts the connection but never finishes the auth write."""

    async def send(self, raw: str) -> None:
        await asyncio.Event().wait()


class _StalledConnector(FakeConnector):
    async def __call__(self, url: str) -> FakeSocket:
        self.urls.append(url)
        sock = _StalledSocket()
        self.sockets.append(sock)
        return sock


@pytest.mark.asyncio
async def test_auth_frame_carries_token():
    connector = FakeConnector()
    manager, _ = _manager(connector)

    await manager.connect(SessionIdentity(user_id=7, token="jwt-7"))

    assert connector.sockets[0].sent_json == [{"type": "auth", "userId": 7, "token": "jwt-7"}]
    await manager.disconnect()


@pytest.mark.asyncio
async def test_cancelled_handshake_closes_socket():
    connector = _StalledConnector()
    manager, _ = _manager(connector)

    task = asyncio.create_task(manager.connect(SessionIdentity(user_id=7)))
    await wait_for(lambda: bool(connector.sockets))
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task

    assert connector.sockets[0].closed is True
    assert manager.connected is False
