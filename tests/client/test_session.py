from __future__ import annotations

import pytest
import pytest_asyncio

from travel_service.client.config import ClientSettings, ws_url_for
from travel_service.client.connection import SessionIdentity
from travel_service.client.exceptions import ClientError
from travel_service.client.session import ClientSession
from tests.client.conftest import BASE_URL, FakeConnector, RecordingSleep, wait_for


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest_asyncio.fixture
async def session(backend, connector):
    settings = ClientSettings(API_BASE_URL=BASE_URL, WS_RECONNECT=False)
    async with ClientSession(
        settings,
        transport=backend.transport(),
        connector=connector,
        sleep=RecordingSleep(),
    ) as s:
        yield s


@pytest.mark.parametrize(
    ("base", "expected"),
    [
        ("https://trips.example.com", "wss://trips.example.com/ws"),
        ("http://localhost:8000", "ws://localhost:8000/ws"),
    ],
)
def test_ws_url_follows_page_scheme(base, expected):
    assert ws_url_for(base) == expected


@pytest.mark.asyncio
async def test_login_connects_and_authenticates(session, connector, backend):
    assert session.connection_label == "Disconnected from real-time updates"

    await session.login(SessionIdentity(user_id=42, token="tok"))
    await session.load_roster()

    assert session.connection_label == "Connected to real-time updates"
    assert connector.urls == ["ws://travel.test/ws"]
    assert connector.sockets[0].sent_json == [{"type": "auth", "userId": 42, "token": "tok"}]
    assert backend.requests[-1].headers["Authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_logout_tears_everything_down(session, connector):
    await session.login(SessionIdentity(user_id=42, token="tok"))
    feed = session.message_feed(10)
    feed.start()

    await session.logout()

    assert session.connected is False
    assert connector.sockets[0].closed is True
    assert feed.query.is_polling is False
    with pytest.raises(ClientError):
        session.composer()


@pytest.mark.asyncio
async def test_polling_continues_after_push_loss(session, connector, backend):
    await session.login(SessionIdentity(user_id=42))
    feed = session.message_feed(10)
    presence = session.presence(100)
    feed.start()
    presence.start()

    connector.sockets[0].drop()
    await wait_for(lambda: not session.connected)
    backend.add_message(10, 7, "still here")
    backend.set_check_in(100, 7, "ready")
    await wait_for(lambda: bool(feed.messages()) and bool(presence.list_statuses()))

    assert [m.content for m in feed.messages()] == ["still here"]
    assert presence.list_statuses()[0].label == "Ready"


@pytest.mark.asyncio
async def test_route_deviation_raises_notification(session, connector):
    await session.login(SessionIdentity(user_id=42))

    connector.sockets[0].push('{"type": "route-deviation", "data": {"message": "Bus 2 left the route"}}')
    await wait_for(lambda: bool(session.notifier.active))

    [note] = session.notifier.active
    assert note.title == "Route Deviation Alert"
    assert note.description == "Bus 2 left the route"


@pytest.mark.asyncio
async def test_load_roster(session, backend):
    backend.users = [{"id": 42, "username": "alice", "displayName": "Alice Martin"}]
    await session.login(SessionIdentity(user_id=42))

    roster = await session.load_roster()

    assert roster.display_name(42) == "Alice Martin"
    assert roster.display_name(42, current_user_id=42) == "You"
