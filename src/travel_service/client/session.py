"""Per-login wiring of the real-time layer.

A ``ClientSession`` owns one REST client, one query cache and one push-channel
connection. Feeds, presence stores and composers are created from it and
share those resources.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from travel_service.client.api import TravelApiClient
from travel_service.client.composer import OutboundComposer
from travel_service.client.config import ClientSettings
from travel_service.client.connection import Connector, ConnectionManager, SessionIdentity
from travel_service.client.dispatcher import EventDispatcher
from travel_service.client.exceptions import ClientError
from travel_service.client.feed import MessageFeed
from travel_service.client.notifications import Notifier
from travel_service.client.presence import PresenceStore
from travel_service.client.query import USERS_KEY, QueryCache
from travel_service.client.roster import Roster

logger = logging.getLogger(__name__)

ROUTE_DEVIATION = "route-deviation"


class ClientSession:
    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        connector: Connector | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.identity: SessionIdentity | None = None

        self.api = TravelApiClient(
            self.settings.API_BASE_URL,
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.cache = QueryCache(sleep=sleep)
        self.notifier = Notifier()
        self.dispatcher = EventDispatcher()
        self.connection = ConnectionManager(
            self.settings.ws_url,
            self.dispatcher,
            connector=connector,
            reconnect=self.settings.WS_RECONNECT,
            base_delay=self.settings.WS_RECONNECT_BASE_SECONDS,
            max_delay=self.settings.WS_RECONNECT_MAX_SECONDS,
            sleep=sleep,
        )
        self.dispatcher.subscribe(self._on_route_deviation, types={ROUTE_DEVIATION})

    async def __aenter__(self) -> ClientSession:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    @property
    def connected(self) -> bool:
        return self.connection.connected

    @property
    def connection_label(self) -> str:
        if self.connected:
            return "Connected to real-time updates"
        return "Disconnected from real-time updates"

    async def login(self, identity: SessionIdentity) -> None:
        self.identity = identity
        self.api.set_token(identity.token)
        await self.connection.connect(identity)

    async def logout(self) -> None:
        await self.connection.connect(None)
        await self.cache.stop_all()
        self.api.set_token(None)
        self.identity = None

    async def aclose(self) -> None:
        await self.logout()
        await self.api.aclose()

    def _require_user(self) -> int:
        if self.identity is None:
            raise ClientError("Not logged in")
        return self.identity.user_id

    async def load_roster(self) -> Roster:
        query = self.cache.get_or_create(USERS_KEY, self.api.list_users)
        if query.data is None:
            await query.refetch()
        return Roster(query.data or [])

    def message_feed(self, group_id: int, roster: Roster | None = None) -> MessageFeed:
        return MessageFeed(
            self.api,
            self.cache,
            group_id,
            current_user_id=self._require_user(),
            roster=roster,
            interval=self.settings.MESSAGE_POLL_SECONDS,
        )

    def presence(self, trip_id: int) -> PresenceStore:
        return PresenceStore(
            self.api,
            self.cache,
            self.notifier,
            trip_id,
            self._require_user(),
            interval=self.settings.CHECK_IN_POLL_SECONDS,
        )

    def composer(self) -> OutboundComposer:
        return OutboundComposer(self.api, self.cache, self.notifier, self._require_user())

    def _on_route_deviation(self, event: dict[str, Any]) -> None:
        data = event.get("data") if isinstance(event.get("data"), dict) else {}
        description = data.get("message") or "A trip has left its planned route."
        self.notifier.error("Route Deviation Alert", description)
