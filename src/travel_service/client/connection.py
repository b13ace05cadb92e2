"""Single push-channel connection per client session."""
from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import websockets
from websockets.exceptions import WebSocketException

from travel_service.client.dispatcher import EventDispatcher

logger = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class SessionIdentity:
    user_id: int
    token: str | None = None


def auth_frame(identity: SessionIdentity) -> dict[str, Any]:
    frame: dict[str, Any] = {"type": "auth", "userId": identity.user_id}
    if identity.token is not None:
        frame["token"] = identity.token
    return frame


class ConnectionManager:
    """Owns the socket, the auth handshake and reconnection.

    The rest of the client only observes ``connected``. Frames are handed to
    the dispatcher as they arrive; writes go through ``write``.
    """

    def __init__(
        self,
        url: str,
        dispatcher: EventDispatcher,
        *,
        connector: Connector | None = None,
        reconnect: bool = True,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._url = url
        self._dispatcher = dispatcher
        self._connector = connector or websockets.connect
        self._reconnect = reconnect
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._sleep = sleep

        self._lock = asyncio.Lock()
        self._identity: SessionIdentity | None = None
        self._ws: Any = None
        self._task: asyncio.Task[None] | None = None
        self._connected = False

        dispatcher.bind(self)

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def identity(self) -> SessionIdentity | None:
        return self._identity

    def backoff_delay(self, attempt: int) -> float:
        return min(self._base_delay * (2 ** attempt), self._max_delay)

    async def connect(self, identity: SessionIdentity | None) -> None:
        async with self._lock:
            if identity is None:
                await self._teardown()
                return
            if identity == self._identity and self._task is not None and not self._task.done():
                return

            await self._teardown()
            self._identity = identity
            opened = await self._open(identity)
            self._task = asyncio.create_task(
                self._run(identity, opened), name=f"push-channel-{identity.user_id}",
            )

    async def disconnect(self) -> None:
        async with self._lock:
            await self._teardown()

    async def write(self, raw: str) -> bool:
        ws = self._ws
        if ws is None or not self._connected:
            return False
        try:
            await ws.send(raw)
        except (WebSocketException, OSError):
            logger.warning("Push channel write failed", exc_info=True)
        return True

    async def _open(self, identity: SessionIdentity) -> bool:
        ws = None
        try:
            ws = await self._connector(self._url)
            await ws.send(json.dumps(auth_frame(identity)))
        except (WebSocketException, OSError) as exc:
            logger.warning("Push channel to %s unavailable: %s", self._url, exc)
            if ws is not None:
                await _close_quietly(ws)
            return False
        except BaseException:
            if ws is not None:
                await _close_quietly(ws)
            raise

        self._ws = ws
        self._connected = True
        logger.info("Push channel connected for user %d", identity.user_id)
        return True

    async def _run(self, identity: SessionIdentity, opened: bool) -> None:
        attempt = 0
        while True:
            if opened:
                attempt = 0
                await self._read_until_closed()
            if not self._reconnect:
                return
            delay = self.backoff_delay(attempt)
            attempt += 1
            logger.info("Reconnecting push channel in %.1fs (attempt %d)", delay, attempt)
            await self._sleep(delay)
            opened = await self._open(identity)

    async def _read_until_closed(self) -> None:
        ws = self._ws
        try:
            async for raw in ws:
                self._dispatcher.handle_frame(raw)
            logger.info("Push channel closed by server")
        except (WebSocketException, OSError) as exc:
            logger.warning("Push channel dropped: %s", exc)
        finally:
            self._connected = False
            if self._ws is ws:
                self._ws = None

    async def _teardown(self) -> None:
        task, self._task = self._task, None
        ws, self._ws = self._ws, None
        self._connected = False
        self._identity = None

        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if ws is not None:
            await _close_quietly(ws)
            logger.info("Push channel disconnected")


async def _close_quietly(ws: Any) -> None:
    try:
        await ws.close()
    except (WebSocketException, OSError):
        logger.debug("Ignoring error while closing push channel", exc_info=True)
