"""Fan-out of push-channel frames to in-process subscribers.

Only the most recent decoded event is retained. Subscribers that are not
attached when an event arrives never see it; polling stays the source of truth.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, Protocol

logger = logging.getLogger(__name__)

Event = dict[str, Any]
Callback = Callable[[Event], None]


class FrameWriter(Protocol):
    @property
    def connected(self) -> bool: ...

    async def write(self, raw: str) -> bool: ...


class EventDispatcher:
    def __init__(self) -> None:
        self.last_event: Event | None = None
        self._subscribers: list[tuple[Callback, frozenset[str] | None]] = []
        self._writer: FrameWriter | None = None

    def bind(self, writer: FrameWriter | None) -> None:
        self._writer = writer

    def subscribe(self, callback: Callback, types: Iterable[str] | None = None) -> Callable[[], None]:
        entry = (callback, frozenset(types) if types is not None else None)
        self._subscribers.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    def handle_frame(self, raw: str | bytes) -> Event | None:
        try:
            event = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Dropping undecodable push frame: %.200r", raw)
            return None
        if not isinstance(event, dict):
            logger.warning("Dropping non-object push frame: %.200r", raw)
            return None

        self.last_event = event
        event_type = event.get("type")
        for callback, types in list(self._subscribers):
            if types is not None and event_type not in types:
                continue
            try:
                callback(event)
            except Exception:
                logger.exception("Push subscriber failed for event %r", event_type)
        return event

    async def send_message(self, payload: Any) -> bool:
        """Write ``payload`` as JSON. True means the write was attempted, not delivered."""
        writer = self._writer
        if writer is None or not writer.connected:
            return False
        return await writer.write(json.dumps(payload))
