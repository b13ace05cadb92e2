"""Transient user-facing notifications (toasts)."""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Literal

logger = logging.getLogger(__name__)

Variant = Literal["default", "destructive"]


@dataclass(frozen=True, slots=True)
class Notification:
    id: int
    title: str
    description: str
    variant: Variant = "default"


class Notifier:
    """Collects notifications until dismissed; listeners are told about each new one."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._active: dict[int, Notification] = {}
        self._listeners: list[Callable[[Notification], None]] = []

    @property
    def active(self) -> list[Notification]:
        return list(self._active.values())

    def notify(self, title: str, description: str = "", variant: Variant = "default") -> Notification:
        note = Notification(id=next(self._ids), title=title, description=description, variant=variant)
        self._active[note.id] = note
        log = logger.warning if variant == "destructive" else logger.info
        log("%s: %s", title, description)
        for listener in list(self._listeners):
            try:
                listener(note)
            except Exception:
                logger.exception("Notification listener failed")
        return note

    def error(self, title: str, description: str) -> Notification:
        return self.notify(title, description, variant="destructive")

    def dismiss(self, notification_id: int) -> None:
        self._active.pop(notification_id, None)

    def subscribe(self, listener: Callable[[Notification], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
