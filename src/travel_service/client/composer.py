"""Message input: local validation, REST submit, immediate feed refetch."""
from __future__ import annotations

from enum import Enum

from travel_service.client.api import TravelApiClient
from travel_service.client.exceptions import ApiError, ValidationError
from travel_service.client.notifications import Notifier
from travel_service.client.query import QueryCache, messages_key

EMPTY_MESSAGE_ERROR = "Message cannot be empty"


class KeyAction(Enum):
    SUBMIT = "submit"
    NEWLINE = "newline"
    NONE = "none"


def validate_content(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError("content", EMPTY_MESSAGE_ERROR)
    return text


def key_action(key: str, shift: bool = False) -> KeyAction:
    if key != "Enter":
        return KeyAction.NONE
    return KeyAction.NEWLINE if shift else KeyAction.SUBMIT


class OutboundComposer:
    def __init__(
        self,
        api: TravelApiClient,
        cache: QueryCache,
        notifier: Notifier,
        user_id: int,
    ) -> None:
        self.draft = ""
        self.field_error: str | None = None
        self.is_pending = False
        self.user_id = user_id
        self._api = api
        self._cache = cache
        self._notifier = notifier

    async def send(self, group_id: int, content: str | None = None) -> bool:
        if content is not None:
            self.draft = content
        try:
            text = validate_content(self.draft)
        except ValidationError as exc:
            self.field_error = exc.detail
            return False
        if self.is_pending:
            return False

        self.field_error = None
        self.is_pending = True
        try:
            await self._api.send_message(group_id, self.user_id, text)
        except ApiError as exc:
            self._notifier.error("Error", f"Failed to send message: {exc.detail}")
            return False
        finally:
            self.is_pending = False

        self.draft = ""
        await self._cache.invalidate(messages_key(group_id))
        return True

    async def handle_key(self, group_id: int, key: str, shift: bool = False) -> KeyAction:
        action = key_action(key, shift)
        if action is KeyAction.SUBMIT:
            await self.send(group_id)
        elif action is KeyAction.NEWLINE:
            self.draft += "\n"
        return action
