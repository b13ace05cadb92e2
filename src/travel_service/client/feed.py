"""Group chat feed: polled message list and its presentation rules."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Literal, Sequence

from travel_service.client.api import TravelApiClient
from travel_service.client.query import PolledQuery, QueryCache, messages_key
from travel_service.client.roster import Roster

logger = logging.getLogger(__name__)

EMPTY_TITLE = "No messages yet"
EMPTY_HINT = "Start the conversation by sending a message to your travel group."

ScrollBehavior = Literal["auto", "smooth"]


@dataclass(frozen=True, slots=True)
class ChatMessage:
    id: int
    group_id: int
    sender_user_id: int
    content: str
    created_at: datetime

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> ChatMessage:
        created = raw.get("createdAt")
        created_at = _parse_timestamp(created) if created else datetime.now(timezone.utc)
        return cls(
            id=int(raw["id"]),
            group_id=int(raw["groupId"]),
            sender_user_id=int(raw["userId"]),
            content=str(raw.get("content") or ""),
            created_at=created_at,
        )


@dataclass(frozen=True, slots=True)
class MessageRow:
    message: ChatMessage
    sender_name: str
    sender_initials: str
    show_sender: bool
    show_timestamp: bool
    time_label: str
    is_own: bool


@dataclass(frozen=True, slots=True)
class DateBucket:
    day: date
    label: str
    rows: list[MessageRow] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FeedView:
    buckets: list[DateBucket]
    is_loading: bool
    empty_title: str | None = None
    empty_hint: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.empty_title is not None


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_messages(records: Any) -> list[ChatMessage]:
    """Records that cannot be read as messages are skipped."""
    if not isinstance(records, list):
        return []
    out: list[ChatMessage] = []
    for raw in records:
        try:
            out.append(ChatMessage.from_api(raw))
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Skipping malformed message record: %.200r", raw)
    return out


def dedupe_messages(messages: Iterable[ChatMessage]) -> list[ChatMessage]:
    """Drop repeated ids, keeping the first occurrence and server order."""
    seen: set[int] = set()
    out: list[ChatMessage] = []
    for msg in messages:
        if msg.id in seen:
            continue
        seen.add(msg.id)
        out.append(msg)
    return out


def should_show_sender(messages: Sequence[ChatMessage], i: int) -> bool:
    return i == 0 or messages[i - 1].sender_user_id != messages[i].sender_user_id


def should_show_timestamp(messages: Sequence[ChatMessage], i: int) -> bool:
    """True on the last message of a sender run."""
    return i == len(messages) - 1 or messages[i + 1].sender_user_id != messages[i].sender_user_id


def local_day(ts: datetime) -> date:
    return ts.astimezone().date()


def bucket_by_date(messages: Sequence[ChatMessage]) -> list[tuple[date, list[ChatMessage]]]:
    buckets: list[tuple[date, list[ChatMessage]]] = []
    for msg in messages:
        day = local_day(msg.created_at)
        if buckets and buckets[-1][0] == day:
            buckets[-1][1].append(msg)
        else:
            buckets.append((day, [msg]))
    return buckets


def friendly_date(day: date, today: date | None = None) -> str:
    today = today or datetime.now().date()
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def format_time(ts: datetime) -> str:
    local = ts.astimezone()
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"


class ScrollTracker:
    """Decides when the feed should scroll to the newest message."""

    def __init__(self) -> None:
        self._loaded = False
        self._newest_id: int | None = None

    def observe(self, messages: Sequence[ChatMessage]) -> ScrollBehavior | None:
        if not messages:
            return None
        newest = messages[-1].id
        if not self._loaded:
            self._loaded = True
            self._newest_id = newest
            return "auto"
        if newest != self._newest_id:
            self._newest_id = newest
            return "smooth"
        return None


class MessageFeed:
    def __init__(
        self,
        api: TravelApiClient,
        cache: QueryCache,
        group_id: int,
        *,
        current_user_id: int | None = None,
        roster: Roster | None = None,
        interval: float = 2.0,
    ) -> None:
        self.group_id = group_id
        self.current_user_id = current_user_id
        self.roster = roster or Roster()
        self.scroll = ScrollTracker()
        self._api = api
        self.query: PolledQuery[list[dict[str, Any]]] = cache.get_or_create(
            messages_key(group_id), self._fetch, interval,
        )

    async def _fetch(self) -> list[dict[str, Any]]:
        return await self._api.list_messages(self.group_id)

    def start(self) -> None:
        self.query.start()

    async def stop(self) -> None:
        await self.query.stop()

    async def refresh(self) -> None:
        await self.query.refetch()

    def messages(self) -> list[ChatMessage]:
        return dedupe_messages(parse_messages(self.query.data))

    def view(self, today: date | None = None) -> FeedView:
        messages = self.messages()
        if not messages:
            if self.query.is_loading:
                return FeedView(buckets=[], is_loading=True)
            return FeedView(buckets=[], is_loading=False, empty_title=EMPTY_TITLE, empty_hint=EMPTY_HINT)

        buckets: list[DateBucket] = []
        for day, day_messages in bucket_by_date(messages):
            rows = [
                MessageRow(
                    message=msg,
                    sender_name=self.roster.display_name(msg.sender_user_id, self.current_user_id),
                    sender_initials=self.roster.initials(msg.sender_user_id),
                    show_sender=should_show_sender(day_messages, i),
                    show_timestamp=should_show_timestamp(day_messages, i),
                    time_label=format_time(msg.created_at),
                    is_own=msg.sender_user_id == self.current_user_id,
                )
                for i, msg in enumerate(day_messages)
            ]
            buckets.append(DateBucket(day=day, label=friendly_date(day, today), rows=rows))
        return FeedView(buckets=buckets, is_loading=False)
