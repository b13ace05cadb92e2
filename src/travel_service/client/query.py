"""Polled REST queries with a small keyed cache.

Polling is the freshness mechanism: every query refetches on its interval
whether or not the push channel is up. Responses carry a sequence number and
one that resolves after a newer one has been applied is discarded.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from travel_service.client.exceptions import ClientError

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueryKey = tuple[Any, ...]


class PolledQuery(Generic[T]):
    def __init__(
        self,
        key: QueryKey,
        fetch: Callable[[], Awaitable[T]],
        interval: float | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.key = key
        self.interval = interval
        self.data: T | None = None
        self.error: ClientError | None = None
        self.is_loading = True

        self._fetch = fetch
        self._sleep = sleep
        self._issued = 0
        self._applied = 0
        self._task: asyncio.Task[None] | None = None
        self._listeners: list[Callable[[PolledQuery[T]], None]] = []

    @property
    def issued(self) -> int:
        """Sequence number of the most recently started fetch."""
        return self._issued

    @property
    def applied(self) -> int:
        """Sequence number of the fetch whose outcome is currently shown."""
        return self._applied

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refetch(self) -> T | None:
        self._issued += 1
        seq = self._issued
        try:
            result = await self._fetch()
        except ClientError as exc:
            if seq < self._applied:
                return self.data
            self._applied = seq
            self.error = exc
            self.is_loading = False
            logger.warning("Query %s failed: %s", self.key, exc.detail)
            self._notify()
            return self.data

        if seq < self._applied:
            logger.debug("Discarding stale response #%d for %s", seq, self.key)
            return self.data
        self._applied = seq
        self.data = result
        self.error = None
        self.is_loading = False
        self._notify()
        return result

    def start(self) -> None:
        if not self.is_polling:
            self._task = asyncio.create_task(self._poll(), name=f"poll-{self.key}")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def subscribe(self, listener: Callable[[PolledQuery[T]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _poll(self) -> None:
        while True:
            try:
                await self.refetch()
            except Exception:
                logger.exception("Poll of %s failed", self.key)
            if self.interval is None:
                return
            await self._sleep(self.interval)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Query listener failed for %s", self.key)


class QueryCache:
    def __init__(self, *, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
        self._sleep = sleep
        self._queries: dict[QueryKey, PolledQuery[Any]] = {}

    def get(self, key: QueryKey) -> PolledQuery[Any] | None:
        return self._queries.get(key)

    def get_or_create(
        self,
        key: QueryKey,
        fetch: Callable[[], Awaitable[T]],
        interval: float | None = None,
    ) -> PolledQuery[T]:
        query = self._queries.get(key)
        if query is None:
            query = PolledQuery(key, fetch, interval, sleep=self._sleep)
            self._queries[key] = query
        return query

    async def invalidate(self, key: QueryKey) -> None:
        """Refetch now instead of waiting for the next poll tick."""
        query = self._queries.get(key)
        if query is not None:
            await query.refetch()

    async def stop_all(self) -> None:
        for query in list(self._queries.values()):
            await query.stop()
        self._queries.clear()


def messages_key(group_id: int) -> QueryKey:
    return ("/api/groups", group_id, "messages")


def check_in_status_key(trip_id: int) -> QueryKey:
    return ("/api/trips", trip_id, "check-in-status")


def my_check_in_key(trip_id: int, user_id: int) -> QueryKey:
    return ("/api/trips", trip_id, "check-ins/user", user_id)


USERS_KEY: QueryKey = ("/api/users",)
