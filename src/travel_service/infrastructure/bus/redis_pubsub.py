"""Redis Pub/Sub fan-out: the outbox worker publishes, every API instance listens."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError

from travel_service.infrastructure.bus.serializer import deserialize_event, serialize_event

logger = logging.getLogger(__name__)

OnEventCallback = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]


class RedisPubSubPublisher:
    """Implements application.ports.bus.EventPublisher."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def publish(self, channel: str, event_type: str, payload: dict[str, Any]) -> None:
        receivers = await self._redis.publish(channel, serialize_event(event_type, payload))
        if not receivers:
            # Nobody online; clients catch up on their next poll.
            logger.debug("No API instance subscribed to %s for %s", channel, event_type)


class RedisPubSubSubscriber:
    """Forwards every event on ``channel`` to ``callback``; resubscribes after Redis drops."""

    def __init__(
        self,
        redis: aioredis.Redis,
        channel: str,
        callback: OnEventCallback,
        *,
        retry_seconds: float = 2.0,
    ) -> None:
        self._redis = redis
        self._channel = channel
        self._callback = callback
        self._retry_seconds = retry_seconds
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name=f"pubsub-{self._channel}")
        logger.info("Listening for fan-out events on %s", self._channel)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Stopped listening on %s", self._channel)

    async def _run(self) -> None:
        while True:
            try:
                await self._listen()
            except (RedisConnectionError, OSError) as exc:
                logger.warning(
                    "Lost Redis subscription on %s (%s); retrying in %.1fs",
                    self._channel, exc, self._retry_seconds,
                )
                await asyncio.sleep(self._retry_seconds)

    async def _listen(self) -> None:
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self._channel)
        try:
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                await self._handle(message["data"])
        finally:
            await pubsub.aclose()

    async def _handle(self, raw: str | bytes) -> None:
        try:
            event_type, data = deserialize_event(raw)
        except ValueError:
            logger.warning("Dropping malformed fan-out event: %.200r", raw)
            return
        try:
            await self._callback(event_type, data)
        except Exception:
            logger.exception("Fan-out handler failed for %s", event_type)
