"""Outbox worker: polls pending outbox events, publishes them via Redis Pub/Sub."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

import redis.asyncio as aioredis

from travel_service.application.ports.bus import EventPublisher
from travel_service.application.uow import UnitOfWork
from travel_service.config import settings
from travel_service.infrastructure.bus.redis_pubsub import RedisPubSubPublisher
from travel_service.infrastructure.db.session import dispose_engine, uow_scope
from travel_service.logging_config import configure_logging

logger = logging.getLogger(__name__)

BASE_DELAY_SECONDS = 5
MAX_DELAY_SECONDS = 300


def calc_backoff(attempts: int, now: datetime | None = None) -> datetime:
    delay = min(BASE_DELAY_SECONDS * (2 ** attempts), MAX_DELAY_SECONDS)
    return (now or datetime.now(timezone.utc)) + timedelta(seconds=delay)


async def run_outbox_worker() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    publisher = RedisPubSubPublisher(redis)

    logger.info(
        "Outbox worker started (poll=%.1fs, batch=%d, max_attempts=%d)",
        settings.OUTBOX_POLL_INTERVAL,
        settings.OUTBOX_BATCH_SIZE,
        settings.OUTBOX_MAX_ATTEMPTS,
    )

    try:
        while True:
            try:
                async with uow_scope() as uow:
                    await process_batch(uow, publisher)
            except Exception:
                logger.exception("Outbox worker loop error")
            await asyncio.sleep(settings.OUTBOX_POLL_INTERVAL)
    finally:
        await redis.aclose()
        await dispose_engine()


async def process_batch(uow: UnitOfWork, publisher: EventPublisher) -> int:
    """Publish one batch of due events. Returns the number published."""
    batch = await uow.outbox.fetch_pending(settings.OUTBOX_BATCH_SIZE)
    if not batch:
        return 0

    sent_ids: list[int] = []
    for record in batch:
        if record.attempts >= settings.OUTBOX_MAX_ATTEMPTS:
            logger.warning("Outbox event %d exceeded max attempts, skipping", record.id)
            continue
        try:
            await publisher.publish(settings.REDIS_PUBSUB_CHANNEL, record.event_type, record.payload)
            sent_ids.append(record.id)
        except Exception:
            logger.exception("Failed to publish outbox event %d", record.id)
            await uow.outbox.mark_failed(record.id, calc_backoff(record.attempts))

    await uow.outbox.mark_sent(sent_ids)
    await uow.commit()
    if sent_ids:
        logger.info("Published %d outbox events", len(sent_ids))
    return len(sent_ids)


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(run_outbox_worker())


if __name__ == "__main__":
    main()
