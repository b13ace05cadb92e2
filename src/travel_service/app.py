from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travel_service.api.middleware.correlation_id import CorrelationIdMiddleware
from travel_service.api.middleware.metrics import RequestTimingMiddleware
from travel_service.api.v1.routers import check_ins, health, messages, users, ws
from travel_service.application.exceptions import AppError
from travel_service.config import settings
from travel_service.infrastructure.bus.redis_pubsub import RedisPubSubSubscriber
from travel_service.infrastructure.db.session import dispose_engine
from travel_service.infrastructure.ws.manager import ConnectionManager

logger = logging.getLogger(__name__)


async def dispatch_event(
    manager: ConnectionManager,
    event_type: str,
    data: dict[str, Any],
) -> None:
    """Forward a fan-out event to the local sockets of its recipients."""
    recipients = data.get("recipients") or []
    payload = {k: v for k, v in data.items() if k != "recipients"}
    try:
        user_ids = [int(r) for r in recipients]
    except (TypeError, ValueError):
        logger.warning("Dropping %s event with malformed recipients", event_type)
        return
    await manager.send_to_users(user_ids, event_type, payload)


async def _on_pubsub_event(event_type: str, data: dict[str, Any]) -> None:
    await dispatch_event(ws.get_manager(), event_type, data)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    subscriber = RedisPubSubSubscriber(
        app.state.redis,
        settings.REDIS_PUBSUB_CHANNEL,
        _on_pubsub_event,
        retry_seconds=settings.REDIS_RESUBSCRIBE_SECONDS,
    )
    await subscriber.start()
    app.state.pubsub_subscriber = subscriber

    yield

    await subscriber.stop()
    await app.state.redis.aclose()
    await dispose_engine()
    logger.info("Redis and database pools closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Travel Group Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(messages.router)
    app.include_router(check_ins.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
