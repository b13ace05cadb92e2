from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from travel_service.config import settings
from travel_service.infrastructure.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


async def _postgres(_request: Request) -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1"))


async def _redis(request: Request) -> None:
    await request.app.state.redis.ping()


_PROBES: dict[str, Callable[[Request], Awaitable[None]]] = {
    "postgres": _postgres,
    "redis": _redis,
}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    """Ready when both the database and the fan-out bus answer in time."""
    checks: dict[str, str] = {}
    for name, probe in _PROBES.items():
        try:
            await asyncio.wait_for(probe(request), timeout=settings.READINESS_TIMEOUT_SECONDS)
            checks[name] = "ok"
        except Exception as exc:  # noqa: BLE001
            logger.warning("Readiness probe %s failed: %r", name, exc)
            checks[name] = f"error: {exc!r}"

    ready = all(v == "ok" for v in checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "unavailable", "checks": checks},
    )
