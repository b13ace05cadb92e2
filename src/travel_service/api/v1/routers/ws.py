from __future__ import annotations

import asyncio
import logging

import jwt
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from travel_service.api.deps import get_verifier
from travel_service.config import settings
from travel_service.infrastructure.ws.manager import ConnectionManager
from travel_service.infrastructure.ws.protocol import WsAuth, WsInbound, WsOutbound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

manager = ConnectionManager()

AUTH_FAILED_CODE = 4001


def get_manager() -> ConnectionManager:
    return manager


async def _authenticate(ws: WebSocket) -> int | None:
    """Wait for the auth frame; its token must belong to the claimed userId."""
    try:
        raw = await asyncio.wait_for(ws.receive_text(), timeout=settings.WS_AUTH_TIMEOUT_SECONDS)
        frame = WsAuth.model_validate_json(raw)
        principal = await get_verifier().verify(frame.token)
    except (asyncio.TimeoutError, ValidationError, jwt.PyJWTError):
        logger.debug("WS auth failed", exc_info=True)
        return None
    if principal.user_id != frame.user_id:
        logger.warning(
            "WS auth rejected: token for user %d claimed user %d",
            principal.user_id, frame.user_id,
        )
        return None
    return frame.user_id


@router.websocket("/ws")
async def ws_push(websocket: WebSocket) -> None:
    await websocket.accept()
    try:
        user_id = await _authenticate(websocket)
    except WebSocketDisconnect:
        return
    if user_id is None:
        await websocket.close(code=AUTH_FAILED_CODE, reason="Authentication failed")
        return

    manager.register(websocket, user_id)
    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{user_id}",
    )
    try:
        await _read_loop(websocket)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for user %d", user_id)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(websocket, user_id)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong").model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WS heartbeat stopped", exc_info=True)


async def _read_loop(ws: WebSocket) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except ValidationError:
            await ws.send_text(
                WsOutbound(type="error", data={"code": "invalid_payload"}).model_dump_json()
            )
            continue

        if msg.type == "ping":
            await ws.send_text(WsOutbound(type="pong").model_dump_json())
        else:
            await ws.send_text(
                WsOutbound(type="error", data={"code": "unknown_type", "type": msg.type}).model_dump_json()
            )
