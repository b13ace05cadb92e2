"""WebSocket frame models for the /ws push endpoint."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class WsAuth(BaseModel):
    """First client frame: {"type": "auth", "userId": 7, "token": "<jwt>"}."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["auth"]
    user_id: int = Field(alias="userId")
    token: str


class WsInbound(BaseModel):
    """Client -> Server after authentication."""

    type: str  # ping
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    """Server -> Client."""

    type: str  # message.created | check_in.updated | route-deviation | error | pong
    data: dict[str, Any] = {}
