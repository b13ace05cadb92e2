from __future__ import annotations

from datetime import datetime

from pydantic import Field

from travel_service.api.v1.schemas.common import CamelModel


class SendMessageRequest(CamelModel):
    # group_id and user_id are accepted for compatibility; the path and
    # the token are authoritative.
    group_id: int | None = None
    user_id: int | None = None
    content: str = Field(min_length=1)


class MessageResponse(CamelModel):
    id: int
    group_id: int
    user_id: int
    content: str
    created_at: datetime
