from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from travel_service.domain.value_objects.ids import GroupId, MessageId, UserId


@dataclass(frozen=True, slots=True)
class Message:
    id: MessageId | None
    group_id: GroupId
    user_id: UserId
    content: str
    created_at: datetime
