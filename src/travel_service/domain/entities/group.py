from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from travel_service.domain.value_objects.ids import GroupId, UserId


@dataclass(frozen=True, slots=True)
class Group:
    id: GroupId
    name: str
    description: str | None
    created_by: UserId
    created_at: datetime


@dataclass(frozen=True, slots=True)
class GroupMember:
    group_id: GroupId
    user_id: UserId
    role: str
    joined_at: datetime
