from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from travel_service.domain.value_objects.ids import GroupId, TripId, UserId


@dataclass(frozen=True, slots=True)
class Trip:
    id: TripId
    name: str
    group_id: GroupId | None
    created_by: UserId
    status: str
    start_date: datetime | None
    end_date: datetime | None
