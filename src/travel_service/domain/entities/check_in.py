from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from travel_service.domain.value_objects.ids import TripId, UserId


@dataclass(frozen=True, slots=True)
class CheckIn:
    """Readiness of one user for one trip. Unique per (trip_id, user_id)."""

    id: int | None
    trip_id: TripId
    user_id: UserId
    status: str | None
    notes: str | None
    checked_in_at: datetime
