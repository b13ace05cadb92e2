from __future__ import annotations

from dataclasses import dataclass

from travel_service.domain.value_objects.enums import CheckInStatus


@dataclass(frozen=True, slots=True)
class SubmitCheckInDTO:
    trip_id: int
    status: CheckInStatus
    notes: str | None = None
