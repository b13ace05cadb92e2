from __future__ import annotations

from datetime import datetime

from travel_service.api.v1.schemas.common import CamelModel
from travel_service.domain.value_objects.enums import CheckInStatus


class SubmitCheckInRequest(CamelModel):
    status: CheckInStatus
    notes: str | None = None


class CheckInResponse(CamelModel):
    id: int
    trip_id: int
    user_id: int
    status: str | None
    notes: str | None
    checked_in_at: datetime


class CheckInStatusItem(CamelModel):
    user_id: int
    status: str


class TripInfo(CamelModel):
    id: int
    name: str
    status: str
    group_id: int | None
    start_date: datetime | None
    end_date: datetime | None


class CheckInStatusResponse(CamelModel):
    check_in_statuses: list[CheckInStatusItem]
    trip_info: TripInfo
