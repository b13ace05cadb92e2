from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CheckInUpdated:
    trip_id: int
    user_id: int
    status: str | None
    recipients: list[int]
    created: bool = False
