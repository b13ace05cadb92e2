from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from travel_service.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class User:
    id: UserId
    username: str
    display_name: str
    email: str
    created_at: datetime
