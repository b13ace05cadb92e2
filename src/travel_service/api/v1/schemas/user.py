from __future__ import annotations

from travel_service.api.v1.schemas.common import CamelModel


class UserResponse(CamelModel):
    id: int
    username: str
    display_name: str
