from __future__ import annotations

from typing import Protocol

from travel_service.application.dto.principal import Principal


class TokenVerifier(Protocol):
    """Turns a bearer token into the calling user. Raises ``jwt.PyJWTError`` when invalid."""

    async def verify(self, token: str) -> Principal: ...
