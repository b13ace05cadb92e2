from __future__ import annotations

import jwt

from travel_service.application.dto.principal import Principal


class HS256Verifier:
    """Checks tokens signed with the secret shared with the auth service.

    ``sub`` must be the numeric user id; ``roles`` is optional.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", *, leeway: int = 0) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._leeway = leeway

    async def verify(self, token: str) -> Principal:
        claims = jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            leeway=self._leeway,
            options={"require": ["sub"]},
        )
        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError) as exc:
            raise jwt.InvalidTokenError("sub must be a user id") from exc

        roles = claims.get("roles") or []
        if not isinstance(roles, list):
            raise jwt.InvalidTokenError("roles must be a list")
        return Principal(user_id=user_id, roles=[str(r) for r in roles])
