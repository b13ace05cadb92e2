"""FastAPI dependency injection helpers."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, AsyncIterator

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from travel_service.application.dto.principal import Principal
from travel_service.application.ports.auth import TokenVerifier
from travel_service.config import settings
from travel_service.infrastructure.auth.hs256_verifier import HS256Verifier
from travel_service.infrastructure.db.session import uow_scope
from travel_service.infrastructure.db.uow import SqlAlchemyUoW

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with uow_scope() as uow:
        yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


@lru_cache(maxsize=1)
def get_verifier() -> TokenVerifier:
    return HS256Verifier(
        settings.JWT_SECRET,
        settings.JWT_ALGORITHM,
        leeway=settings.JWT_LEEWAY_SECONDS,
    )


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Principal:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await get_verifier().verify(credentials.credentials)
    except jwt.PyJWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {exc}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
