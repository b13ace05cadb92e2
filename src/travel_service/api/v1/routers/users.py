from __future__ import annotations

from fastapi import APIRouter

from travel_service.api.deps import CurrentPrincipal, UoWDep
from travel_service.api.v1.schemas.user import UserResponse
from travel_service.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    _principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[UserResponse]:
    users = await user_service.list_users(uow)
    return [UserResponse.model_validate(u) for u in users]
