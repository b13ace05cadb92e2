from __future__ import annotations

from fastapi import APIRouter, Response

from travel_service.api.deps import CurrentPrincipal, UoWDep
from travel_service.api.v1.schemas.check_in import (
    CheckInResponse,
    CheckInStatusItem,
    CheckInStatusResponse,
    SubmitCheckInRequest,
    TripInfo,
)
from travel_service.application.dto.check_in import SubmitCheckInDTO
from travel_service.services import check_in_service

router = APIRouter(prefix="/api/trips", tags=["check-ins"])


@router.get("/{trip_id}/check-in-status", response_model=CheckInStatusResponse)
async def get_check_in_status(
    trip_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> CheckInStatusResponse:
    trip, statuses = await check_in_service.get_check_in_status(trip_id, principal, uow)
    return CheckInStatusResponse(
        check_in_statuses=[
            CheckInStatusItem(user_id=user_id, status=status) for user_id, status in statuses
        ],
        trip_info=TripInfo.model_validate(trip),
    )


@router.get("/{trip_id}/check-ins/user/{user_id}", response_model=CheckInResponse)
async def get_user_check_in(
    trip_id: int,
    user_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> CheckInResponse:
    check_in = await check_in_service.get_user_check_in(trip_id, user_id, principal, uow)
    return CheckInResponse.model_validate(check_in)


@router.post("/{trip_id}/check-ins", response_model=CheckInResponse)
async def submit_check_in(
    trip_id: int,
    body: SubmitCheckInRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    response: Response,
) -> CheckInResponse:
    check_in, created = await check_in_service.submit_check_in(
        SubmitCheckInDTO(trip_id=trip_id, status=body.status, notes=body.notes),
        principal,
        uow,
    )
    response.status_code = 201 if created else 200
    return CheckInResponse.model_validate(check_in)
