from __future__ import annotations

from fastapi import APIRouter

from travel_service.api.deps import CurrentPrincipal, UoWDep
from travel_service.api.v1.schemas.message import MessageResponse, SendMessageRequest
from travel_service.application.dto.message import SendMessageDTO
from travel_service.services import message_service

router = APIRouter(prefix="/api/groups", tags=["messages"])


@router.get("/{group_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    group_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[MessageResponse]:
    messages = await message_service.list_messages(group_id, principal, uow)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post("/{group_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    group_id: int,
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    msg = await message_service.send_message(
        SendMessageDTO(group_id=group_id, content=body.content),
        principal,
        uow,
    )
    return MessageResponse.model_validate(msg)
