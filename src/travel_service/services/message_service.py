from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from travel_service.application.dto.message import SendMessageDTO
from travel_service.application.dto.principal import Principal
from travel_service.application.exceptions import ValidationError
from travel_service.application.policies.permissions import assert_group_member
from travel_service.application.uow import UnitOfWork
from travel_service.domain.entities.message import Message
from travel_service.domain.events.message_created import MessageCreated
from travel_service.domain.value_objects.enums import EventType


async def send_message(
    dto: SendMessageDTO,
    principal: Principal,
    uow: UnitOfWork,
) -> Message:
    """Persist a chat message and queue a push event for the group.

    The sender is always the authenticated principal, whatever the
    request body claims.
    """
    group = await uow.groups.get_by_id(dto.group_id)
    await assert_group_member(principal, group, uow.groups)

    content = dto.content.strip()
    if not content:
        raise ValidationError("Message cannot be empty")

    msg = await uow.messages_w.create(
        Message(
            id=None,
            group_id=dto.group_id,
            user_id=principal.user_id,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
    )

    recipients = await uow.groups.list_member_ids(dto.group_id)
    event = MessageCreated(
        message_id=msg.id,
        group_id=msg.group_id,
        user_id=msg.user_id,
        content=msg.content,
        created_at=msg.created_at.isoformat(),
        recipients=recipients,
    )
    await uow.outbox.add(EventType.MESSAGE_CREATED, asdict(event))
    await uow.commit()
    return msg


async def list_messages(
    group_id: int,
    principal: Principal,
    uow: UnitOfWork,
) -> list[Message]:
    group = await uow.groups.get_by_id(group_id)
    await assert_group_member(principal, group, uow.groups)
    return await uow.messages.list_for_group(group_id)
