from __future__ import annotations

from travel_service.domain.entities.message import Message
from travel_service.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        group_id=model.group_id,
        user_id=model.user_id,
        content=model.content,
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        group_id=entity.group_id,
        user_id=entity.user_id,
        content=entity.content,
        created_at=entity.created_at,
    )
