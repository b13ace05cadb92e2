from __future__ import annotations

from travel_service.domain.entities.user import User
from travel_service.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        username=model.username,
        display_name=model.display_name,
        email=model.email,
        created_at=model.created_at,
    )
