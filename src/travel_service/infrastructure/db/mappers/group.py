from __future__ import annotations

from travel_service.domain.entities.group import Group
from travel_service.infrastructure.db.models.group import GroupModel


def model_to_entity(model: GroupModel) -> Group:
    return Group(
        id=model.id,
        name=model.name,
        description=model.description,
        created_by=model.created_by,
        created_at=model.created_at,
    )
