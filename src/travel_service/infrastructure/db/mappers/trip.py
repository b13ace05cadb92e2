from __future__ import annotations

from travel_service.domain.entities.trip import Trip
from travel_service.infrastructure.db.models.trip import TripModel


def model_to_entity(model: TripModel) -> Trip:
    return Trip(
        id=model.id,
        name=model.name,
        group_id=model.group_id,
        created_by=model.created_by,
        status=model.status,
        start_date=model.start_date,
        end_date=model.end_date,
    )
