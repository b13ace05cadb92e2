from __future__ import annotations

from travel_service.domain.entities.check_in import CheckIn
from travel_service.infrastructure.db.models.check_in import CheckInModel


def model_to_entity(model: CheckInModel) -> CheckIn:
    return CheckIn(
        id=model.id,
        trip_id=model.trip_id,
        user_id=model.user_id,
        status=model.status,
        notes=model.notes,
        checked_in_at=model.checked_in_at,
    )
