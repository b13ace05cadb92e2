from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from travel_service.application.dto.check_in import SubmitCheckInDTO
from travel_service.application.dto.principal import Principal
from travel_service.application.exceptions import NotFoundError
from travel_service.application.policies.permissions import assert_trip_access
from travel_service.application.uow import UnitOfWork
from travel_service.domain.entities.check_in import CheckIn
from travel_service.domain.entities.trip import Trip
from travel_service.domain.events.check_in_updated import CheckInUpdated
from travel_service.domain.value_objects.enums import EventType

UNKNOWN_STATUS = "unknown"


async def submit_check_in(
    dto: SubmitCheckInDTO,
    principal: Principal,
    uow: UnitOfWork,
) -> tuple[CheckIn, bool]:
    """Create or update the caller's check-in for a trip.

    Returns (check_in, created). A second submission for the same
    (trip, user) pair updates the existing record.
    """
    trip = await uow.trips.get_by_id(dto.trip_id)
    trip = await assert_trip_access(principal, trip, uow.groups)

    check_in, created = await uow.check_ins_w.upsert(
        CheckIn(
            id=None,
            trip_id=dto.trip_id,
            user_id=principal.user_id,
            status=dto.status.value,
            notes=dto.notes,
            checked_in_at=datetime.now(timezone.utc),
        )
    )

    event = CheckInUpdated(
        trip_id=check_in.trip_id,
        user_id=check_in.user_id,
        status=check_in.status,
        recipients=await _trip_member_ids(trip, uow),
        created=created,
    )
    await uow.outbox.add(EventType.CHECK_IN_UPDATED, asdict(event))
    await uow.commit()
    return check_in, created


async def get_check_in_status(
    trip_id: int,
    principal: Principal,
    uow: UnitOfWork,
) -> tuple[Trip, list[tuple[int, str]]]:
    """Return the trip and one (user_id, status) pair per checked-in user."""
    trip = await uow.trips.get_by_id(trip_id)
    trip = await assert_trip_access(principal, trip, uow.groups)

    latest: dict[int, str] = {}
    for check_in in await uow.check_ins.list_for_trip(trip_id):
        latest[check_in.user_id] = check_in.status or UNKNOWN_STATUS
    return trip, list(latest.items())


async def get_user_check_in(
    trip_id: int,
    user_id: int,
    principal: Principal,
    uow: UnitOfWork,
) -> CheckIn:
    trip = await uow.trips.get_by_id(trip_id)
    await assert_trip_access(principal, trip, uow.groups)

    check_in = await uow.check_ins.get_for_user(trip_id, user_id)
    if check_in is None:
        raise NotFoundError("Check-in not found")
    return check_in


async def _trip_member_ids(trip: Trip, uow: UnitOfWork) -> list[int]:
    members = {trip.created_by}
    if trip.group_id is not None:
        members.update(await uow.groups.list_member_ids(trip.group_id))
    return sorted(members)
