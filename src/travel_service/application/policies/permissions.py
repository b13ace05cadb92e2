from __future__ import annotations

from travel_service.application.dto.principal import Principal
from travel_service.application.exceptions import ForbiddenError, NotFoundError
from travel_service.application.repositories.group import GroupReader
from travel_service.domain.entities.group import Group
from travel_service.domain.entities.trip import Trip


async def assert_group_member(
    principal: Principal,
    group: Group | None,
    groups: GroupReader,
) -> Group:
    """Raise if the group doesn't exist or principal is not a member."""
    if group is None:
        raise NotFoundError("Group not found")

    if principal.is_admin:
        return group

    if not await groups.is_member(group.id, principal.user_id):
        raise ForbiddenError("Not a member of this group")

    return group


async def assert_trip_access(
    principal: Principal,
    trip: Trip | None,
    groups: GroupReader,
) -> Trip:
    """Trip creator, admins and members of the trip's group may see a trip."""
    if trip is None:
        raise NotFoundError("Trip not found")

    if principal.is_admin or trip.created_by == principal.user_id:
        return trip

    if trip.group_id is not None and await groups.is_member(trip.group_id, principal.user_id):
        return trip

    raise ForbiddenError("You don't have access to this trip")
