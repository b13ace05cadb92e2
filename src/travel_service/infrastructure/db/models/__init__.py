"""Import all models so Base.metadata knows every table."""
from travel_service.infrastructure.db.models.check_in import CheckInModel
from travel_service.infrastructure.db.models.group import GroupMemberModel, GroupModel
from travel_service.infrastructure.db.models.message import MessageModel
from travel_service.infrastructure.db.models.outbox import OutboxMessageModel
from travel_service.infrastructure.db.models.trip import TripModel
from travel_service.infrastructure.db.models.user import UserModel

__all__ = [
    "CheckInModel",
    "GroupMemberModel",
    "GroupModel",
    "MessageModel",
    "OutboxMessageModel",
    "TripModel",
    "UserModel",
]
