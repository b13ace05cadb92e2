from __future__ import annotations

from enum import StrEnum


class CheckInStatus(StrEnum):
    READY = "ready"
    NOT_READY = "not-ready"
    MAYBE = "maybe"


class TripStatus(StrEnum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class GroupRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class EventType(StrEnum):
    MESSAGE_CREATED = "message.created"
    CHECK_IN_UPDATED = "check_in.updated"
