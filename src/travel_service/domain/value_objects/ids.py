from __future__ import annotations

from typing import NewType

UserId = NewType("UserId", int)
GroupId = NewType("GroupId", int)
TripId = NewType("TripId", int)
MessageId = NewType("MessageId", int)
