from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MessageCreated:
    message_id: int
    group_id: int
    user_id: int
    content: str
    created_at: str
    recipients: list[int]
