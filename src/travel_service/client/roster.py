"""userId -> display name and initials, from the /api/users roster."""
from __future__ import annotations

from typing import Any, Iterable

UNKNOWN_USER = "Unknown User"


class Roster:
    def __init__(self, users: Iterable[dict[str, Any]] = ()) -> None:
        self._users = {u["id"]: u for u in users if "id" in u}

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)

    def display_name(self, user_id: int, current_user_id: int | None = None) -> str:
        if current_user_id is not None and user_id == current_user_id:
            return "You"
        user = self._users.get(user_id)
        if user is None:
            return UNKNOWN_USER
        return user.get("displayName") or user.get("username") or UNKNOWN_USER

    def initials(self, user_id: int) -> str:
        user = self._users.get(user_id) or {}
        return initials(user.get("displayName") or user.get("username") or "")


def initials(name: str) -> str:
    words = name.split()
    if not words:
        return "?"
    return "".join(w[0] for w in words[:2]).upper()
