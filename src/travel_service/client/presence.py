"""Per-trip check-in statuses with an optimistic overlay for the caller's own submit."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from travel_service.client.api import TravelApiClient
from travel_service.client.exceptions import ApiError, ValidationError
from travel_service.client.notifications import Notifier
from travel_service.client.query import (
    PolledQuery,
    QueryCache,
    check_in_status_key,
    my_check_in_key,
)
from travel_service.domain.value_objects.enums import CheckInStatus

NOT_CHECKED_IN = "not-checked-in"
EMPTY_TITLE = "No check-ins recorded yet"
STATUS_REQUIRED_ERROR = "Please select a status"

STATUS_LABELS = {
    CheckInStatus.READY.value: "Ready",
    CheckInStatus.NOT_READY.value: "Not Ready",
    CheckInStatus.MAYBE.value: "Maybe",
    NOT_CHECKED_IN: "Not Checked In",
}


def validate_status(status: Any) -> str:
    if status not in {s.value for s in CheckInStatus}:
        raise ValidationError("status", STATUS_REQUIRED_ERROR)
    return status


def status_label(status: Any) -> str:
    """Display label; anything unrecognised renders as Unknown."""
    if not isinstance(status, str):
        return "Unknown"
    return STATUS_LABELS.get(status, "Unknown")


@dataclass(frozen=True, slots=True)
class StatusEntry:
    user_id: int
    status: str
    label: str


class PresenceStore:
    def __init__(
        self,
        api: TravelApiClient,
        cache: QueryCache,
        notifier: Notifier,
        trip_id: int,
        user_id: int,
        *,
        interval: float = 10.0,
    ) -> None:
        self.trip_id = trip_id
        self.user_id = user_id
        self.field_error: str | None = None
        self.is_pending = False

        self._api = api
        self._cache = cache
        self._notifier = notifier
        self._overlay: str | None = None
        self._confirm_after: int | None = None

        self.statuses: PolledQuery[dict[str, Any]] = cache.get_or_create(
            check_in_status_key(trip_id),
            lambda: api.get_check_in_status(trip_id),
            interval,
        )
        self.mine: PolledQuery[dict[str, Any] | None] = cache.get_or_create(
            my_check_in_key(trip_id, user_id),
            lambda: api.get_user_check_in(trip_id, user_id),
            interval,
        )
        self.mine.subscribe(self._on_mine)

    def start(self) -> None:
        self.statuses.start()
        self.mine.start()

    async def stop(self) -> None:
        await self.statuses.stop()
        await self.mine.stop()

    def _status_payload(self) -> dict[str, Any]:
        data = self.statuses.data
        return data if isinstance(data, dict) else {}

    @property
    def trip_info(self) -> dict[str, Any] | None:
        return self._status_payload().get("tripInfo")

    def list_statuses(self) -> list[StatusEntry]:
        latest: dict[int, Any] = {}
        items = self._status_payload().get("checkInStatuses")
        for item in items if isinstance(items, list) else []:
            if isinstance(item, dict) and "userId" in item:
                latest[item["userId"]] = item.get("status")
        if self._overlay is not None:
            latest[self.user_id] = self._overlay
        return [
            StatusEntry(
                user_id=uid,
                status=status if isinstance(status, str) else "unknown",
                label=status_label(status),
            )
            for uid, status in latest.items()
        ]

    def my_status(self) -> str | None:
        if self._overlay is not None:
            return self._overlay
        mine = self.mine.data
        return mine.get("status") if isinstance(mine, dict) else None

    def member_statuses(self, member_ids: Iterable[int]) -> list[StatusEntry]:
        """Every member, with a not-checked-in entry for those who never submitted."""
        known = {e.user_id: e for e in self.list_statuses()}
        return [
            known.get(uid) or StatusEntry(uid, NOT_CHECKED_IN, status_label(NOT_CHECKED_IN))
            for uid in member_ids
        ]

    def all_ready(self, member_ids: Iterable[int]) -> bool:
        entries = self.member_statuses(member_ids)
        return bool(entries) and all(e.status == CheckInStatus.READY.value for e in entries)

    @property
    def empty_title(self) -> str | None:
        if self.statuses.is_loading or self.list_statuses():
            return None
        return EMPTY_TITLE

    async def submit(self, status: str | None, notes: str | None = None) -> bool:
        try:
            status = validate_status(status)
        except ValidationError as exc:
            self.field_error = exc.detail
            return False
        self.field_error = None
        notes = (notes or "").strip() or None

        self._overlay = status
        self._confirm_after = None
        self.is_pending = True
        try:
            await self._api.submit_check_in(self.trip_id, status, notes)
        except ApiError as exc:
            self._overlay = None
            self._notifier.error("Error", f"Failed to update check-in: {exc.detail}")
            return False
        finally:
            self.is_pending = False

        self._notifier.notify("Check-in updated", f"Your status is now {status_label(status)}.")
        # Overlay stays until a fetch of our own check-in started after the POST succeeds.
        self._confirm_after = self.mine.issued
        await self._cache.invalidate(my_check_in_key(self.trip_id, self.user_id))
        await self._cache.invalidate(check_in_status_key(self.trip_id))
        return True

    def _on_mine(self, query: PolledQuery[Any]) -> None:
        if self._confirm_after is None or query.error is not None:
            return
        if query.applied > self._confirm_after:
            self._overlay = None
            self._confirm_after = None
