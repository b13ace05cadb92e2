"""Async REST client for the travel service endpoints the real-time layer reads and writes."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from travel_service.client.exceptions import ApiError

logger = logging.getLogger(__name__)


class TravelApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def set_token(self, token: str | None) -> None:
        if token:
            self._http.headers["Authorization"] = f"Bearer {token}"
        else:
            self._http.headers.pop("Authorization", None)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_users(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/api/users")

    async def list_messages(self, group_id: int) -> list[dict[str, Any]]:
        return await self._request("GET", f"/api/groups/{group_id}/messages")

    async def send_message(self, group_id: int, user_id: int, content: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/api/groups/{group_id}/messages",
            json={"groupId": group_id, "userId": user_id, "content": content},
        )

    async def get_check_in_status(self, trip_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/api/trips/{trip_id}/check-in-status")

    async def get_user_check_in(self, trip_id: int, user_id: int) -> dict[str, Any] | None:
        """The user's check-in for a trip, or None if they never checked in."""
        return await self._request(
            "GET", f"/api/trips/{trip_id}/check-ins/user/{user_id}", ignore_404=True,
        )

    async def submit_check_in(self, trip_id: int, status: str, notes: str | None) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/api/trips/{trip_id}/check-ins",
            json={"status": status, "notes": notes},
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        ignore_404: bool = False,
    ) -> Any:
        try:
            resp = await self._http.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed", method, url, exc_info=True)
            raise ApiError(f"Network error: {exc}") from exc

        if ignore_404 and resp.status_code == 404:
            return None
        if resp.is_error:
            raise ApiError(_error_detail(resp), status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(
                f"Malformed response from {method} {url}", status_code=resp.status_code,
            ) from exc


def _error_detail(resp: httpx.Response) -> str:
    """Best human-readable message from an error response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list) and detail:
            first = detail[0]
            if isinstance(first, dict) and "msg" in first:
                return str(first["msg"])
    return f"{resp.status_code}: {resp.text or resp.reason_phrase or 'Unknown error'}"
