"""Fakes for the client layer: an in-memory REST backend and a scriptable socket."""
from __future__ import annotations

import asyncio
import itertools
import json
import re
from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

from travel_service.client.api import TravelApiClient

BASE_URL = "http://travel.test"

_GROUP_MESSAGES = re.compile(r"^/api/groups/(\d+)/messages$")
_TRIP_STATUS = re.compile(r"^/api/trips/(\d+)/check-in-status$")
_USER_CHECK_IN = re.compile(r"^/api/trips/(\d+)/check-ins/user/(\d+)$")
_TRIP_CHECK_INS = re.compile(r"^/api/trips/(\d+)/check-ins$")


class FakeBackend:
    """Just enough of the REST surface for the client; caller is always ``user_id``."""

    def __init__(self, user_id: int = 42) -> None:
        self.user_id = user_id
        self.users: list[dict[str, Any]] = []
        self.messages: dict[int, list[dict[str, Any]]] = {}
        self.check_ins: dict[int, dict[int, dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], tuple[int, Any]] = {}
        self.garbled: set[tuple[str, str]] = set()
        self.gate: asyncio.Event | None = None
        self._ids = itertools.count(1)

    def fail(self, method: str, path: str, status: int = 500, body: Any = None) -> None:
        self.failures[(method, path)] = (status, body if body is not None else {"detail": "Server exploded"})

    def garble(self, method: str, path: str) -> None:
        """Answer 200 with a body that is not JSON."""
        self.garbled.add((method, path))

    def add_message(self, group_id: int, user_id: int, content: str, created_at: str | None = None) -> dict:
        msg = {
            "id": next(self._ids),
            "groupId": group_id,
            "userId": user_id,
            "content": content,
            "createdAt": created_at or datetime.now(timezone.utc).isoformat(),
        }
        self.messages.setdefault(group_id, []).append(msg)
        return msg

    def set_check_in(self, trip_id: int, user_id: int, status: Any) -> None:
        self.check_ins.setdefault(trip_id, {})[user_id] = {
            "id": next(self._ids),
            "tripId": trip_id,
            "userId": user_id,
            "status": status,
            "notes": None,
            "checkedInAt": datetime.now(timezone.utc).isoformat(),
        }

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None and request.method == "POST":
            await self.gate.wait()

        path = request.url.path
        failure = self.failures.get((request.method, path))
        if failure is not None:
            status, body = failure
            return httpx.Response(status, json=body)
        if (request.method, path) in self.garbled:
            return httpx.Response(200, text="<html>gateway page</html>")

        if path == "/api/users":
            return httpx.Response(200, json=self.users)

        if m := _GROUP_MESSAGES.match(path):
            group_id = int(m.group(1))
            if request.method == "GET":
                return httpx.Response(200, json=self.messages.get(group_id, []))
            body = json.loads(request.content)
            msg = self.add_message(group_id, self.user_id, body["content"])
            return httpx.Response(201, json=msg)

        if m := _TRIP_STATUS.match(path):
            trip_id = int(m.group(1))
            rows = self.check_ins.get(trip_id, {})
            return httpx.Response(200, json={
                "checkInStatuses": [{"userId": uid, "status": c["status"]} for uid, c in rows.items()],
                "tripInfo": {"id": trip_id, "name": "Drive to the lake", "status": "planning",
                             "groupId": 10, "startDate": None, "endDate": None},
            })

        if m := _USER_CHECK_IN.match(path):
            row = self.check_ins.get(int(m.group(1)), {}).get(int(m.group(2)))
            if row is None:
                return httpx.Response(404, json={"detail": "Check-in not found"})
            return httpx.Response(200, json=row)

        if m := _TRIP_CHECK_INS.match(path):
            trip_id = int(m.group(1))
            body = json.loads(request.content)
            created = self.user_id not in self.check_ins.get(trip_id, {})
            self.set_check_in(trip_id, self.user_id, body["status"])
            row = self.check_ins[trip_id][self.user_id]
            row["notes"] = body.get("notes")
            return httpx.Response(201 if created else 200, json=row)

        return httpx.Response(404, json={"detail": "Not Found"})


class FakeSocket:
    """Stands in for a websockets client connection."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self._inbox: asyncio.Queue[str | None] = asyncio.Queue()

    @property
    def sent_json(self) -> list[Any]:
        return [json.loads(raw) for raw in self.sent]

    async def send(self, raw: str) -> None:
        if self.closed:
            raise OSError("socket closed")
        self.sent.append(raw)

    async def close(self) -> None:
        self.closed = True
        self._inbox.put_nowait(None)

    def push(self, raw: str) -> None:
        self._inbox.put_nowait(raw)

    def drop(self) -> None:
        """Server-side close."""
        self._inbox.put_nowait(None)

    def __aiter__(self) -> FakeSocket:
        return self

    async def __anext__(self) -> str:
        raw = await self._inbox.get()
        if raw is None:
            self.closed = True
            raise StopAsyncIteration
        return raw


class FakeConnector:
    def __init__(self, fail_times: int = 0) -> None:
        self.fail_times = fail_times
        self.urls: list[str] = []
        self.sockets: list[FakeSocket] = []

    async def __call__(self, url: str) -> FakeSocket:
        self.urls.append(url)
        if self.fail_times > 0:
            self.fail_times -= 1
            raise OSError("connection refused")
        sock = FakeSocket()
        self.sockets.append(sock)
        return sock


class RecordingSleep:
    """Records requested delays; yields once, or parks forever after ``limit`` calls."""

    def __init__(self, limit: int | None = None) -> None:
        self.delays: list[float] = []
        self._limit = limit

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self._limit is not None and len(self.delays) >= self._limit:
            await asyncio.Event().wait()
        await asyncio.sleep(0)


async def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def api(backend):
    client = TravelApiClient(BASE_URL, transport=backend.transport())
    yield client
    await client.aclose()
