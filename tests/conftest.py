"""Conftest: an in-process fake of the REST event store.

The fake mirrors the store contract the client talks to: list, create,
bulk create (with a shared series id), update, bulk update, delete and bulk
delete. It runs on ``aiohttp.test_utils.TestServer`` so the client exercises
a real HTTP round-trip.
"""

from __future__ import annotations

import itertools
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from repeat_calendar import EventStoreClient


# --------------------------------------------------------------------------- #
#  Fake store
# --------------------------------------------------------------------------- #


class FakeEventStore:
    """In-memory event store speaking the camelCase JSON wire format.

    Attributes:
        events: Stored events, in insertion order.
        requests: ``(method, path, body)`` for every request received.
        fail_with: If set, every request answers with this HTTP status.
    """

    def __init__(self, events: list[dict[str, Any]] | None = None) -> None:
        self.events: list[dict[str, Any]] = [dict(e) for e in events or ()]
        self.requests: list[tuple[str, str, Any]] = []
        self.fail_with: int | None = None
        self.retry_after: str | None = None
        self._ids = itertools.count(len(self.events) + 1)

    def make_app(self) -> web.Application:
        app = web.Application(middlewares=[self._record])
        app.router.add_get("/api/events", self._list)
        app.router.add_post("/api/events", self._create)
        app.router.add_put("/api/events/{id}", self._update)
        app.router.add_delete("/api/events/{id}", self._delete)
        app.router.add_post("/api/events-list", self._create_many)
        app.router.add_put("/api/events-list", self._update_many)
        app.router.add_delete("/api/events-list", self._delete_many)
        return app

    def find(self, event_id: str) -> dict[str, Any] | None:
        return next((e for e in self.events if e["id"] == event_id), None)

    @web.middleware
    async def _record(self, request: web.Request, handler: Any) -> web.StreamResponse:
        body = await request.json() if request.can_read_body else None
        self.requests.append((request.method, request.path, body))
        if self.fail_with == 429:
            headers = {"Retry-After": self.retry_after} if self.retry_after else None
            return web.Response(status=429, headers=headers)
        if self.fail_with is not None:
            return web.Response(status=self.fail_with, text="store failure")
        return await handler(request)

    def _next_id(self) -> str:
        return str(next(self._ids))

    async def _list(self, request: web.Request) -> web.Response:
        return web.json_response({"events": self.events})

    async def _create(self, request: web.Request) -> web.Response:
        event = {**await request.json(), "id": self._next_id()}
        self.events.append(event)
        return web.json_response(event, status=201)

    async def _create_many(self, request: web.Request) -> web.Response:
        payload = await request.json()
        series_id = self._next_id()
        created = []
        for event in payload["events"]:
            repeat = dict(event.get("repeat") or {})
            if repeat.get("type", "none") != "none":
                repeat["id"] = series_id
            created.append({**event, "id": self._next_id(), "repeat": repeat})
        self.events.extend(created)
        return web.json_response(created, status=201)

    async def _update(self, request: web.Request) -> web.Response:
        event = self.find(request.match_info["id"])
        if event is None:
            return web.Response(status=404)
        event.update(await request.json())
        return web.json_response(event)

    async def _update_many(self, request: web.Request) -> web.Response:
        payload = await request.json()
        for change in payload["events"]:
            event = self.find(change["id"])
            if event is not None:
                event.update(change)
        return web.json_response(self.events)

    async def _delete(self, request: web.Request) -> web.Response:
        event = self.find(request.match_info["id"])
        if event is None:
            return web.Response(status=404)
        self.events.remove(event)
        return web.Response(status=204)

    async def _delete_many(self, request: web.Request) -> web.Response:
        ids = set((await request.json())["eventIds"])
        self.events = [e for e in self.events if e["id"] not in ids]
        return web.Response(status=204)


def stored_event(event_id: str, **overrides: Any) -> dict[str, Any]:
    """A wire-format event as the store would hold it."""
    event: dict[str, Any] = {
        "id": event_id,
        "title": "Team meeting",
        "date": "2025-10-15",
        "startTime": "09:00",
        "endTime": "10:00",
        "description": "Weekly team sync",
        "location": "Room B",
        "category": "Work",
        "repeat": {"type": "none", "interval": 0},
        "notificationTime": 10,
    }
    event.update(overrides)
    return event


# --------------------------------------------------------------------------- #
#  Fixtures
# --------------------------------------------------------------------------- #


@pytest.fixture
def store() -> FakeEventStore:
    return FakeEventStore(
        [
            stored_event("1"),
            stored_event(
                "2",
                title="Lunch",
                date="2025-10-16",
                startTime="12:00",
                endTime="13:00",
                description="",
                location="Cafeteria",
                category="Personal",
            ),
        ]
    )


@pytest_asyncio.fixture
async def store_url(store: FakeEventStore):
    server = TestServer(store.make_app())
    await server.start_server()
    try:
        yield f"http://{server.host}:{server.port}"
    finally:
        await server.close()


@pytest_asyncio.fixture
async def client(store_url: str):
    api = EventStoreClient(store_url)
    try:
        yield api
    finally:
        await api.async_close()
