"""Async client for the REST event store."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import aiohttp

from ._serialization import camelize, decamelize
from ._throttle import RequestThrottle
from .config import CalendarSettings
from .const import (
    DEFAULT_THROTTLE_SECONDS,
    EVENT_DETAIL_ENDPOINT,
    EVENTS_ENDPOINT,
    EVENTS_LIST_ENDPOINT,
)
from .exceptions import (
    ApiConnectionError,
    ApiResponseError,
    EventNotFoundError,
    RateLimitError,
)
from .models import Event, EventDraft, EventPatch

_LOGGER = logging.getLogger(__name__)


class EventStoreClient:
    """Async client for the event store's REST API.

    Usage::

        async with aiohttp.ClientSession() as session:
            client = EventStoreClient("http://localhost:3000", session)
            events = await client.async_get_events()

    If no session is provided, the client creates and manages its own.
    The caller is responsible for calling ``async_close()`` when done
    (or use the client as an async context manager).
    """

    def __init__(
        self,
        base_url: str,
        session: aiohttp.ClientSession | None = None,
        *,
        request_interval: float = DEFAULT_THROTTLE_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_session = session is None
        self._session = session or aiohttp.ClientSession()
        self._throttle = RequestThrottle(min_interval=request_interval)

    @classmethod
    def from_settings(
        cls,
        settings: CalendarSettings,
        session: aiohttp.ClientSession | None = None,
    ) -> EventStoreClient:
        """Build a client from validated settings."""
        return cls(
            settings.base_url,
            session,
            request_interval=settings.request_interval,
        )

    async def __aenter__(self) -> EventStoreClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.async_close()

    @property
    def base_url(self) -> str:
        return self._base_url

    async def async_close(self) -> None:
        """Close the HTTP session if the client owns it."""
        if self._owns_session:
            await self._session.close()

    # ------------------------------------------------------------------ #
    #  Single events
    # ------------------------------------------------------------------ #

    async def async_get_events(self) -> list[Event]:
        """Fetch every event in the store."""
        data = await self._request("GET", EVENTS_ENDPOINT)
        return _parse_events(data)

    async def async_create_event(self, draft: EventDraft) -> Event:
        """Persist one draft; the store assigns its id."""
        data = await self._request("POST", EVENTS_ENDPOINT, json_body=draft.to_api_dict())
        return Event.from_api_response(_unwrap_event(data))

    async def async_update_event(self, event_id: str, patch: EventPatch) -> Event:
        """Apply a partial update to one event."""
        url = EVENT_DETAIL_ENDPOINT.format(event_id=event_id)
        data = await self._request("PUT", url, json_body=patch.to_api_dict())
        return Event.from_api_response(_unwrap_event(data))

    async def async_delete_event(self, event_id: str) -> None:
        """Delete one event.

        Raises:
            EventNotFoundError: If the store does not know ``event_id``.
        """
        url = EVENT_DETAIL_ENDPOINT.format(event_id=event_id)
        await self._request("DELETE", url)

    # ------------------------------------------------------------------ #
    #  Bulk (recurring series)
    # ------------------------------------------------------------------ #

    async def async_create_events(self, drafts: Sequence[EventDraft]) -> list[Event]:
        """Persist several drafts in one request.

        The store gives every member whose repeat type is not ``none`` the
        same series id (``repeat.id``).
        """
        if not drafts:
            return []
        body = {"events": [d.to_api_dict() for d in drafts]}
        data = await self._request("POST", EVENTS_LIST_ENDPOINT, json_body=body)
        return _parse_events(data)

    async def async_update_events(self, patches: Sequence[EventPatch]) -> list[Event]:
        """Apply several partial updates in one request.

        Returns whatever the store sends back; the reference store answers
        with its full event list.
        """
        if not patches:
            return []
        body = {"events": [p.to_api_dict(include_id=True) for p in patches]}
        data = await self._request("PUT", EVENTS_LIST_ENDPOINT, json_body=body)
        return _parse_events(data)

    async def async_delete_events(self, event_ids: Sequence[str]) -> None:
        """Delete several events in one request."""
        if not event_ids:
            return
        body = {"event_ids": list(event_ids)}
        await self._request("DELETE", EVENTS_LIST_ENDPOINT, json_body=body)

    # ------------------------------------------------------------------ #
    #  Internal HTTP layer
    # ------------------------------------------------------------------ #

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """Execute a store request with throttling and key conversion.

        Outgoing JSON bodies are camelized; incoming JSON responses are
        decamelized.

        Raises:
            EventNotFoundError: On 404 responses.
            RateLimitError: On 429 responses.
            ApiResponseError: On other non-2xx responses.
            ApiConnectionError: On network errors.
        """
        await self._throttle.acquire(mutating=method != "GET")

        url = f"{self._base_url}{path}"
        kwargs: dict[str, Any] = {}
        if json_body is not None:
            kwargs["json"] = camelize(json_body)

        _LOGGER.debug("%s %s", method, url)
        try:
            async with self._session.request(method, url, **kwargs) as resp:
                if resp.status == 404:
                    raise EventNotFoundError(f"Not found: {method} {path}")

                if resp.status == 429:
                    retry_after = resp.headers.get("Retry-After")
                    raise RateLimitError(
                        retry_after=float(retry_after) if retry_after else None,
                    )

                if resp.status == 204:
                    return None

                if resp.status >= 400:
                    body = await resp.text()
                    raise ApiResponseError(
                        f"API error: HTTP {resp.status} - {body}",
                        status_code=resp.status,
                    )

                data = await resp.json()
                return decamelize(data)

        except aiohttp.ClientError as err:
            raise ApiConnectionError(f"Connection error: {err}") from err


def _unwrap_event(data: Any) -> dict[str, Any]:
    if isinstance(data, dict) and isinstance(data.get("event"), dict):
        return data["event"]
    return data


def _parse_events(data: Any) -> list[Event]:
    raw = data if isinstance(data, list) else (data or {}).get("events", [])
    return [Event.from_api_response(e) for e in raw]
