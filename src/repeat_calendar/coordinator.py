"""Local event cache that ties the store client, expansion and filtering together."""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import date, datetime
from typing import Any

import aiohttp

from ._client import EventStoreClient
from .config import CalendarSettings
from .exceptions import ApiConnectionError, ValidationError
from .filtering import EventFilterEngine
from .models import Event, EventDraft, EventPatch, ViewMode
from .recurrence import RecurrenceEngine

_LOGGER = logging.getLogger(__name__)

_SERIES_LOCKED_FIELDS = frozenset(("id", "date"))
_PATCH_FIELDS = frozenset(f.name for f in fields(EventPatch))


class CalendarCoordinator:
    """Keeps a dict of event_id -> Event in sync with the store.

    Every mutation goes to the store first; the cache is only updated with
    what the store returns, so it never holds ids the store did not assign.
    """

    def __init__(
        self,
        client: EventStoreClient,
        *,
        engine: RecurrenceEngine | None = None,
        filter_engine: EventFilterEngine | None = None,
    ) -> None:
        self._client = client
        self._engine = engine or RecurrenceEngine()
        self._filter = filter_engine or EventFilterEngine()
        self._events: dict[str, Event] = {}

    @classmethod
    def from_settings(
        cls,
        settings: CalendarSettings,
        session: aiohttp.ClientSession | None = None,
    ) -> CalendarCoordinator:
        """Wire a client and an engine from validated settings."""
        return cls(
            EventStoreClient.from_settings(settings, session),
            engine=RecurrenceEngine(default_end_date=settings.default_repeat_end_date),
        )

    @property
    def client(self) -> EventStoreClient:
        return self._client

    @property
    def events(self) -> dict[str, Event]:
        return self._events

    async def async_close(self) -> None:
        await self._client.async_close()

    async def async_refresh(self) -> dict[str, Event]:
        """Replace the cache with the store's current event list."""
        try:
            events = await self._client.async_get_events()
        except ApiConnectionError as err:
            _LOGGER.warning(
                "Event store unreachable, keeping %d cached events: %s",
                len(self._events),
                err,
            )
            raise
        self._events = {event.id: event for event in events}
        _LOGGER.debug("Loaded %d events", len(self._events))
        return self._events

    # ------------------------------------------------------------------ #
    #  Create
    # ------------------------------------------------------------------ #

    async def async_save_event(self, draft: EventDraft) -> list[Event]:
        """Persist a draft, expanding it into a series when it repeats.

        A repeating draft whose expansion is empty (end date before the
        seed date) is stored as a single event.
        """
        drafts = self._engine.expand(draft) if draft.repeat.is_repeating else []
        if not drafts:
            created = [await self._client.async_create_event(draft)]
        else:
            _LOGGER.debug("Creating series of %d events for %r", len(drafts), draft.title)
            created = await self._client.async_create_events(drafts)
        self._merge(created)
        return created

    # ------------------------------------------------------------------ #
    #  Update
    # ------------------------------------------------------------------ #

    async def async_update_event(self, event_id: str, patch: EventPatch) -> Event:
        """Apply a partial update to a single event."""
        event = await self._client.async_update_event(event_id, patch)
        self._merge([event])
        return event

    async def async_update_series(self, series_id: str, **changes: Any) -> list[Event]:
        """Apply the same field changes to every cached member of a series.

        Dates are per-member and cannot be changed this way. A new repeat
        rule keeps the series id, so the members stay grouped.

        Raises:
            ValidationError: If ``changes`` touches ``id`` or ``date``, or
                names a field events do not have.
        """
        locked = _SERIES_LOCKED_FIELDS.intersection(changes)
        if locked:
            raise ValidationError(f"Cannot change {sorted(locked)} across a series")
        unknown = set(changes) - _PATCH_FIELDS
        if unknown:
            raise ValidationError(f"Unknown event fields: {sorted(unknown)}")
        if changes.get("repeat") is not None and changes["repeat"].is_repeating:
            changes["repeat"] = replace(changes["repeat"], id=series_id)
        members = self.series_members(series_id)
        if not members:
            _LOGGER.warning("No cached events for series %s", series_id)
            return []
        patches = [EventPatch(id=member.id, **changes) for member in members]
        updated = await self._client.async_update_events(patches)
        self._merge(updated)
        return [self._events[m.id] for m in members if m.id in self._events]

    # ------------------------------------------------------------------ #
    #  Delete
    # ------------------------------------------------------------------ #

    async def async_delete_event(self, event_id: str) -> None:
        await self._client.async_delete_event(event_id)
        self._events.pop(event_id, None)

    async def async_delete_series(self, series_id: str) -> list[str]:
        """Delete every cached member of a series; returns the deleted ids."""
        ids = [member.id for member in self.series_members(series_id)]
        if not ids:
            _LOGGER.warning("No cached events for series %s", series_id)
            return []
        await self._client.async_delete_events(ids)
        for event_id in ids:
            self._events.pop(event_id, None)
        return ids

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def series_members(self, series_id: str) -> list[Event]:
        """Cached members of a series, ordered by date."""
        members = [e for e in self._events.values() if e.series_id == series_id]
        members.sort(key=lambda e: (e.date, e.start_time))
        return members

    def visible_events(
        self,
        search_term: str,
        reference_date: date | datetime | str,
        view: ViewMode | str | None = None,
    ) -> list[Event]:
        """Cached events matching ``search_term`` in the view around ``reference_date``."""
        return self._filter.filter(
            self._events.values(), search_term, reference_date, view
        )

    def _merge(self, events: list[Event]) -> None:
        for event in events:
            self._events[event.id] = event
