"""Search and date-range filtering of events for the week and month views."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

from .date_utils import is_date_in_range, month_bounds, to_date, week_bounds
from .models import Event, ViewMode

_LOGGER = logging.getLogger(__name__)


def _contains_term(target: str | None, term: str) -> bool:
    return term.lower() in (target or "").lower()


def search_events(events: Iterable[Event], term: str) -> list[Event]:
    """Events whose title, description or location contains ``term``.

    Matching is a case-insensitive substring test. An empty term matches
    every event.
    """
    return [
        event
        for event in events
        if _contains_term(event.title, term)
        or _contains_term(event.description, term)
        or _contains_term(event.location, term)
    ]


def filter_by_date_range(
    events: Iterable[Event],
    start: date | datetime,
    end: date | datetime,
) -> list[Event]:
    """Events dated within ``[start, end]``, both ends included."""
    return [event for event in events if is_date_in_range(event.date, start, end)]


def filter_events_by_week(
    events: Iterable[Event], reference: date | datetime
) -> list[Event]:
    """Events in the Sunday-to-Saturday week containing ``reference``."""
    return filter_by_date_range(events, *week_bounds(reference))


def filter_events_by_month(
    events: Iterable[Event], reference: date | datetime
) -> list[Event]:
    """Events in the calendar month containing ``reference``."""
    return filter_by_date_range(events, *month_bounds(reference))


def get_filtered_events(
    events: Iterable[Event],
    search_term: str,
    reference_date: date | datetime | str,
    view: ViewMode | str,
) -> list[Event]:
    """Apply the search filter, then the view's date range.

    Input order is preserved. An unknown ``view`` skips the date filter and
    returns the search result as is.
    """
    searched = search_events(events, search_term or "")
    reference = to_date(reference_date)

    try:
        mode = ViewMode(view)
    except ValueError:
        _LOGGER.warning("Unknown view mode %r, skipping date filter", view)
        return searched

    if mode is ViewMode.WEEK:
        return filter_events_by_week(searched, reference)
    return filter_events_by_month(searched, reference)


class EventFilterEngine:
    """Object wrapper around :func:`get_filtered_events`.

    Holds a default view so callers that always render the same view do not
    have to repeat it.
    """

    def __init__(self, default_view: ViewMode = ViewMode.MONTH) -> None:
        self._default_view = default_view

    @property
    def default_view(self) -> ViewMode:
        return self._default_view

    def filter(
        self,
        events: Iterable[Event],
        search_term: str,
        reference_date: date | datetime | str,
        view: ViewMode | str | None = None,
    ) -> list[Event]:
        """Return the visible subset of ``events``."""
        return get_filtered_events(
            events,
            search_term,
            reference_date,
            self._default_view if view is None else view,
        )
