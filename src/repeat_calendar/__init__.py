"""Calendar event utilities: recurrence expansion, view filtering, store client."""

from .const import __version__
from ._client import EventStoreClient
from .config import CalendarSettings
from .coordinator import CalendarCoordinator
from .date_utils import (
    format_date,
    is_date_in_range,
    month_bounds,
    parse_date,
    week_bounds,
    week_dates,
)
from .exceptions import (
    ApiConnectionError,
    ApiResponseError,
    CalendarError,
    ConfigurationError,
    EventNotFoundError,
    ParseError,
    RateLimitError,
    RecurrenceError,
    ValidationError,
)
from .filtering import EventFilterEngine, get_filtered_events, search_events
from .models import Event, EventDraft, EventPatch, RepeatRule, RepeatType, ViewMode
from .recurrence import RecurrenceEngine, expand_recurrence

__all__ = [
    "__version__",
    "EventStoreClient",
    "CalendarSettings",
    "CalendarCoordinator",
    "format_date",
    "is_date_in_range",
    "month_bounds",
    "parse_date",
    "week_bounds",
    "week_dates",
    "ApiConnectionError",
    "ApiResponseError",
    "CalendarError",
    "ConfigurationError",
    "EventNotFoundError",
    "ParseError",
    "RateLimitError",
    "RecurrenceError",
    "ValidationError",
    "EventFilterEngine",
    "get_filtered_events",
    "search_events",
    "Event",
    "EventDraft",
    "EventPatch",
    "RepeatRule",
    "RepeatType",
    "ViewMode",
    "RecurrenceEngine",
    "expand_recurrence",
]
