"""Constants for the repeat-calendar library."""

from typing import Final

__version__ = "0.1.0"

EVENTS_ENDPOINT = "/api/events"
EVENT_DETAIL_ENDPOINT = "/api/events/{event_id}"
EVENTS_LIST_ENDPOINT = "/api/events-list"

DEFAULT_THROTTLE_SECONDS = 0.0

DATE_FORMAT: Final = "%Y-%m-%d"

DAYS_PER_WEEK: Final = 7

CONF_BASE_URL: Final = "base_url"
CONF_REQUEST_INTERVAL: Final = "request_interval"
CONF_DEFAULT_REPEAT_END_DATE: Final = "default_repeat_end_date"
