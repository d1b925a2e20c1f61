"""Settings for the event-store client and recurrence expansion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

import voluptuous as vol

from .const import (
    CONF_BASE_URL,
    CONF_DEFAULT_REPEAT_END_DATE,
    CONF_REQUEST_INTERVAL,
    DEFAULT_THROTTLE_SECONDS,
)
from .date_utils import to_date
from .exceptions import CalendarError, ConfigurationError


def _end_date(value: Any) -> date | None:
    if value is None:
        return None
    try:
        return to_date(value)
    except CalendarError as err:
        raise vol.Invalid(f"invalid date: {value!r}") from err


SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_BASE_URL): vol.All(str, vol.Length(min=1), vol.Url()),
        vol.Optional(CONF_REQUEST_INTERVAL, default=DEFAULT_THROTTLE_SECONDS): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
        vol.Optional(CONF_DEFAULT_REPEAT_END_DATE, default=None): _end_date,
    }
)


@dataclass(frozen=True)
class CalendarSettings:
    """Validated settings.

    Attributes:
        base_url: Root URL of the event store, e.g. ``http://localhost:3000``.
        request_interval: Minimum seconds between two store writes.
        default_repeat_end_date: End bound for repeat rules that have none.
            ``None`` means such rules are rejected at expansion time.
    """

    base_url: str
    request_interval: float = DEFAULT_THROTTLE_SECONDS
    default_repeat_end_date: date | None = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> CalendarSettings:
        """Validate a raw mapping (e.g. loaded from a config file).

        Raises:
            ConfigurationError: On missing keys or invalid values.
        """
        try:
            clean = SETTINGS_SCHEMA(dict(data))
        except vol.Invalid as err:
            raise ConfigurationError(f"Invalid settings: {err}") from err
        return cls(
            base_url=clean[CONF_BASE_URL].rstrip("/"),
            request_interval=clean[CONF_REQUEST_INTERVAL],
            default_repeat_end_date=clean[CONF_DEFAULT_REPEAT_END_DATE],
        )
