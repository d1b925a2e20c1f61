"""Data models for calendar events and their recurrence rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any

import voluptuous as vol

from ._serialization import decamelize
from .date_utils import format_date, parse_date, parse_time, to_date
from .exceptions import ParseError, ValidationError

DEFAULT_NOTIFICATION_MINUTES = 10


class RepeatType(str, enum.Enum):
    """Recurrence frequency. Wire values are the lower-case names."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ViewMode(str, enum.Enum):
    """Calendar view used to pick the visible date range."""

    WEEK = "week"
    MONTH = "month"


def _optional_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    return to_date(value)


REPEAT_SCHEMA = vol.Schema(
    {
        vol.Optional("type", default=RepeatType.NONE.value): vol.All(str, vol.Lower),
        vol.Optional("interval", default=1): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Optional("end_date", default=None): _optional_date,
        vol.Optional("id", default=None): vol.Any(None, vol.Coerce(str)),
    },
    extra=vol.REMOVE_EXTRA,
)

DRAFT_SCHEMA = vol.Schema(
    {
        vol.Required("title"): vol.All(str, vol.Length(min=1)),
        vol.Required("date"): to_date,
        vol.Required("start_time"): parse_time,
        vol.Required("end_time"): parse_time,
        vol.Optional("description", default=""): vol.Any(None, str),
        vol.Optional("location", default=""): vol.Any(None, str),
        vol.Optional("category", default=""): vol.Any(None, str),
        vol.Optional("repeat", default=dict): REPEAT_SCHEMA,
        vol.Optional("notification_time", default=DEFAULT_NOTIFICATION_MINUTES): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class RepeatRule:
    """How a seed event repeats.

    ``interval`` is the step count in the rule's unit and must be at least 1
    for a repeating rule. The store sends ``interval: 0`` for one-off events,
    so a ``none`` rule accepts 0. ``id`` is the series identifier assigned by
    the store; drafts never carry one.

    ``type`` is normally a :class:`RepeatType`; unknown values coming from the
    store are kept as plain strings so that expansion can ignore them.
    """

    type: RepeatType | str = RepeatType.NONE
    interval: int = 1
    end_date: date | None = None
    id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, RepeatType):
            object.__setattr__(self, "type", _parse_repeat_type(self.type))
        if isinstance(self.interval, bool) or not isinstance(self.interval, int):
            raise ValidationError(f"Repeat interval must be an integer, got {self.interval!r}")
        minimum = 1 if self.type in _REPEATING else 0
        if self.interval < minimum:
            raise ValidationError(
                f"Repeat interval must be at least {minimum} for "
                f"{_type_value(self.type)!r} rules, got {self.interval}"
            )

    @property
    def is_repeating(self) -> bool:
        """Whether the rule describes a recurring series."""
        return self.type != RepeatType.NONE

    @classmethod
    def from_api_response(cls, data: dict[str, Any] | None) -> RepeatRule:
        """Construct from a decamelized ``repeat`` object."""
        if not data:
            return cls(interval=0)
        return cls(
            type=_parse_repeat_type(data.get("type")),
            interval=_parse_int(data.get("interval"), "interval", default=0),
            end_date=_optional_date(data.get("end_date")),
            id=str(data["id"]) if data.get("id") is not None else None,
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to a dict for a request body (snake_case)."""
        body: dict[str, Any] = {
            "type": _type_value(self.type),
            "interval": self.interval,
        }
        if self.end_date is not None:
            body["end_date"] = format_date(self.end_date)
        if self.id is not None:
            body["id"] = self.id
        return body


_REPEATING = frozenset(
    (RepeatType.DAILY, RepeatType.WEEKLY, RepeatType.MONTHLY, RepeatType.YEARLY)
)


@dataclass(frozen=True)
class EventDraft:
    """An event that has not been persisted yet.

    Use ``dataclasses.replace()`` to derive modified copies.
    """

    title: str
    date: date
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    description: str = ""
    location: str = ""
    category: str = ""
    repeat: RepeatRule = field(default_factory=RepeatRule)
    notification_time: int = DEFAULT_NOTIFICATION_MINUTES  # minutes before start

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventDraft:
        """Build a draft from form input, validating it first.

        Keys may be camelCase (as sent over the wire) or snake_case.

        Raises:
            ValidationError: On missing fields or an invalid repeat interval.
            ParseError: On malformed date or time strings.
        """
        try:
            clean = DRAFT_SCHEMA(decamelize(data))
        except vol.Invalid as err:
            raise ValidationError(f"Invalid event: {err}") from err
        repeat = clean["repeat"]
        return cls(
            title=clean["title"],
            date=clean["date"],
            start_time=clean["start_time"],
            end_time=clean["end_time"],
            description=clean["description"] or "",
            location=clean["location"] or "",
            category=clean["category"] or "",
            repeat=RepeatRule(
                type=_parse_repeat_type(repeat["type"]),
                interval=repeat["interval"],
                end_date=repeat["end_date"],
            ),
            notification_time=clean["notification_time"],
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to a dict for the request body (snake_case)."""
        return {
            "title": self.title,
            "date": format_date(self.date),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "description": self.description,
            "location": self.location,
            "category": self.category,
            "repeat": self.repeat.to_api_dict(),
            "notification_time": self.notification_time,
        }


@dataclass(frozen=True)
class Event:
    """A persisted event as returned by the store."""

    id: str
    title: str
    date: date
    start_time: str
    end_time: str
    description: str = ""
    location: str = ""
    category: str = ""
    repeat: RepeatRule = field(default_factory=RepeatRule)
    notification_time: int = DEFAULT_NOTIFICATION_MINUTES

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Event:
        """Construct from a decamelized API response dict.

        Raises:
            ParseError: If ``date`` is missing or malformed, or a numeric
                field is not a number.
        """
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            date=parse_date(data.get("date", "")),
            start_time=data.get("start_time") or "",
            end_time=data.get("end_time") or "",
            description=data.get("description") or "",
            location=data.get("location") or "",
            category=data.get("category") or "",
            repeat=RepeatRule.from_api_response(data.get("repeat")),
            notification_time=_parse_int(
                data.get("notification_time"),
                "notification_time",
                default=DEFAULT_NOTIFICATION_MINUTES,
            ),
        )

    @property
    def series_id(self) -> str | None:
        """Identifier shared by all members of a recurring series."""
        return self.repeat.id

    @property
    def is_recurring(self) -> bool:
        """Whether this event belongs to a recurring series."""
        return self.repeat.is_repeating

    def to_draft(self) -> EventDraft:
        """Drop the identity, keeping every other field."""
        return EventDraft(
            title=self.title,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description,
            location=self.location,
            category=self.category,
            repeat=RepeatRule(
                type=self.repeat.type,
                interval=self.repeat.interval,
                end_date=self.repeat.end_date,
            ),
            notification_time=self.notification_time,
        )


@dataclass(frozen=True)
class EventPatch:
    """Partial update for an existing event.

    Fields left as ``None`` are not sent, so the store keeps their value.
    """

    id: str
    title: str | None = None
    date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    description: str | None = None
    location: str | None = None
    category: str | None = None
    repeat: RepeatRule | None = None
    notification_time: int | None = None

    @property
    def changes(self) -> dict[str, Any]:
        """The fields that were set, excluding ``id``."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "id" and getattr(self, f.name) is not None
        }

    def to_api_dict(self, *, include_id: bool = False) -> dict[str, Any]:
        """Convert the set fields to a request body (snake_case)."""
        body: dict[str, Any] = {"id": self.id} if include_id else {}
        for name, value in self.changes.items():
            if name == "date":
                value = format_date(value)
            elif name == "repeat":
                value = value.to_api_dict()
            body[name] = value
        return body


def _type_value(value: RepeatType | str) -> str:
    return value.value if isinstance(value, RepeatType) else str(value)


def _parse_repeat_type(value: Any) -> RepeatType | str:
    """Parse a repeat type, keeping unknown values as plain strings."""
    if value is None or value == "":
        return RepeatType.NONE
    try:
        return RepeatType(str(value).lower())
    except ValueError:
        return str(value)


def _parse_int(value: Any, name: str, *, default: int) -> int:
    """Parse an integer field from a store payload; ``null`` means default."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as err:
        raise ParseError(f"Invalid {name}: {value!r}") from err
