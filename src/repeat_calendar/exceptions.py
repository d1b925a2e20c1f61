"""Exception hierarchy for the repeat-calendar library."""

from __future__ import annotations


class CalendarError(Exception):
    """Base exception for all repeat-calendar errors."""


class ParseError(CalendarError):
    """A date or time string could not be converted."""


class ValidationError(CalendarError):
    """An event payload or recurrence rule failed validation."""


class ConfigurationError(CalendarError):
    """Settings are missing or malformed."""


class RecurrenceError(CalendarError):
    """A recurrence rule cannot be expanded (e.g. it has no end bound)."""


class ApiConnectionError(CalendarError):
    """Event store is unreachable (network error, DNS, timeout)."""


class ApiResponseError(CalendarError):
    """Event store returned an unexpected error response.

    Attributes:
        status_code: HTTP status code, if available.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EventNotFoundError(ApiResponseError):
    """Event store returned 404 for the requested event."""

    def __init__(self, message: str = "Event not found", *, status_code: int = 404) -> None:
        super().__init__(message, status_code=status_code)


class RateLimitError(ApiResponseError):
    """Event store returned 429 Too Many Requests.

    Attributes:
        retry_after: Seconds to wait before retrying, if provided by the server.
    """

    def __init__(
        self,
        message: str = "Rate limited",
        *,
        status_code: int = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after
