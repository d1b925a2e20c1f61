"""Expansion of a recurrence rule into dated event drafts.

Every frequency runs through the same loop: start at the seed date, emit the
current date if the frequency accepts it, step forward, stop once the date
passes the end bound. Frequencies differ only in how they step and which
candidates they accept:

* daily / weekly step by a fixed number of days and accept everything.
* monthly steps with :class:`~dateutil.relativedelta.relativedelta`, which
  clamps to the last valid day of a shorter month instead of rolling into
  the next one. The clamped day is carried forward, so a series seeded on
  the 31st lands on the 28th from February on.
* yearly re-anchors every step on the origin month and day, and only accepts
  candidates that actually fall on the origin day. A February 29 seed
  therefore only produces leap-year instances.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from .const import DAYS_PER_WEEK
from .exceptions import RecurrenceError
from .models import EventDraft, RepeatRule, RepeatType

_LOGGER = logging.getLogger(__name__)


def _accept_all(candidate: date, origin: date) -> bool:
    return True


def _on_origin_day(candidate: date, origin: date) -> bool:
    return candidate.day == origin.day


def _step_days(current: date, origin: date, interval: int) -> date:
    return current + timedelta(days=interval)


def _step_weeks(current: date, origin: date, interval: int) -> date:
    return current + timedelta(days=DAYS_PER_WEEK * interval)


def _step_months(current: date, origin: date, interval: int) -> date:
    return current + relativedelta(months=interval)


def _step_years(current: date, origin: date, interval: int) -> date:
    # Absolute month/day pin the candidate to the origin; day is clamped.
    return current + relativedelta(years=interval, month=origin.month, day=origin.day)


@dataclass(frozen=True)
class Frequency:
    """Step and acceptance rule for one repeat type.

    Attributes:
        type: The repeat type this frequency implements.
        advance: ``(current, origin, interval) -> next date``. Must return a
            date strictly after ``current`` for ``interval >= 1``.
        accepts: ``(candidate, origin) -> bool``. Rejected candidates are
            skipped but still advanced from.
    """

    type: RepeatType
    advance: Callable[[date, date, int], date]
    accepts: Callable[[date, date], bool] = _accept_all


FREQUENCIES: dict[RepeatType, Frequency] = {
    RepeatType.DAILY: Frequency(RepeatType.DAILY, _step_days),
    RepeatType.WEEKLY: Frequency(RepeatType.WEEKLY, _step_weeks),
    RepeatType.MONTHLY: Frequency(RepeatType.MONTHLY, _step_months),
    RepeatType.YEARLY: Frequency(RepeatType.YEARLY, _step_years, _on_origin_day),
}


def generate_dates(
    seed: date,
    interval: int,
    end_date: date,
    frequency: Frequency,
) -> list[date]:
    """Run the shared expansion loop and return the accepted dates.

    The interval is closed: ``end_date`` itself is included when reached.
    An ``end_date`` before ``seed`` yields an empty list.
    """
    if interval < 1:
        raise RecurrenceError(f"Repeat interval must be at least 1, got {interval}")
    dates: list[date] = []
    current = seed
    while current <= end_date:
        if frequency.accepts(current, seed):
            dates.append(current)
        current = frequency.advance(current, seed, interval)
    return dates


class RecurrenceEngine:
    """Expands a draft's recurrence rule into dated drafts.

    Usage::

        engine = RecurrenceEngine(default_end_date=date(2025, 12, 31))
        drafts = engine.expand(draft)

    ``default_end_date`` bounds rules that carry no end date of their own.
    Without it such rules cannot be expanded.
    """

    def __init__(self, default_end_date: date | None = None) -> None:
        self._default_end_date = default_end_date

    @property
    def default_end_date(self) -> date | None:
        return self._default_end_date

    def resolve_end_date(self, rule: RepeatRule) -> date:
        """Return the rule's own end date, or the configured default.

        Raises:
            RecurrenceError: If neither is available.
        """
        if rule.end_date is not None:
            return rule.end_date
        if self._default_end_date is not None:
            return self._default_end_date
        raise RecurrenceError(
            "Recurrence rule has no end date and no default end date is configured"
        )

    def expand(self, draft: EventDraft) -> list[EventDraft]:
        """Return one draft per occurrence, ordered by date.

        The seed date is included as the first occurrence. Non-repeating and
        unrecognized rule types produce an empty list; the caller keeps the
        original draft as the only instance in that case.
        """
        rule = draft.repeat
        frequency = FREQUENCIES.get(rule.type)
        if frequency is None:
            if rule.is_repeating:
                _LOGGER.debug("Ignoring unrecognized repeat type %r", rule.type)
            return []

        end_date = self.resolve_end_date(rule)
        dates = generate_dates(draft.date, rule.interval, end_date, frequency)
        _LOGGER.debug(
            "Expanded %s rule (interval %d) from %s to %s into %d events",
            frequency.type.value,
            rule.interval,
            draft.date,
            end_date,
            len(dates),
        )
        return [replace(draft, date=d) for d in dates]


def expand_recurrence(
    draft: EventDraft,
    *,
    default_end_date: date | None = None,
) -> list[EventDraft]:
    """Expand ``draft`` with a one-off :class:`RecurrenceEngine`."""
    return RecurrenceEngine(default_end_date=default_end_date).expand(draft)
