"""Spacing for event-store writes."""

from __future__ import annotations

import asyncio
import time

from .const import DEFAULT_THROTTLE_SECONDS


class RequestThrottle:
    """Keeps mutating requests at least ``min_interval`` apart.

    Series edits turn into runs of POST/PUT/DELETE calls against the store;
    those are serialized and spaced. Reads never wait and never push back
    the next write.
    """

    def __init__(self, min_interval: float = DEFAULT_THROTTLE_SECONDS) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self._min_interval = min_interval
        self._last_write: float | None = None
        self._lock = asyncio.Lock()

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def acquire(self, *, mutating: bool = True) -> None:
        """Wait for the write slot; returns immediately for reads."""
        if not mutating or not self._min_interval:
            return
        async with self._lock:
            if self._last_write is not None:
                wait = self._min_interval - (time.monotonic() - self._last_write)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_write = time.monotonic()
