# This project was developed with assistance from AI tools.
"""Injectable time source.

Every time-dependent decision in the engine reads ``clock.now()`` so tests
can pin or advance time deterministically.
"""

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock frozen at a given instant until moved explicitly."""

    def __init__(self, current: datetime):
        self._current = ensure_tz(current)

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = ensure_tz(current)

    def advance(self, **kwargs: float) -> datetime:
        """Move forward by ``timedelta(**kwargs)`` and return the new time."""
        self._current += timedelta(**kwargs)
        return self._current


def ensure_tz(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware (UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt
