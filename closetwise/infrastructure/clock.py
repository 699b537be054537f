"""
Clock implementations: wall clock for production, fixed clock for tests.
"""

from datetime import datetime, timedelta, timezone

from closetwise.domain.interfaces.clock_interface import Clock
from closetwise.utils.dates import ensure_utc


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    A clock that only moves when told to.
    
    Example:
        >>> clock = FixedClock(datetime(2024, 5, 1, tzinfo=timezone.utc))
        >>> clock.advance(days=15)
    """

    def __init__(self, current: datetime):
        self._current = ensure_utc(current)

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        """Jump to an absolute instant."""
        self._current = ensure_utc(current)

    def advance(self, **delta) -> datetime:
        """Move forward by a timedelta expressed as keyword arguments."""
        self._current = self._current + timedelta(**delta)
        return self._current
