"""
Clock for checkout timestamps.

Engines never read the time; ``CheckoutService`` stamps each transaction
with ``clock.now()`` from an injected clock, so tests can pin the moment of
sale.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone, tzinfo


class Clock(ABC):
    """Source of the current time for services."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    """Wall-clock time in ``tz`` (UTC unless the till is configured otherwise)."""

    def __init__(self, tz: tzinfo = timezone.utc):
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class DeterministicClock(Clock):
    """
    Pinned clock for tests.

    ``now()`` keeps returning the same instant until ``advance()`` or
    ``set_time()`` moves it. Defaults to 2024-01-01 12:00 UTC.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current

    def set_time(self, moment: datetime) -> None:
        self._current = moment

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)
