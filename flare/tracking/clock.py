"""Date providers for "today".

Everything that depends on the current date asks a ``Clock`` at call time
instead of calling ``date.today()`` directly, so tests can pin the date.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock dates in local time; timestamps in UTC."""

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Always returns the same date.  ``now()`` is midnight UTC of that date."""

    def __init__(self, today: date) -> None:
        self._today = today

    def today(self) -> date:
        return self._today

    def now(self) -> datetime:
        return datetime(
            self._today.year, self._today.month, self._today.day, tzinfo=timezone.utc
        )

    def advance(self, days: int = 1) -> None:
        self._today = date.fromordinal(self._today.toordinal() + days)
