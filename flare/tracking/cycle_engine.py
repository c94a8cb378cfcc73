"""Menstrual cycle day and phase inference.

Works from the user's marked period intervals only:

- cycle day is counted from the most recent period start on or before a
  date (day 1 = the start itself), whether or not that period has ended;
- any date inside a period is Menstrual;
- every other date is classified by its cycle day against fixed thresholds
  (14 / 16 / 28 by default).

There is no prediction and no learning from past cycle lengths.  A period
that is never closed keeps the day count growing until the next start is
marked.
"""

from __future__ import annotations

import logging
import math
from datetime import date

from flare.models.tracking import CycleData, CyclePhase, CycleSummary, PeriodInterval
from flare.tracking.config_loader import PhaseThresholds
from flare.tracking.errors import NoOpenPeriodError

logger = logging.getLogger("flare.tracking.cycle_engine")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class CycleEngine:
    """Owns the period intervals and answers cycle questions about any date.

    Usage::

        engine = CycleEngine()
        engine.toggle_start(date(2024, 1, 1))
        engine.cycle_day(date(2024, 1, 15))     # 15
        engine.cycle_phase(date(2024, 1, 15))   # CyclePhase.ovulation
    """

    def __init__(
        self,
        periods: list[PeriodInterval] | None = None,
        thresholds: PhaseThresholds | None = None,
    ) -> None:
        self._periods: list[PeriodInterval] = sorted(
            (p.model_copy() for p in periods or []), key=lambda p: p.start
        )
        self._thresholds = thresholds or PhaseThresholds()

    @classmethod
    def from_cycle_data(
        cls, data: CycleData, thresholds: PhaseThresholds | None = None
    ) -> CycleEngine:
        return cls(data.periods, thresholds)

    @property
    def periods(self) -> list[PeriodInterval]:
        """Copies of the intervals, sorted by start."""
        return [p.model_copy() for p in self._periods]

    def to_cycle_data(self) -> CycleData:
        return CycleData(periods=self.periods)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def toggle_start(self, day: date) -> bool:
        """Mark or unmark ``day`` as a period start.

        Returns:
            True if a start was added, False if an existing one was removed.
        """
        if any(p.start == day for p in self._periods):
            self._periods = [p for p in self._periods if p.start != day]
            logger.info("Period start removed: %s", day)
            return False

        self._periods.append(PeriodInterval(start=day))
        self._periods.sort(key=lambda p: p.start)
        logger.info("Period start marked: %s", day)
        return True

    def toggle_end(self, day: date) -> bool:
        """Mark or unmark ``day`` as the end of the open period covering it.

        The open period is the most recent one with no end that starts on or
        before ``day``.

        Returns:
            True if the end is now set, False if it was cleared.

        Raises:
            NoOpenPeriodError: If no open period qualifies.  Nothing changes.
        """
        open_period = self._open_period(day)
        if open_period is None:
            logger.info("No open period for end mark on %s", day)
            raise NoOpenPeriodError(day)

        if open_period.end == day:
            open_period.end = None
            logger.info("Period end removed: %s (start %s)", day, open_period.start)
            return False

        open_period.end = day
        logger.info("Period end marked: %s (start %s)", day, open_period.start)
        return True

    def _open_period(self, day: date) -> PeriodInterval | None:
        candidates = [p for p in self._periods if p.end is None and p.start <= day]
        if not candidates:
            return None
        return max(candidates, key=lambda p: p.start)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_in_period(self, day: date) -> bool:
        return any(
            p.start <= day and (p.end is None or p.end >= day) for p in self._periods
        )

    def is_period_start(self, day: date) -> bool:
        return any(p.start == day for p in self._periods)

    def is_period_end(self, day: date) -> bool:
        return any(p.end == day for p in self._periods)

    def latest_start(self, day: date) -> date | None:
        """Most recent period start on or before ``day``."""
        starts = [p.start for p in self._periods if p.start <= day]
        return max(starts) if starts else None

    def cycle_day(self, day: date) -> int | None:
        """1-indexed day within the cycle, or None before the first start."""
        start = self.latest_start(day)
        if start is None:
            return None
        return (day - start).days + 1

    def cycle_phase(self, day: date) -> CyclePhase:
        """Classify ``day``.

        Menstrual wins over the day-count thresholds whenever the date is
        inside a marked period.
        """
        cycle_day = self.cycle_day(day)
        if cycle_day is None:
            return CyclePhase.unknown
        if self.is_in_period(day):
            return CyclePhase.menstrual

        t = self._thresholds
        if cycle_day <= t.follicular_max_day:
            return CyclePhase.follicular
        if cycle_day <= t.ovulation_max_day:
            return CyclePhase.ovulation
        if cycle_day <= t.luteal_max_day:
            return CyclePhase.luteal
        return CyclePhase.late_luteal

    # ------------------------------------------------------------------
    # History statistics
    # ------------------------------------------------------------------

    def period_lengths(self) -> list[int]:
        """Inclusive day counts of every period that has an end."""
        return [(p.end - p.start).days + 1 for p in self._periods if p.end is not None]

    def cycle_lengths(self) -> list[int]:
        """Days between the starts of consecutive completed periods."""
        completed = [p for p in self._periods if p.end is not None]
        return [
            (curr.start - prev.start).days
            for prev, curr in zip(completed, completed[1:])
        ]

    def summary(self, today: date) -> CycleSummary:
        period_lengths = self.period_lengths()
        cycle_lengths = self.cycle_lengths()
        return CycleSummary(
            total_periods=len(self._periods),
            avg_period_length=(
                _round_half_up(sum(period_lengths) / len(period_lengths))
                if period_lengths else None
            ),
            avg_cycle_length=(
                _round_half_up(sum(cycle_lengths) / len(cycle_lengths))
                if cycle_lengths else None
            ),
            current_cycle_day=self.cycle_day(today),
            current_phase=self.cycle_phase(today),
        )
