"""Symptom severity aggregation for the insights view.

Three views over the date-keyed symptom records:

- the mean severity of one category within one day;
- a fixed-length daily series for the trend chart (0 on days with no data);
- per-phase means for the phase chart, bucketed by the cycle engine.

All means are plain arithmetic means: a day with one symptom at 5 counts the
same as a day with five symptoms averaging 5.
"""

from __future__ import annotations

import logging
import statistics
from datetime import date, timedelta
from typing import Mapping, Protocol

from flare.models.tracking import (
    CHART_PHASES,
    CyclePhase,
    DailyAverage,
    PhaseAverage,
    SymptomCategory,
    SymptomRecord,
)

logger = logging.getLogger("flare.tracking.symptom_aggregator")

CATEGORIES = [SymptomCategory.endo, SymptomCategory.ibs]


class PhaseClassifier(Protocol):
    def cycle_phase(self, day: date) -> CyclePhase: ...


def trailing_dates(end: date, days: int) -> list[date]:
    """``days`` consecutive dates ending on (and including) ``end``, oldest first."""
    return [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


class SymptomAggregator:
    """Compute category, daily and phase averages from symptom records.

    Usage::

        aggregator = SymptomAggregator()
        aggregator.category_average(record, SymptomCategory.endo)   # 3.0
        series = aggregator.daily_averages(records, trailing_dates(today, 30))
        phases = aggregator.phase_averages(records, engine)
    """

    @staticmethod
    def category_average(
        record: SymptomRecord | None, category: SymptomCategory
    ) -> float | None:
        """Mean severity of one category in one record, None if nothing logged."""
        if record is None:
            return None
        values = list(record.severities(category).values())
        if not values:
            return None
        return statistics.mean(values)

    def daily_averages(
        self,
        records: Mapping[date, SymptomRecord],
        dates: list[date],
    ) -> list[DailyAverage]:
        """One entry per requested date, in order; absent categories are 0."""
        series = []
        for day in dates:
            record = records.get(day)
            series.append(
                DailyAverage(
                    date=day,
                    endo=self.category_average(record, SymptomCategory.endo) or 0.0,
                    ibs=self.category_average(record, SymptomCategory.ibs) or 0.0,
                )
            )
        return series

    def phase_averages(
        self,
        records: Mapping[date, SymptomRecord],
        classifier: PhaseClassifier,
    ) -> dict[CyclePhase, PhaseAverage]:
        """Average each category's per-day means within each chart phase.

        Dates whose phase is Unknown or Late Luteal are left out entirely.

        Returns:
            Dict of phase → PhaseAverage for the four chart phases, in chart
            order.  Empty buckets carry None.
        """
        buckets: dict[CyclePhase, dict[SymptomCategory, list[float]]] = {
            phase: {c: [] for c in CATEGORIES} for phase in CHART_PHASES
        }

        skipped = 0
        for day, record in records.items():
            phase = classifier.cycle_phase(day)
            if phase not in buckets:
                skipped += 1
                continue
            for category in CATEGORIES:
                avg = self.category_average(record, category)
                if avg is not None:
                    buckets[phase][category].append(avg)

        if skipped:
            logger.debug("Skipped %d day(s) outside the chart phases", skipped)

        result: dict[CyclePhase, PhaseAverage] = {}
        for phase, per_category in buckets.items():
            endo_vals = per_category[SymptomCategory.endo]
            ibs_vals = per_category[SymptomCategory.ibs]
            result[phase] = PhaseAverage(
                phase=phase,
                endo=statistics.mean(endo_vals) if endo_vals else None,
                ibs=statistics.mean(ibs_vals) if ibs_vals else None,
                endo_days=len(endo_vals),
                ibs_days=len(ibs_vals),
            )
        return result
