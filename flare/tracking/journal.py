"""The tracker session: symptom records + cycle engine + persistence.

``TrackerJournal`` is the single owner of the user's data while the app runs.
It reads both keys from the store once, serves every query from memory, and
writes the affected key back after each mutation.
"""

from __future__ import annotations

import calendar
import json
import logging
from datetime import date
from typing import Any

from pydantic import TypeAdapter, ValidationError

from flare.models.tracking import (
    CHART_PHASES,
    CalendarDay,
    CalendarMonth,
    CycleData,
    CycleStatus,
    CycleSummary,
    DayEntry,
    DayLog,
    ExportDocument,
    ImportDocument,
    ImportResult,
    PeriodMark,
    PhaseChart,
    SaveResult,
    SymptomRecord,
    SymptomTrends,
    ToggleResult,
)
from flare.services.store import CYCLE_KEY, SYMPTOMS_KEY, KeyValueStore
from flare.tracking.clock import Clock, SystemClock
from flare.tracking.config_loader import TrackerConfig, get_tracker_config
from flare.tracking.cycle_engine import CycleEngine
from flare.tracking.errors import ImportFormatError, UnknownSymptomError
from flare.tracking.symptom_aggregator import (
    CATEGORIES,
    SymptomAggregator,
    trailing_dates,
)

logger = logging.getLogger("flare.tracking.journal")

_SymptomMap = TypeAdapter(dict[date, SymptomRecord])

_TOGGLE_MESSAGES = {
    (PeriodMark.period_start, True): "Period start marked",
    (PeriodMark.period_start, False): "Period start removed",
    (PeriodMark.period_end, True): "Period end marked",
    (PeriodMark.period_end, False): "Period end removed",
}


class TrackerJournal:
    """Single-user tracker state with explicit ownership.

    Usage::

        journal = TrackerJournal(MemoryStore(), clock=FixedClock(date(2024, 1, 10)))
        journal.toggle_period(date(2024, 1, 1), PeriodMark.period_start)
        journal.save_day(date(2024, 1, 10), DayEntry(endo={"cramping": 4}))
        journal.cycle_status(date(2024, 1, 10)).phase   # CyclePhase.follicular
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock | None = None,
        config: TrackerConfig | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._config = config or get_tracker_config()
        self._aggregator = SymptomAggregator()
        self._symptoms: dict[date, SymptomRecord] = _SymptomMap.validate_python(
            store.get(SYMPTOMS_KEY) or {}
        )
        self._engine = CycleEngine.from_cycle_data(
            CycleData.model_validate(store.get(CYCLE_KEY) or {"periods": []}),
            self._config.phases,
        )
        logger.info(
            "Journal loaded: %d day(s), %d period(s)",
            len(self._symptoms),
            len(self._engine.periods),
        )

    @property
    def engine(self) -> CycleEngine:
        return self._engine

    @property
    def symptoms(self) -> dict[date, SymptomRecord]:
        return {d: r.model_copy(deep=True) for d, r in self._symptoms.items()}

    @property
    def day_count(self) -> int:
        return len(self._symptoms)

    def today(self) -> date:
        return self._clock.today()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist_symptoms(self) -> None:
        self._store.set(
            SYMPTOMS_KEY,
            {
                d.isoformat(): r.model_dump(mode="json", exclude_none=True)
                for d, r in sorted(self._symptoms.items())
            },
        )

    def _persist_cycle(self) -> None:
        self._store.set(CYCLE_KEY, self._engine.to_cycle_data().model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Daily log
    # ------------------------------------------------------------------

    def day_log(self, day: date) -> DayLog:
        """The log form for ``day``: every catalog symptom, 0 when unset."""
        record = self._symptoms.get(day)
        form: dict[str, dict[str, int]] = {}
        for category in CATEGORIES:
            stored = record.severities(category) if record else {}
            form[category.value] = {
                name: stored.get(name, 0)
                for name in self._config.symptom_names(category.value)
            }
        return DayLog(
            date=day,
            endo=form["endo"],
            ibs=form["ibs"],
            notes=(record.notes or "") if record else "",
            has_entry=record is not None,
            cycle=self.cycle_status(day),
        )

    def build_record(self, entry: DayEntry) -> SymptomRecord | None:
        """Recompute a stored record from the full input state.

        Zero severities are dropped, empty categories are dropped, blank notes
        are dropped.  Returns None when nothing is left.

        Raises:
            UnknownSymptomError: If a symptom is not in the catalog.
        """
        fields: dict[str, Any] = {}
        for category in CATEGORIES:
            submitted: dict[str, int] = getattr(entry, category.value)
            unknown = [
                name for name in submitted
                if not self._config.is_known_symptom(category.value, name)
            ]
            if unknown:
                raise UnknownSymptomError(category.value, unknown)
            reported = {name: value for name, value in submitted.items() if value > 0}
            if reported:
                fields[category.value] = reported

        notes = entry.notes.strip()
        if notes:
            fields["notes"] = notes

        if not fields:
            return None
        return SymptomRecord(**fields)

    def save_day(self, day: date, entry: DayEntry) -> SaveResult:
        """Store the day's record, or delete it when the entry is empty."""
        record = self.build_record(entry)
        if record is None:
            existed = self._symptoms.pop(day, None) is not None
            self._persist_symptoms()
            logger.info("Entry cleared for %s (existed=%s)", day, existed)
            return SaveResult(date=day, saved=False, message="Entry cleared")

        self._symptoms[day] = record
        self._persist_symptoms()
        logger.info("Entry saved for %s", day)
        return SaveResult(date=day, saved=True, message="Entry saved!", record=record)

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def toggle_period(self, day: date, mark: PeriodMark) -> ToggleResult:
        """Toggle a period start or end on ``day`` and persist.

        Raises:
            NoOpenPeriodError: For an end mark with no open period.  Nothing
                is written in that case.
        """
        if mark == PeriodMark.period_start:
            marked = self._engine.toggle_start(day)
        else:
            marked = self._engine.toggle_end(day)
        self._persist_cycle()
        return ToggleResult(
            date=day,
            mark=mark,
            marked=marked,
            message=_TOGGLE_MESSAGES[(mark, marked)],
            cycle=self.cycle_status(day),
        )

    def cycle_status(self, day: date) -> CycleStatus:
        return CycleStatus(
            date=day,
            cycle_day=self._engine.cycle_day(day),
            phase=self._engine.cycle_phase(day),
            in_period=self._engine.is_in_period(day),
            is_period_start=self._engine.is_period_start(day),
            is_period_end=self._engine.is_period_end(day),
        )

    def calendar_month(self, year: int, month: int) -> CalendarMonth:
        """Per-day flags for every day of a month."""
        today = self.today()
        _, days_in_month = calendar.monthrange(year, month)
        days = []
        for n in range(1, days_in_month + 1):
            day = date(year, month, n)
            days.append(
                CalendarDay(
                    date=day,
                    is_today=day == today,
                    in_period=self._engine.is_in_period(day),
                    is_period_start=self._engine.is_period_start(day),
                    is_period_end=self._engine.is_period_end(day),
                    has_symptoms=day in self._symptoms,
                    phase=self._engine.cycle_phase(day),
                )
            )
        return CalendarMonth(year=year, month=month, days=days)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def cycle_summary(self) -> CycleSummary:
        return self._engine.summary(self.today())

    def symptom_trends(self, days: int | None = None) -> SymptomTrends:
        """Trailing daily endo/ibs averages ending today."""
        window = days or self._config.trend_window_days
        dates = trailing_dates(self.today(), window)
        series = self._aggregator.daily_averages(self._symptoms, dates)
        return SymptomTrends(
            start_date=dates[0],
            end_date=dates[-1],
            labels=[d.day for d in dates],
            endo=[point.endo for point in series],
            ibs=[point.ibs for point in series],
        )

    def phase_chart(self) -> PhaseChart:
        averages = self._aggregator.phase_averages(self._symptoms, self._engine)
        return PhaseChart(
            labels=list(CHART_PHASES),
            endo=[averages[p].endo or 0.0 for p in CHART_PHASES],
            ibs=[averages[p].ibs or 0.0 for p in CHART_PHASES],
            phases=[averages[p] for p in CHART_PHASES],
        )

    # ------------------------------------------------------------------
    # Export / import / clear
    # ------------------------------------------------------------------

    def export(self) -> ExportDocument:
        return ExportDocument(
            symptoms=self.symptoms,
            cycle=self._engine.to_cycle_data(),
            export_date=self._clock.now(),
        )

    def export_json(self) -> str:
        """The export document as 2-space indented JSON text."""
        payload = self.export().model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(payload, indent=2)

    def export_filename(self) -> str:
        return f"{self._config.export_prefix}-{self.today().isoformat()}.json"

    def import_data(self, document: dict[str, Any]) -> ImportResult:
        """Replace all data with the contents of an export document.

        Raises:
            ImportFormatError: If the document does not parse, lacks the
                ``symptoms`` or ``cycle`` key, or contains a record that would
                never be stored (empty, or with an empty field) or duplicate
                period starts.  State is unchanged in that case.
        """
        try:
            parsed = ImportDocument.model_validate(document)
        except ValidationError as exc:
            raise ImportFormatError(f"Invalid export document: {exc}") from exc

        empty = [d.isoformat() for d, r in parsed.symptoms.items() if r.is_empty()]
        if empty:
            raise ImportFormatError(f"Empty symptom record(s) for: {', '.join(empty)}")
        blank = [d.isoformat() for d, r in parsed.symptoms.items() if r.has_blank_field()]
        if blank:
            raise ImportFormatError(f"Empty symptom field(s) for: {', '.join(blank)}")
        starts = [p.start for p in parsed.cycle.periods]
        if len(set(starts)) != len(starts):
            raise ImportFormatError("Duplicate period start dates")

        self._symptoms = dict(parsed.symptoms)
        self._engine = CycleEngine.from_cycle_data(parsed.cycle, self._config.phases)
        self._persist_symptoms()
        self._persist_cycle()
        logger.info(
            "Imported %d day(s) and %d period(s)", len(parsed.symptoms), len(starts)
        )
        return ImportResult(days_imported=len(parsed.symptoms), periods_imported=len(starts))

    def clear(self) -> None:
        self._store.clear()
        self._symptoms = {}
        self._engine = CycleEngine(thresholds=self._config.phases)
        logger.warning("All tracker data cleared")
