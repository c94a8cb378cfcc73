"""Pydantic models for daily symptom logs, menstrual periods, and the
derived calendar / insight views."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated

from pydantic import ConfigDict, Field

from flare.models.base import FlareBase, utc_now

Severity = Annotated[int, Field(ge=1, le=5)]
SliderValue = Annotated[int, Field(ge=0, le=5)]


# ---------- Enums ----------

class SymptomCategory(str, Enum):
    endo = "endo"
    ibs = "ibs"


class CyclePhase(str, Enum):
    menstrual = "Menstrual"
    follicular = "Follicular"
    ovulation = "Ovulation"
    luteal = "Luteal"
    late_luteal = "Late Luteal"
    unknown = "Unknown"


# Phases that appear on the phase chart, in display order
CHART_PHASES = [
    CyclePhase.menstrual,
    CyclePhase.follicular,
    CyclePhase.ovulation,
    CyclePhase.luteal,
]


class PeriodMark(str, Enum):
    period_start = "period-start"
    period_end = "period-end"


# ---------- Periods ----------

class PeriodInterval(FlareBase):
    start: date
    end: date | None = None


class CycleData(FlareBase):
    periods: list[PeriodInterval] = Field(default_factory=list)


# ---------- Symptom records ----------

class SymptomRecord(FlareBase):
    """A stored day: only non-zero severities and non-blank notes survive."""

    endo: dict[str, Severity] | None = None
    ibs: dict[str, Severity] | None = None
    notes: str | None = None

    def severities(self, category: SymptomCategory) -> dict[str, int]:
        return getattr(self, category.value) or {}

    def is_empty(self) -> bool:
        return not self.endo and not self.ibs and not self.notes

    def has_blank_field(self) -> bool:
        """True when a field is present but empty, e.g. ``endo: {}``."""
        return any(
            value is not None and not value for value in (self.endo, self.ibs, self.notes)
        )


class DayEntry(FlareBase):
    """The full input state for one day as submitted by the log form.

    Severity 0 means "not reported" and is dropped on save.
    """

    endo: dict[str, SliderValue] = Field(default_factory=dict)
    ibs: dict[str, SliderValue] = Field(default_factory=dict)
    notes: str = ""


class CycleStatus(FlareBase):
    date: date
    cycle_day: int | None = None
    phase: CyclePhase = CyclePhase.unknown
    in_period: bool = False
    is_period_start: bool = False
    is_period_end: bool = False


class DayLog(FlareBase):
    """A day as shown by the log form: every catalog symptom, 0 when unset."""

    date: date
    endo: dict[str, int]
    ibs: dict[str, int]
    notes: str = ""
    has_entry: bool = False
    cycle: CycleStatus


class SaveResult(FlareBase):
    date: date
    saved: bool
    message: str
    record: SymptomRecord | None = None


class ToggleResult(FlareBase):
    date: date
    mark: PeriodMark
    marked: bool
    message: str
    cycle: CycleStatus


# ---------- Calendar ----------

class CalendarDay(FlareBase):
    date: date
    is_today: bool = False
    in_period: bool = False
    is_period_start: bool = False
    is_period_end: bool = False
    has_symptoms: bool = False
    phase: CyclePhase = CyclePhase.unknown


class CalendarMonth(FlareBase):
    year: int
    month: int
    days: list[CalendarDay]


# ---------- Insights ----------

class CycleSummary(FlareBase):
    total_periods: int = 0
    avg_period_length: int | None = None
    avg_cycle_length: int | None = None
    current_cycle_day: int | None = None
    current_phase: CyclePhase = CyclePhase.unknown


class DailyAverage(FlareBase):
    date: date
    endo: float = 0.0
    ibs: float = 0.0


class SymptomTrends(FlareBase):
    start_date: date
    end_date: date
    labels: list[int]
    endo: list[float]
    ibs: list[float]


class PhaseAverage(FlareBase):
    phase: CyclePhase
    endo: float | None = None
    ibs: float | None = None
    endo_days: int = 0
    ibs_days: int = 0


class PhaseChart(FlareBase):
    labels: list[CyclePhase]
    endo: list[float]
    ibs: list[float]
    phases: list[PhaseAverage]


# ---------- Export ----------

class ExportDocument(FlareBase):
    symptoms: dict[date, SymptomRecord] = Field(default_factory=dict)
    cycle: CycleData = Field(default_factory=CycleData)
    export_date: datetime = Field(default_factory=utc_now, alias="exportDate")


class ImportDocument(ExportDocument):
    """An uploaded export. Both data keys are required and unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    symptoms: dict[date, SymptomRecord]
    cycle: CycleData


class ImportResult(FlareBase):
    days_imported: int
    periods_imported: int
