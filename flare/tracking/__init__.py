"""Flare cycle and symptom tracking core.

Modules:
    cycle_engine       — Cycle day and phase inference from period intervals
    symptom_aggregator — Category, daily and phase severity averages
    journal            — Session object owning the data and its persistence
    config_loader      — Load/validate/hot-reload tracker_config.yaml
    clock              — Injectable "today" providers
    errors             — Domain errors
"""

from flare.tracking.clock import Clock, FixedClock, SystemClock
from flare.tracking.config_loader import TrackerConfig, get_tracker_config
from flare.tracking.cycle_engine import CycleEngine
from flare.tracking.errors import (
    FlareError,
    ImportFormatError,
    NoOpenPeriodError,
    UnknownSymptomError,
)
from flare.tracking.journal import TrackerJournal
from flare.tracking.symptom_aggregator import SymptomAggregator, trailing_dates

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TrackerConfig",
    "get_tracker_config",
    "CycleEngine",
    "SymptomAggregator",
    "trailing_dates",
    "TrackerJournal",
    "FlareError",
    "ImportFormatError",
    "NoOpenPeriodError",
    "UnknownSymptomError",
]
