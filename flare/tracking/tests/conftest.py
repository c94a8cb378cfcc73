"""Shared fixtures for the tracking core tests."""

from __future__ import annotations

from datetime import date

import pytest

from flare.models.tracking import PeriodInterval, SymptomRecord
from flare.services.store import MemoryStore
from flare.tracking.clock import FixedClock
from flare.tracking.config_loader import TrackerConfig, load_tracker_config
from flare.tracking.cycle_engine import CycleEngine
from flare.tracking.journal import TrackerJournal

# Canonical "today" for journal tests
TODAY = date(2024, 3, 15)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tracker_config() -> TrackerConfig:
    """Load the real bundled tracker config for tests."""
    return load_tracker_config()


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def journal(
    store: MemoryStore, clock: FixedClock, tracker_config: TrackerConfig
) -> TrackerJournal:
    return TrackerJournal(store, clock=clock, config=tracker_config)


@pytest.fixture
def two_cycles() -> list[PeriodInterval]:
    """Two completed periods 28 days apart, plus a third still open."""
    return [
        PeriodInterval(start=date(2024, 1, 1), end=date(2024, 1, 5)),
        PeriodInterval(start=date(2024, 1, 29), end=date(2024, 2, 3)),
        PeriodInterval(start=date(2024, 2, 26)),
    ]


@pytest.fixture
def engine(two_cycles: list[PeriodInterval]) -> CycleEngine:
    return CycleEngine(two_cycles)


@pytest.fixture
def sample_records() -> dict[date, SymptomRecord]:
    """Symptom records landing in several phases of the first cycle."""
    return {
        # Menstrual (day 2)
        date(2024, 1, 2): SymptomRecord(endo={"cramping": 5, "pelvic_pain": 3}, ibs={"bloating": 2}),
        # Follicular (day 8)
        date(2024, 1, 8): SymptomRecord(endo={"fatigue": 2}),
        # Ovulation (day 15)
        date(2024, 1, 15): SymptomRecord(ibs={"diarrhea": 4, "gas": 2}),
        # Luteal (day 20)
        date(2024, 1, 20): SymptomRecord(endo={"back_pain": 4}, ibs={"nausea": 1}),
        # Notes only
        date(2024, 1, 21): SymptomRecord(notes="tired"),
        # Unknown (before any period)
        date(2023, 12, 20): SymptomRecord(endo={"cramping": 5}, ibs={"bloating": 5}),
    }
