"""Insights endpoints: cycle summary, symptom trends, phase averages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from flare.dependencies import Journal
from flare.models.tracking import CycleSummary, PhaseChart, SymptomTrends

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/summary", response_model=CycleSummary)
async def cycle_summary(journal: Journal) -> Any:
    return journal.cycle_summary()


@router.get("/trends", response_model=SymptomTrends)
async def symptom_trends(
    journal: Journal,
    days: int | None = Query(default=None, ge=1, le=366),
) -> Any:
    return journal.symptom_trends(days)


@router.get("/phases", response_model=PhaseChart)
async def phase_averages(journal: Journal) -> Any:
    return journal.phase_chart()
