"""Month calendar endpoint: per-day period / symptom / phase flags."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Path

from flare.dependencies import Journal
from flare.models.tracking import CalendarMonth

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/{year}/{month}", response_model=CalendarMonth)
async def get_month(
    journal: Journal,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
) -> Any:
    return journal.calendar_month(year, month)
