"""Daily symptom log endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException

from flare.dependencies import Journal
from flare.models.base import ErrorDetail
from flare.models.tracking import DayEntry, DayLog, SaveResult
from flare.tracking.errors import UnknownSymptomError

router = APIRouter(prefix="/days", tags=["daily log"])


@router.get("/{day}", response_model=DayLog)
async def get_day(day: date, journal: Journal) -> Any:
    return journal.day_log(day)


@router.put(
    "/{day}",
    response_model=SaveResult,
    responses={422: {"model": ErrorDetail}},
)
async def save_day(day: date, body: DayEntry, journal: Journal) -> Any:
    """Replace the day's record with the submitted form state.

    An all-zero form with blank notes deletes the day.
    """
    try:
        return journal.save_day(day, body)
    except UnknownSymptomError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
