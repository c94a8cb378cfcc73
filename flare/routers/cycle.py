"""Period marking and cycle status endpoints."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from flare.dependencies import Journal
from flare.models.base import ErrorDetail
from flare.models.tracking import CycleStatus, PeriodMark, ToggleResult
from flare.tracking.errors import NoOpenPeriodError

router = APIRouter(prefix="/cycle", tags=["cycle"])
logger = logging.getLogger("flare.routers.cycle")


@router.post(
    "/{day}/toggle",
    response_model=ToggleResult,
    responses={409: {"model": ErrorDetail}},
)
async def toggle_period(
    day: date,
    journal: Journal,
    kind: PeriodMark = Query(...),
) -> Any:
    try:
        return journal.toggle_period(day, kind)
    except NoOpenPeriodError as exc:
        logger.warning("Rejected period end on %s: %s", day, exc)
        raise HTTPException(
            status_code=409, detail="Please mark period start first"
        ) from exc


@router.get("/{day}/status", response_model=CycleStatus)
async def cycle_status(day: date, journal: Journal) -> Any:
    return journal.cycle_status(day)
