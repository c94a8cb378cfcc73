"""Export, import and wipe of all tracker data."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Response

from flare.dependencies import Journal
from flare.models.base import ErrorDetail
from flare.models.tracking import ImportResult
from flare.tracking.errors import ImportFormatError

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/export")
async def export_data(journal: Journal) -> Response:
    """Download everything as indented JSON."""
    return Response(
        content=journal.export_json(),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{journal.export_filename()}"'
        },
    )


@router.post(
    "/import",
    response_model=ImportResult,
    responses={422: {"model": ErrorDetail}},
)
async def import_data(journal: Journal, document: dict[str, Any] = Body(...)) -> Any:
    """Replace all data with a previously exported document."""
    try:
        return journal.import_data(document)
    except ImportFormatError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("", status_code=204)
async def clear_data(journal: Journal) -> None:
    journal.clear()
