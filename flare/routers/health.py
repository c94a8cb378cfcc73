"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from flare.dependencies import AppSettings, Journal

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check(settings: AppSettings, journal: Journal) -> dict:
    """Liveness probe.  Also reports how much data the journal holds."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "storage": settings.storage_backend,
        "days_logged": journal.day_count,
        "periods_tracked": len(journal.engine.periods),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
