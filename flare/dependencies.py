"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from flare.config import Settings, get_settings
from flare.tracking.journal import TrackerJournal


def get_journal(request: Request) -> TrackerJournal:
    """Return the journal built by ``create_app`` and kept on app state."""
    journal: TrackerJournal | None = getattr(request.app.state, "journal", None)
    if journal is None:
        raise HTTPException(status_code=503, detail="Tracker not initialized")
    return journal


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


# Annotated shortcuts for route signatures
Journal = Annotated[TrackerJournal, Depends(get_journal)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
