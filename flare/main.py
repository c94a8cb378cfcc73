"""Flare API — FastAPI application entry point.

Run locally:
    uvicorn flare.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flare.config import Settings, get_settings
from flare.routers import calendar, cycle, data, days, health, insights
from flare.services.store import KeyValueStore, create_store
from flare.tracking.clock import Clock, SystemClock
from flare.tracking.config_loader import get_tracker_config, load_tracker_config
from flare.tracking.journal import TrackerJournal

logger = logging.getLogger("flare")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


# ---------- App factory ----------

def create_app(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    tracker_config = (
        load_tracker_config(settings.tracker_config_path)
        if settings.tracker_config_path
        else get_tracker_config()
    )
    journal = TrackerJournal(
        store if store is not None else create_store(settings),
        clock=clock or SystemClock(),
        config=tracker_config,
    )

    app = FastAPI(
        title="Flare API",
        description=(
            "Personal endo / IBS symptom log with menstrual cycle tracking, "
            "calendar and insights."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.journal = journal
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(days.router, prefix=v1_prefix)
    app.include_router(cycle.router, prefix=v1_prefix)
    app.include_router(calendar.router, prefix=v1_prefix)
    app.include_router(insights.router, prefix=v1_prefix)
    app.include_router(data.router, prefix=v1_prefix)

    logger.info(
        "Flare API v%s ready [%s, storage=%s]",
        settings.app_version,
        settings.environment,
        settings.storage_backend,
    )
    return app


app = create_app()
