"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires all services, registers routers, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from labsched.controllers.catalog_controller import router as catalog_router
from labsched.controllers.schedule_controller import router as schedule_router
from labsched.repository.data_repository import DataRepository
from labsched.services.catalog_service import CatalogService
from labsched.services.scheduling_service import SchedulingService
from labsched.utils.config import Settings, get_settings
from labsched.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    An invalid slot configuration fails here, before any request is served.
    """
    settings = settings or get_settings()

    # --- Repository (SQLite connection factory) ---
    repository = DataRepository(settings)

    # --- Services ---
    scheduling_service = SchedulingService(
        repository=repository,
        settings=settings,
    )
    catalog_service = CatalogService(
        repository=repository,
        settings=settings,
        slot_space=scheduling_service.slot_space,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app, settings)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(catalog_router)
    app.include_router(schedule_router)

    app.state.repository = repository
    app.state.catalog_service = catalog_service
    app.state.scheduling_service = scheduling_service

    return app


def _startup(app: FastAPI, settings: Settings) -> None:
    """Idempotent startup sequence. Safe to re-run on server restarts."""
    repository: DataRepository = app.state.repository

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    if settings.seed_demo_data:
        logger.info("Startup: seeding demo laboratories and requests (skipped if labs exist)")
        repository.seed_demo_data_if_empty()

    logger.info("Startup complete, system ready")


# Module-level app object for uvicorn
app = create_app()
