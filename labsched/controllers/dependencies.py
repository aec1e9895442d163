"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from labsched.services.catalog_service import CatalogService
from labsched.services.scheduling_service import SchedulingService


def get_catalog_service(request: Request) -> CatalogService:
    service = getattr(request.app.state, "catalog_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog service is not initialized",
        )
    return service


def get_scheduling_service(request: Request) -> SchedulingService:
    service = getattr(request.app.state, "scheduling_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scheduling service is not initialized",
        )
    return service
