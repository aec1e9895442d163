"""HTTP controller layer for schedule generation and timetable queries."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from labsched.controllers.dependencies import get_catalog_service, get_scheduling_service
from labsched.controllers.schemas import (
    GenerateScheduleResponse,
    ScheduleEntryResponse,
    ScheduleStatsResponse,
    SlotOptionResponse,
)
from labsched.services.catalog_service import CatalogService, LaboratoryNotFoundError
from labsched.services.scheduling_service import SchedulingService
from labsched.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post(
    "/generate",
    response_model=GenerateScheduleResponse,
    status_code=status.HTTP_200_OK,
)
async def generate_schedule(
    service: SchedulingService = Depends(get_scheduling_service),
) -> GenerateScheduleResponse:
    """Rebuild the whole timetable from the current laboratories and requests."""
    try:
        satisfied_count = service.generate_schedule()
        stats = service.get_schedule_stats()
        return GenerateScheduleResponse(
            satisfied_count=satisfied_count,
            stats=ScheduleStatsResponse.from_domain(stats),
        )
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected schedule generation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate schedule",
        ) from exc


@router.get(
    "/stats",
    response_model=ScheduleStatsResponse,
    status_code=status.HTTP_200_OK,
)
async def get_schedule_stats(
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleStatsResponse:
    return ScheduleStatsResponse.from_domain(service.get_schedule_stats())


@router.get(
    "/slots",
    response_model=list[SlotOptionResponse],
    status_code=status.HTTP_200_OK,
)
async def list_slots(
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[SlotOptionResponse]:
    """Every schedulable slot, in allocation order, with a display label."""
    return [SlotOptionResponse.from_domain(slot) for slot in service.slot_space.all_slots()]


@router.get(
    "",
    response_model=list[ScheduleEntryResponse],
    status_code=status.HTTP_200_OK,
)
async def list_schedule(
    lab_id: Optional[int] = Query(default=None, gt=0),
    class_id: Optional[str] = Query(default=None, min_length=1),
    service: SchedulingService = Depends(get_scheduling_service),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> list[ScheduleEntryResponse]:
    try:
        if lab_id is not None:
            catalog_service.get_laboratory(lab_id)
        entries = service.list_schedule(
            lab_id=lab_id,
            class_id=class_id.strip() if class_id is not None else None,
        )
        return [ScheduleEntryResponse.from_domain(entry) for entry in entries]
    except LaboratoryNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
