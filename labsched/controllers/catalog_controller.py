"""HTTP controller layer for laboratory and request management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from labsched.controllers.dependencies import get_catalog_service
from labsched.controllers.schemas import (
    LabRequestCreateRequest,
    LabRequestResponse,
    LaboratoryCreateRequest,
    LaboratoryResponse,
)
from labsched.services.catalog_service import (
    CatalogService,
    CatalogValidationError,
    LaboratoryNotFoundError,
    RequestNotFoundError,
)
from labsched.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["catalog"])


@router.post(
    "/laboratories",
    response_model=LaboratoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_laboratory(
    payload: LaboratoryCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> LaboratoryResponse:
    try:
        laboratory = service.add_laboratory(
            location=payload.location,
            capacity=payload.capacity,
        )
        return LaboratoryResponse.from_domain(laboratory)
    except CatalogValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected laboratory creation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create laboratory",
        ) from exc


@router.get(
    "/laboratories",
    response_model=list[LaboratoryResponse],
    status_code=status.HTTP_200_OK,
)
async def list_laboratories(
    service: CatalogService = Depends(get_catalog_service),
) -> list[LaboratoryResponse]:
    return [LaboratoryResponse.from_domain(item) for item in service.list_laboratories()]


@router.delete(
    "/laboratories/{lab_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_laboratory(
    lab_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    try:
        service.delete_laboratory(lab_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except LaboratoryNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@router.post(
    "/requests",
    response_model=LabRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_request(
    payload: LabRequestCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> LabRequestResponse:
    """Register a class's lab request; slots are validated against the slot universe."""
    try:
        request = service.add_request(
            class_id=payload.class_id,
            student_count=payload.student_count,
            teacher=payload.teacher,
            preferred_slots=[slot.to_domain() for slot in payload.preferred_slots],
            excluded_slots=[slot.to_domain() for slot in payload.excluded_slots],
            priority=payload.priority,
        )
        return LabRequestResponse.from_domain(request)
    except CatalogValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected request creation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create request",
        ) from exc


@router.get(
    "/requests",
    response_model=list[LabRequestResponse],
    status_code=status.HTTP_200_OK,
)
async def list_requests(
    service: CatalogService = Depends(get_catalog_service),
) -> list[LabRequestResponse]:
    return [LabRequestResponse.from_domain(item) for item in service.list_requests()]


@router.get(
    "/requests/{request_id}",
    response_model=LabRequestResponse,
    status_code=status.HTTP_200_OK,
)
async def get_request(
    request_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> LabRequestResponse:
    try:
        return LabRequestResponse.from_domain(service.get_request(request_id))
    except RequestNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@router.delete(
    "/requests/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_request(
    request_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> Response:
    try:
        service.delete_request(request_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except RequestNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
