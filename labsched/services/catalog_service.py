"""Validation and management of laboratories and scheduling requests."""

from __future__ import annotations

from typing import Optional, Sequence

from labsched.domain.models import LabRequest, Laboratory, TimeSlot
from labsched.domain.slots import SlotSpace, describe_slot
from labsched.repository.data_repository import DataRepository
from labsched.utils.config import Settings, get_settings
from labsched.utils.logger import get_logger


logger = get_logger(__name__)


class CatalogValidationError(Exception):
    """Raised when laboratory or request input is invalid."""


class LaboratoryNotFoundError(Exception):
    """Raised when a laboratory id does not exist."""


class RequestNotFoundError(Exception):
    """Raised when a request id does not exist."""


class CatalogService:
    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
        slot_space: Optional[SlotSpace] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._slot_space = slot_space or SlotSpace.from_settings(self._settings)

    def add_laboratory(self, *, location: str, capacity: int) -> Laboratory:
        cleaned_location = location.strip()
        if not cleaned_location:
            raise CatalogValidationError("location must not be empty")
        if capacity <= 0:
            raise CatalogValidationError("capacity must be > 0")
        lab_id = self._repository.add_laboratory(cleaned_location, capacity)
        logger.info("Laboratory added | lab_id=%s | capacity=%s", lab_id, capacity)
        return Laboratory(lab_id=lab_id, location=cleaned_location, capacity=capacity)

    def delete_laboratory(self, lab_id: int) -> None:
        if not self._repository.delete_laboratory(lab_id):
            raise LaboratoryNotFoundError(f"Laboratory {lab_id} not found")
        logger.info("Laboratory deleted | lab_id=%s", lab_id)

    def list_laboratories(self) -> list[Laboratory]:
        return self._repository.list_laboratories()

    def get_laboratory(self, lab_id: int) -> Laboratory:
        laboratory = self._repository.get_laboratory(lab_id)
        if laboratory is None:
            raise LaboratoryNotFoundError(f"Laboratory {lab_id} not found")
        return laboratory

    def _validate_slots(self, slots: Sequence[TimeSlot], field_name: str) -> None:
        for slot in slots:
            if not self._slot_space.contains(slot):
                raise CatalogValidationError(
                    f"{field_name} contains {describe_slot(slot)}, which is not a schedulable slot"
                )

    def add_request(
        self,
        *,
        class_id: str,
        student_count: int,
        teacher: str,
        preferred_slots: Sequence[TimeSlot],
        excluded_slots: Sequence[TimeSlot] = (),
        priority: Optional[int] = None,
    ) -> LabRequest:
        """Store a request; a missing priority queues it behind existing ones."""
        cleaned_class_id = class_id.strip()
        cleaned_teacher = teacher.strip()
        if not cleaned_class_id or not cleaned_teacher:
            raise CatalogValidationError("class_id and teacher must not be empty")
        if student_count <= 0:
            raise CatalogValidationError("student_count must be > 0")
        if not preferred_slots:
            raise CatalogValidationError("at least one preferred slot is required")
        self._validate_slots(preferred_slots, "preferred_slots")
        self._validate_slots(excluded_slots, "excluded_slots")

        # Duplicates would only be retried; keep the first occurrence.
        ordered_preferred = tuple(dict.fromkeys(preferred_slots))
        resolved_priority = priority if priority is not None else self._repository.next_priority()
        request_id = self._repository.add_request(
            class_id=cleaned_class_id,
            student_count=student_count,
            teacher=cleaned_teacher,
            preferred_slots=ordered_preferred,
            excluded_slots=excluded_slots,
            priority=resolved_priority,
        )
        logger.info(
            "Request added | request_id=%s | class_id=%s | priority=%s",
            request_id,
            cleaned_class_id,
            resolved_priority,
        )
        return LabRequest(
            request_id=request_id,
            class_id=cleaned_class_id,
            student_count=student_count,
            teacher=cleaned_teacher,
            preferred_slots=ordered_preferred,
            excluded_slots=frozenset(excluded_slots),
            priority=resolved_priority,
        )

    def delete_request(self, request_id: int) -> None:
        if not self._repository.delete_request(request_id):
            raise RequestNotFoundError(f"Request {request_id} not found")
        logger.info("Request deleted | request_id=%s", request_id)

    def list_requests(self) -> list[LabRequest]:
        return self._repository.list_requests()

    def get_request(self, request_id: int) -> LabRequest:
        request = self._repository.get_request(request_id)
        if request is None:
            raise RequestNotFoundError(f"Request {request_id} not found")
        return request
