"""Greedy two-phase laboratory allocation and run orchestration."""

from __future__ import annotations

from threading import RLock
from typing import Optional, Protocol, Sequence

from labsched.domain.models import LabRequest, Laboratory, ScheduleEntry, ScheduleStats, TimeSlot
from labsched.domain.occupancy import OccupancyIndex
from labsched.domain.slots import SlotSpace, describe_slot
from labsched.repository.data_repository import DataRepository
from labsched.services.stats_service import compute_schedule_stats
from labsched.utils.config import Settings, get_settings
from labsched.utils.logger import get_logger


logger = get_logger(__name__)


class AssignmentStore(Protocol):
    """Persistence operations the engine needs while committing a run."""

    def clear_assignments(self) -> None:
        ...

    def add_assignment(self, request_id: int, lab_id: int, time_slot: TimeSlot) -> bool:
        ...


class AllocationEngine:
    """First-fit allocator: preferred slots first, then the remaining universe.

    Requests are processed in the order supplied and rooms are scanned in the
    order supplied. Committed assignments are never revisited within a run.
    One engine owns one occupancy index, so a single instance must not run
    two schedules at the same time.
    """

    def __init__(self, store: AssignmentStore, slot_space: SlotSpace) -> None:
        self._store = store
        self._slot_space = slot_space
        self._occupancy = OccupancyIndex()

    @property
    def occupancy(self) -> OccupancyIndex:
        return self._occupancy

    def generate_schedule(
        self,
        rooms: Sequence[Laboratory],
        requests: Sequence[LabRequest],
    ) -> int:
        """Allocate every request in order and return how many were placed."""
        if not rooms:
            logger.warning("Schedule generation skipped: no laboratories available")
            return 0
        if not requests:
            logger.info("Schedule generation skipped: no pending requests")
            return 0

        self._occupancy.reset()
        self._store.clear_assignments()
        logger.info(
            "Schedule generation started | laboratories=%s | requests=%s | slots=%s",
            len(rooms),
            len(requests),
            len(self._slot_space),
        )

        success_count = 0
        for request in requests:
            if self.allocate_request(request, rooms):
                success_count += 1

        logger.info(
            "Schedule generation completed | satisfied=%s | total=%s | success_rate=%.2f",
            success_count,
            len(requests),
            success_count * 100.0 / len(requests),
        )
        return success_count

    def allocate_request(self, request: LabRequest, rooms: Sequence[Laboratory]) -> bool:
        for slot in request.preferred_slots:
            if slot in request.excluded_slots:
                continue
            if self._commit_first_fit(request, rooms, slot, phase="preferred"):
                return True

        tried_slots = set(request.preferred_slots)
        for slot in self._slot_space.all_slots():
            if slot in request.excluded_slots or slot in tried_slots:
                continue
            if self._commit_first_fit(request, rooms, slot, phase="fallback"):
                return True

        logger.info(
            "Allocation failed | class_id=%s | teacher=%s | student_count=%s",
            request.class_id,
            request.teacher,
            request.student_count,
        )
        return False

    def _commit_first_fit(
        self,
        request: LabRequest,
        rooms: Sequence[Laboratory],
        slot: TimeSlot,
        *,
        phase: str,
    ) -> bool:
        for room in rooms:
            if room.capacity < request.student_count:
                continue
            if not self._occupancy.is_available(room.lab_id, slot):
                continue
            if not self._store.add_assignment(request.request_id, room.lab_id, slot):
                logger.warning(
                    "Commit rejected by store; trying next option | request_id=%s | lab_id=%s | slot=%s",
                    request.request_id,
                    room.lab_id,
                    describe_slot(slot),
                )
                continue
            # Occupancy only reflects writes that actually landed.
            self._occupancy.mark_occupied(room.lab_id, slot)
            logger.info(
                "Allocation committed | phase=%s | class_id=%s | location=%s | slot=%s",
                phase,
                request.class_id,
                room.location,
                describe_slot(slot),
            )
            return True
        return False


class SchedulingService:
    """Runs the allocation engine against the repository and serves results."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._slot_space = SlotSpace.from_settings(self._settings)
        self._engine = AllocationEngine(store=self._repository, slot_space=self._slot_space)
        self._lock = RLock()

    @property
    def slot_space(self) -> SlotSpace:
        return self._slot_space

    def generate_schedule(self) -> int:
        with self._lock:
            rooms = self._repository.list_laboratories()
            requests = self._repository.list_requests()
            return self._engine.generate_schedule(rooms, requests)

    def get_schedule_stats(self) -> ScheduleStats:
        with self._lock:
            return compute_schedule_stats(
                requests=self._repository.list_requests(),
                assignments=self._repository.list_assignments(),
            )

    def list_schedule(
        self,
        *,
        lab_id: Optional[int] = None,
        class_id: Optional[str] = None,
    ) -> list[ScheduleEntry]:
        """Return the timetable, optionally narrowed to one lab and/or class."""
        with self._lock:
            return self._repository.list_schedule_entries(lab_id=lab_id, class_id=class_id)
