"""Per-run record of laboratory slots that are already committed."""

from __future__ import annotations

from collections import defaultdict

from labsched.domain.models import TimeSlot


class OccupancyIndex:
    def __init__(self) -> None:
        self._occupied: defaultdict[int, set[TimeSlot]] = defaultdict(set)

    def is_available(self, lab_id: int, slot: TimeSlot) -> bool:
        occupied = self._occupied.get(lab_id)
        if occupied is None:
            return True
        return slot not in occupied

    def mark_occupied(self, lab_id: int, slot: TimeSlot) -> None:
        self._occupied[lab_id].add(slot)

    def occupied_slots(self, lab_id: int) -> frozenset[TimeSlot]:
        return frozenset(self._occupied.get(lab_id, ()))

    def reset(self) -> None:
        self._occupied.clear()
