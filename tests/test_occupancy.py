from __future__ import annotations

from labsched.domain.models import TimeSlot
from labsched.domain.occupancy import OccupancyIndex


def test_unknown_lab_is_available_for_every_slot():
    index = OccupancyIndex()

    assert index.is_available(1, TimeSlot(9, 0, 0))
    assert index.is_available(99, TimeSlot(10, 4, 1))


def test_mark_occupied_blocks_only_that_lab_and_slot():
    index = OccupancyIndex()
    index.mark_occupied(1, TimeSlot(9, 0, 0))

    assert not index.is_available(1, TimeSlot(9, 0, 0))
    assert index.is_available(1, TimeSlot(9, 0, 1))
    assert index.is_available(2, TimeSlot(9, 0, 0))


def test_mark_occupied_is_idempotent():
    index = OccupancyIndex()
    index.mark_occupied(1, TimeSlot(9, 0, 0))
    index.mark_occupied(1, TimeSlot(9, 0, 0))

    assert index.occupied_slots(1) == frozenset({TimeSlot(9, 0, 0)})


def test_reset_clears_all_labs():
    index = OccupancyIndex()
    index.mark_occupied(1, TimeSlot(9, 0, 0))
    index.mark_occupied(2, TimeSlot(10, 1, 1))

    index.reset()

    assert index.is_available(1, TimeSlot(9, 0, 0))
    assert index.is_available(2, TimeSlot(10, 1, 1))
    assert index.occupied_slots(1) == frozenset()


def test_availability_check_does_not_create_entries():
    index = OccupancyIndex()
    index.is_available(5, TimeSlot(9, 0, 0))

    assert index.occupied_slots(5) == frozenset()
