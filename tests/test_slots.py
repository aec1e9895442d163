from __future__ import annotations

from dataclasses import replace

import pytest

from labsched.domain.constraints import SlotSpaceConfig
from labsched.domain.models import TimeSlot
from labsched.domain.slots import SlotSpace, describe_slot, parse_slots, serialize_slots
from labsched.utils.config import get_settings


def _reference_space() -> SlotSpace:
    return SlotSpace(SlotSpaceConfig(first_week=9, last_week=10, days_per_week=5, periods_per_day=2))


def test_all_slots_covers_reference_universe_in_ascending_order():
    slots = _reference_space().all_slots()

    assert len(slots) == 20
    assert slots[0] == TimeSlot(9, 0, 0)
    assert slots[1] == TimeSlot(9, 0, 1)
    assert slots[2] == TimeSlot(9, 1, 0)
    assert slots[-1] == TimeSlot(10, 4, 1)
    assert list(slots) == sorted(slots)
    assert len(set(slots)) == len(slots)


def test_all_slots_is_deterministic():
    assert _reference_space().all_slots() == _reference_space().all_slots()


def test_contains_only_configured_slots():
    space = _reference_space()

    assert space.contains(TimeSlot(10, 4, 1))
    assert not space.contains(TimeSlot(8, 0, 0))
    assert not space.contains(TimeSlot(9, 5, 0))
    assert not space.contains(TimeSlot(9, 0, 2))


def test_from_settings_uses_configured_weeks():
    settings = replace(get_settings(), schedule_first_week=3, schedule_last_week=3)

    space = SlotSpace.from_settings(settings)

    assert len(space) == 10
    assert {slot.week for slot in space.all_slots()} == {3}


def test_time_slot_ordering_is_week_then_day_then_period():
    assert TimeSlot(9, 4, 1) < TimeSlot(10, 0, 0)
    assert TimeSlot(9, 1, 0) < TimeSlot(9, 1, 1)
    assert TimeSlot(9, 0, 1) < TimeSlot(9, 1, 0)
    assert TimeSlot(9, 2, 1) == TimeSlot(9, 2, 1)


def test_slot_text_encoding_preserves_order():
    slots = [TimeSlot(9, 3, 0), TimeSlot(9, 0, 1), TimeSlot(10, 4, 1)]

    encoded = serialize_slots(slots)

    assert encoded == "9,3,0;9,0,1;10,4,1"
    assert parse_slots(encoded) == slots


def test_empty_slot_text_means_no_slots():
    assert serialize_slots([]) == ""
    assert parse_slots("") == []


def test_parse_slots_rejects_malformed_entries():
    with pytest.raises(ValueError):
        parse_slots("9,0")
    with pytest.raises(ValueError):
        parse_slots("9,a,0")


def test_describe_slot_labels():
    assert describe_slot(TimeSlot(9, 0, 0)) == "Week 9 Mon AM"
    assert describe_slot(TimeSlot(10, 4, 1)) == "Week 10 Fri PM"
