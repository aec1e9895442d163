"""Time-slot universe and slot text encoding."""

from __future__ import annotations

from typing import Iterable

from labsched.domain.constraints import SlotSpaceConfig, validate_slot_space_config
from labsched.domain.models import TimeSlot
from labsched.utils.config import Settings


DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
PERIOD_NAMES = ("AM", "PM")


class SlotSpace:
    """Finite, ordered universe of slots for one scheduling configuration."""

    def __init__(self, config: SlotSpaceConfig) -> None:
        validate_slot_space_config(config)
        self._config = config
        self._slots = tuple(
            TimeSlot(week=week, day=day, period=period)
            for week in range(config.first_week, config.last_week + 1)
            for day in range(config.days_per_week)
            for period in range(config.periods_per_day)
        )
        self._members = frozenset(self._slots)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SlotSpace":
        return cls(
            SlotSpaceConfig(
                first_week=settings.schedule_first_week,
                last_week=settings.schedule_last_week,
                days_per_week=settings.schedule_days_per_week,
                periods_per_day=settings.schedule_periods_per_day,
            )
        )

    @property
    def config(self) -> SlotSpaceConfig:
        return self._config

    def all_slots(self) -> tuple[TimeSlot, ...]:
        """Return every slot in ascending (week, day, period) order."""
        return self._slots

    def contains(self, slot: TimeSlot) -> bool:
        return slot in self._members

    def __len__(self) -> int:
        return len(self._slots)


def serialize_slots(slots: Iterable[TimeSlot]) -> str:
    """Encode slots as ``week,day,period`` items joined by ``;``."""
    return ";".join(f"{slot.week},{slot.day},{slot.period}" for slot in slots)


def parse_slots(data: str) -> list[TimeSlot]:
    if not data:
        return []
    slots: list[TimeSlot] = []
    for item in data.split(";"):
        parts = item.split(",")
        if len(parts) != 3 or not all(part.strip().lstrip("-").isdigit() for part in parts):
            raise ValueError(f"Malformed time slot entry: {item!r}")
        week, day, period = (int(part) for part in parts)
        slots.append(TimeSlot(week=week, day=day, period=period))
    return slots


def describe_slot(slot: TimeSlot) -> str:
    if 0 <= slot.day < len(DAY_NAMES):
        day_name = DAY_NAMES[slot.day]
    else:
        day_name = f"Day {slot.day + 1}"
    if 0 <= slot.period < len(PERIOD_NAMES):
        period_name = PERIOD_NAMES[slot.period]
    else:
        period_name = f"P{slot.period + 1}"
    return f"Week {slot.week} {day_name} {period_name}"
