"""Domain-level validation rules for the scheduling slot universe."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SlotSpaceConfig:
    first_week: int
    last_week: int
    days_per_week: int
    periods_per_day: int


def validate_slot_space_config(config: SlotSpaceConfig) -> None:
    if config.first_week < 1:
        raise ValueError("first_week must be >= 1")
    if config.last_week < config.first_week:
        raise ValueError("last_week must be >= first_week")
    if not 1 <= config.days_per_week <= 7:
        raise ValueError("days_per_week must be between 1 and 7")
    if config.periods_per_day < 1:
        raise ValueError("periods_per_day must be >= 1")
