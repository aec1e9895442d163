"""Domain models for laboratory scheduling."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class TimeSlot:
    """A schedulable unit: week number, weekday index and half-day period."""

    week: int
    day: int
    period: int


@dataclass(frozen=True)
class Laboratory:
    lab_id: int
    location: str
    capacity: int


@dataclass(frozen=True)
class LabRequest:
    request_id: int
    class_id: str
    student_count: int
    teacher: str
    preferred_slots: tuple[TimeSlot, ...]
    excluded_slots: frozenset[TimeSlot]
    priority: int

    def describe(self) -> str:
        return f"{self.class_id} ({self.teacher})"


@dataclass(frozen=True)
class Assignment:
    assignment_id: int
    request_id: int
    lab_id: int
    time_slot: TimeSlot


@dataclass(frozen=True)
class ScheduleEntry:
    """Assignment joined with its request and laboratory for display."""

    assignment_id: int
    request_id: int
    class_id: str
    teacher: str
    lab_id: int
    location: str
    time_slot: TimeSlot


@dataclass(frozen=True)
class ScheduleStats:
    total_requests: int
    successful_requests: int
    failed_requests: int
    success_rate: float
    failed_classes: list[str]
