"""Request/response DTOs shared by the HTTP controllers."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from labsched.domain.models import LabRequest, Laboratory, ScheduleEntry, ScheduleStats, TimeSlot
from labsched.domain.slots import describe_slot


class TimeSlotPayload(BaseModel):
    week: int = Field(ge=1)
    day: int = Field(ge=0, le=6)
    period: int = Field(ge=0)

    def to_domain(self) -> TimeSlot:
        return TimeSlot(week=self.week, day=self.day, period=self.period)

    @classmethod
    def from_domain(cls, slot: TimeSlot) -> "TimeSlotPayload":
        return cls(week=slot.week, day=slot.day, period=slot.period)


class LaboratoryCreateRequest(BaseModel):
    location: str = Field(min_length=1)
    capacity: int = Field(gt=0)

    @field_validator("location")
    @classmethod
    def validate_location(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("location must not be blank")
        return value.strip()


class LaboratoryResponse(BaseModel):
    lab_id: int = Field(gt=0)
    location: str
    capacity: int = Field(gt=0)

    @classmethod
    def from_domain(cls, laboratory: Laboratory) -> "LaboratoryResponse":
        return cls(
            lab_id=laboratory.lab_id,
            location=laboratory.location,
            capacity=laboratory.capacity,
        )


class LabRequestCreateRequest(BaseModel):
    class_id: str = Field(min_length=1)
    student_count: int = Field(gt=0)
    teacher: str = Field(min_length=1)
    preferred_slots: list[TimeSlotPayload] = Field(min_length=1)
    excluded_slots: list[TimeSlotPayload] = Field(default_factory=list)
    priority: int | None = None

    @field_validator("class_id", "teacher")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be blank")
        return value.strip()


class LabRequestResponse(BaseModel):
    request_id: int = Field(gt=0)
    class_id: str
    student_count: int = Field(gt=0)
    teacher: str
    preferred_slots: list[TimeSlotPayload]
    excluded_slots: list[TimeSlotPayload]
    priority: int

    @classmethod
    def from_domain(cls, request: LabRequest) -> "LabRequestResponse":
        return cls(
            request_id=request.request_id,
            class_id=request.class_id,
            student_count=request.student_count,
            teacher=request.teacher,
            preferred_slots=[TimeSlotPayload.from_domain(slot) for slot in request.preferred_slots],
            excluded_slots=[
                TimeSlotPayload.from_domain(slot) for slot in sorted(request.excluded_slots)
            ],
            priority=request.priority,
        )


class ScheduleEntryResponse(BaseModel):
    assignment_id: int = Field(gt=0)
    request_id: int = Field(gt=0)
    class_id: str
    teacher: str
    lab_id: int = Field(gt=0)
    location: str
    week: int
    day: int
    period: int
    slot_label: str

    @classmethod
    def from_domain(cls, entry: ScheduleEntry) -> "ScheduleEntryResponse":
        return cls(
            assignment_id=entry.assignment_id,
            request_id=entry.request_id,
            class_id=entry.class_id,
            teacher=entry.teacher,
            lab_id=entry.lab_id,
            location=entry.location,
            week=entry.time_slot.week,
            day=entry.time_slot.day,
            period=entry.time_slot.period,
            slot_label=describe_slot(entry.time_slot),
        )


class ScheduleStatsResponse(BaseModel):
    total_requests: int = Field(ge=0)
    successful_requests: int = Field(ge=0)
    failed_requests: int = Field(ge=0)
    success_rate: float = Field(ge=0.0, le=100.0)
    failed_classes: list[str]

    @classmethod
    def from_domain(cls, stats: ScheduleStats) -> "ScheduleStatsResponse":
        return cls(
            total_requests=stats.total_requests,
            successful_requests=stats.successful_requests,
            failed_requests=stats.failed_requests,
            success_rate=round(stats.success_rate, 2),
            failed_classes=list(stats.failed_classes),
        )


class GenerateScheduleResponse(BaseModel):
    satisfied_count: int = Field(ge=0)
    stats: ScheduleStatsResponse


class SlotOptionResponse(BaseModel):
    week: int
    day: int
    period: int
    label: str

    @classmethod
    def from_domain(cls, slot: TimeSlot) -> "SlotOptionResponse":
        return cls(week=slot.week, day=slot.day, period=slot.period, label=describe_slot(slot))
