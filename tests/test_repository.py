from __future__ import annotations

from dataclasses import replace

from labsched.domain.models import TimeSlot
from labsched.repository.data_repository import DataRepository
from labsched.services.scheduling_service import SchedulingService
from labsched.utils.config import get_settings


def _build_test_settings(tmp_path, filename: str):
    base = get_settings()
    return replace(base, database_path=tmp_path / filename)


def _build_repository(tmp_path, filename: str) -> DataRepository:
    repository = DataRepository(_build_test_settings(tmp_path, filename))
    repository.initialize_database()
    return repository


def test_laboratories_are_listed_in_creation_order(tmp_path):
    repository = _build_repository(tmp_path, "labs.db")
    first = repository.add_laboratory("A301", 40)
    second = repository.add_laboratory("B201", 50)

    laboratories = repository.list_laboratories()

    assert [lab.lab_id for lab in laboratories] == [first, second]
    assert repository.get_laboratory(second).capacity == 50
    assert repository.get_laboratory(9999) is None


def test_request_slots_round_trip_through_storage(tmp_path):
    repository = _build_repository(tmp_path, "requests.db")
    preferred = [TimeSlot(9, 3, 0), TimeSlot(9, 0, 0)]
    excluded = [TimeSlot(10, 1, 1), TimeSlot(9, 2, 1)]

    request_id = repository.add_request("B210307", 33, "Zhu Jie", preferred, excluded, 1)
    stored = repository.get_request(request_id)

    assert stored is not None
    assert stored.preferred_slots == tuple(preferred)
    assert stored.excluded_slots == frozenset(excluded)
    assert stored.describe() == "B210307 (Zhu Jie)"


def test_requests_are_ordered_by_priority_then_insertion(tmp_path):
    repository = _build_repository(tmp_path, "priority.db")
    slot = [TimeSlot(9, 0, 0)]
    late = repository.add_request("C3", 10, "T3", slot, [], 3)
    tie_first = repository.add_request("C1a", 10, "T1", slot, [], 1)
    tie_second = repository.add_request("C1b", 10, "T1", slot, [], 1)

    ordered = [request.request_id for request in repository.list_requests()]

    assert ordered == [tie_first, tie_second, late]
    assert repository.next_priority() == 4


def test_next_priority_starts_at_one(tmp_path):
    repository = _build_repository(tmp_path, "empty.db")
    assert repository.next_priority() == 1


def test_add_assignment_rejects_double_booking_and_second_placement(tmp_path):
    repository = _build_repository(tmp_path, "assignments.db")
    lab_id = repository.add_laboratory("A301", 40)
    other_lab_id = repository.add_laboratory("A302", 40)
    first = repository.add_request("C1", 10, "T1", [TimeSlot(9, 0, 0)], [], 1)
    second = repository.add_request("C2", 10, "T2", [TimeSlot(9, 0, 0)], [], 2)

    assert repository.add_assignment(first, lab_id, TimeSlot(9, 0, 0)) is True
    assert repository.add_assignment(second, lab_id, TimeSlot(9, 0, 0)) is False
    assert repository.add_assignment(first, other_lab_id, TimeSlot(9, 0, 1)) is False
    assert repository.count_assignments() == 1


def test_add_assignment_with_unknown_lab_reports_failure(tmp_path):
    repository = _build_repository(tmp_path, "unknown_lab.db")
    request_id = repository.add_request("C1", 10, "T1", [TimeSlot(9, 0, 0)], [], 1)

    assert repository.add_assignment(request_id, 404, TimeSlot(9, 0, 0)) is False


def test_assignment_queries_by_lab_and_class(tmp_path):
    repository = _build_repository(tmp_path, "queries.db")
    lab_a = repository.add_laboratory("A301", 40)
    lab_b = repository.add_laboratory("B201", 50)
    first = repository.add_request("B210307", 33, "Zhu Jie", [TimeSlot(9, 0, 0)], [], 1)
    second = repository.add_request("B210308", 36, "Hu Huijuan", [TimeSlot(9, 0, 0)], [], 2)
    repository.add_assignment(first, lab_a, TimeSlot(9, 0, 0))
    repository.add_assignment(second, lab_b, TimeSlot(9, 0, 0))

    assert [item.request_id for item in repository.list_assignments_by_lab(lab_b)] == [second]
    assert [item.lab_id for item in repository.list_assignments_by_class("B210307")] == [lab_a]
    assert repository.list_assignments_by_class("UNKNOWN") == []

    entries = repository.list_schedule_entries(class_id="B210308")
    assert len(entries) == 1
    assert entries[0].location == "B201"
    assert entries[0].teacher == "Hu Huijuan"
    assert entries[0].time_slot == TimeSlot(9, 0, 0)
    assert len(repository.list_schedule_entries()) == 2


def test_deleting_laboratory_removes_its_assignments(tmp_path):
    repository = _build_repository(tmp_path, "cascade.db")
    lab_id = repository.add_laboratory("A301", 40)
    request_id = repository.add_request("C1", 10, "T1", [TimeSlot(9, 0, 0)], [], 1)
    repository.add_assignment(request_id, lab_id, TimeSlot(9, 0, 0))

    assert repository.delete_laboratory(lab_id) is True
    assert repository.delete_laboratory(lab_id) is False
    assert repository.list_assignments() == []


def test_demo_seed_is_idempotent(tmp_path):
    repository = _build_repository(tmp_path, "seed.db")

    assert repository.seed_demo_data_if_empty() == 4
    assert repository.seed_demo_data_if_empty() == 0
    assert len(repository.list_laboratories()) == 3
    assert [request.class_id for request in repository.list_requests()] == [
        "B210307",
        "B210308",
        "B210309",
        "B210310",
    ]


def test_clear_all_data_empties_every_table(tmp_path):
    repository = _build_repository(tmp_path, "clear.db")
    repository.seed_demo_data_if_empty()

    repository.clear_all_data()

    assert repository.list_laboratories() == []
    assert repository.list_requests() == []
    assert repository.count_assignments() == 0


def test_scheduling_service_run_replaces_previous_schedule(tmp_path):
    settings = _build_test_settings(tmp_path, "service.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.seed_demo_data_if_empty()
    service = SchedulingService(repository=repository, settings=settings)

    first = service.generate_schedule()
    second = service.generate_schedule()
    stats = service.get_schedule_stats()

    assert first == second == 4
    assert repository.count_assignments() == 4
    assert stats.success_rate == 100.0
    assert stats.failed_classes == []
    by_class = service.list_schedule(class_id="B210308")
    assert [(entry.location, entry.time_slot) for entry in by_class] == [
        ("Lab Building A302", TimeSlot(9, 0, 0))
    ]


def test_scheduling_service_reports_every_request_failed_without_laboratories(tmp_path):
    settings = _build_test_settings(tmp_path, "no_labs.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.add_request("C1", 10, "T1", [TimeSlot(9, 0, 0)], [], 1)
    service = SchedulingService(repository=repository, settings=settings)

    assert service.generate_schedule() == 0
    stats = service.get_schedule_stats()
    assert stats.total_requests == 1
    assert stats.failed_classes == ["C1 (T1)"]
