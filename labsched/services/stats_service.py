"""Aggregate outcome metrics for a scheduling run."""

from __future__ import annotations

from typing import Sequence

from labsched.domain.models import Assignment, LabRequest, ScheduleStats


def compute_schedule_stats(
    requests: Sequence[LabRequest],
    assignments: Sequence[Assignment],
) -> ScheduleStats:
    """Derive success/failure counts and unplaced classes from persisted state.

    Failed classes are reported as ``class_id (teacher)`` in the order the
    requests were supplied.
    """
    scheduled_request_ids = {assignment.request_id for assignment in assignments}
    total_requests = len(requests)
    successful_requests = len(scheduled_request_ids)
    if total_requests > 0:
        success_rate = successful_requests * 100.0 / total_requests
    else:
        success_rate = 0.0

    failed_classes = [
        request.describe()
        for request in requests
        if request.request_id not in scheduled_request_ids
    ]
    return ScheduleStats(
        total_requests=total_requests,
        successful_requests=successful_requests,
        failed_requests=total_requests - successful_requests,
        success_rate=float(success_rate),
        failed_classes=failed_classes,
    )
