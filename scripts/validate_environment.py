#!/usr/bin/env python3
"""Validate local laboratory scheduling environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from labsched.domain.slots import SlotSpace
from labsched.repository.data_repository import DataRepository
from labsched.services.scheduling_service import SchedulingService
from labsched.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="labsched-env-")

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_names = [
        "fastapi",
        "uvicorn",
        "pydantic",
        "pandas",
        "requests",
        "streamlit",
        "httpx",
        "pytest",
    ]
    import_errors: list[str] = []
    for module_name in package_names:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        base_settings = get_settings()
        validation_settings = replace(
            base_settings,
            database_path=Path(temp_dir) / "labsched_validation.db",
        )

        # CHECK 3: Slot universe configuration
        try:
            slot_space = SlotSpace.from_settings(validation_settings)
            ok, line = _print_result("Slot universe", True, f": {len(slot_space)} slots")
        except ValueError as exc:
            ok, line = _print_result("Slot universe", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        repository = DataRepository(validation_settings)

        # CHECK 4: Database initialization
        try:
            repository.initialize_database()
            ok, line = _print_result("Database initialization", True)
        except RuntimeError as exc:
            ok, line = _print_result("Database initialization", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5: Demo data seeding
        try:
            seeded_requests = repository.seed_demo_data_if_empty()
            if seeded_requests != 4:
                raise RuntimeError(f"expected 4 seeded requests, got {seeded_requests}")
            ok, line = _print_result("Demo data seeding", True, f": {seeded_requests} requests")
        except RuntimeError as exc:
            ok, line = _print_result("Demo data seeding", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 6: Scheduling run
        try:
            service = SchedulingService(repository=repository, settings=validation_settings)
            satisfied = service.generate_schedule()
            stats = service.get_schedule_stats()
            if satisfied != stats.successful_requests:
                raise RuntimeError(
                    f"run reported {satisfied} placements but {stats.successful_requests} were stored"
                )
            ok, line = _print_result(
                "Scheduling run",
                True,
                f": {satisfied}/{stats.total_requests} placed ({stats.success_rate:.2f}%)",
            )
        except (RuntimeError, ValueError) as exc:
            ok, line = _print_result("Scheduling run", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Laboratory Scheduling Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
