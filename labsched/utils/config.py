"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    database_path: Path
    schedule_first_week: int
    schedule_last_week: int
    schedule_days_per_week: int
    schedule_periods_per_day: int
    seed_demo_data: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process; call ``cache_clear`` to reload."""
    return Settings(
        app_name=os.getenv("LABSCHED_APP_NAME", "Laboratory Scheduling Service"),
        app_version=os.getenv("LABSCHED_APP_VERSION", "1.0.0"),
        log_level=os.getenv("LABSCHED_LOG_LEVEL", "INFO"),
        database_path=Path(
            os.getenv("LABSCHED_DATABASE_PATH", str(PROJECT_ROOT / "data" / "lab_schedule.db"))
        ),
        schedule_first_week=_env_int("LABSCHED_FIRST_WEEK", 9),
        schedule_last_week=_env_int("LABSCHED_LAST_WEEK", 10),
        schedule_days_per_week=_env_int("LABSCHED_DAYS_PER_WEEK", 5),
        schedule_periods_per_day=_env_int("LABSCHED_PERIODS_PER_DAY", 2),
        seed_demo_data=_env_bool("LABSCHED_SEED_DEMO_DATA", False),
    )
