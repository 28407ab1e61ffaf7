"""Shared fixtures and helpers for the vitalcore test suite."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from vitalcore.config import UserProfile
from vitalcore.models import DailyMetrics, RunningDynamics, WorkoutRecord


TODAY = date(2026, 3, 15)  # a Sunday


# ---------------------------------------------------------------------------
# Record-building helpers
# ---------------------------------------------------------------------------


def make_metrics(day: date = TODAY, **overrides) -> DailyMetrics:
    """A typical healthy day; override any field by keyword."""
    fields = dict(
        step_count=8000,
        active_minutes=35.0,
        active_calories=400.0,
        total_calories=2300.0,
        total_distance=6.0,
        sleep_hours=7.5,
        deep_sleep_hours=1.4,
        rem_sleep_hours=1.6,
        time_in_bed=8.0,
        resting_heart_rate=58.0,
        hrv=55.0,
    )
    fields.update(overrides)
    return DailyMetrics(day=day, **fields)


def make_history(
    days: int,
    end: date = TODAY,
    **overrides,
) -> list[DailyMetrics]:
    """One make_metrics() record per day for *days* days ending *end*."""
    return [make_metrics(end - timedelta(days=i), **overrides) for i in range(days)][::-1]


def make_workout(
    day: date = TODAY,
    workout_id: str | None = None,
    workout_type: str = "Running",
    duration: float = 3000.0,
    distance: float = 10.0,
    avg_heart_rate: float = 150.0,
    hour: int = 7,
    **overrides,
) -> WorkoutRecord:
    """A 50-minute 10 km run at 150 bpm unless overridden."""
    return WorkoutRecord(
        id=workout_id or f"w-{day.isoformat()}-{hour}",
        timestamp=datetime(day.year, day.month, day.day, hour, 0),
        workout_type=workout_type,
        duration=duration,
        distance=distance,
        avg_heart_rate=avg_heart_rate,
        **overrides,
    )


def make_dynamics(**overrides) -> RunningDynamics:
    fields = dict(
        stride_length=0.8,
        ground_contact_time=240.0,
        vertical_oscillation=9.0,
        cadence=178.0,
    )
    fields.update(overrides)
    return RunningDynamics(**fields)


# ---------------------------------------------------------------------------
# JSON file helpers
# ---------------------------------------------------------------------------


def write_jsonl(path: Path, entries: list[dict]) -> Path:
    """Write a list of dicts as JSONL to the given path."""
    with open(path, "w") as f:
        for entry in entries:
            f.write(json.dumps(entry) + "\n")
    return path


def write_json(path: Path, data) -> Path:
    with open(path, "w") as f:
        json.dump(data, f)
    return path


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile()
