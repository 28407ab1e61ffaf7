"""Input records consumed by the analytics engine.

DailyMetrics is one aggregated row per calendar day; WorkoutRecord is one
time-stamped workout summary.  Both are produced by an external ingestion
step and are treated as immutable here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Sequence


class WorkoutCategory(str, Enum):
    """Coarse workout category derived from the free-form type string."""

    RUN = "run"
    WALK = "walk"
    CYCLE = "cycle"
    STRENGTH = "strength"
    SWIM = "swim"
    YOGA = "yoga"
    OTHER = "other"


# Checked in order; first keyword hit wins ("treadmill run" -> run).
_CATEGORY_KEYWORDS: list[tuple[WorkoutCategory, tuple[str, ...]]] = [
    (WorkoutCategory.RUN, ("run", "jog", "treadmill")),
    (WorkoutCategory.WALK, ("walk", "hike", "hiking")),
    (WorkoutCategory.CYCLE, ("cycl", "bike", "biking", "spin")),
    (WorkoutCategory.SWIM, ("swim",)),
    (WorkoutCategory.YOGA, ("yoga", "pilates", "stretch")),
    (WorkoutCategory.STRENGTH, ("strength", "weight", "lift", "gym", "hiit", "crossfit")),
]


def categorize_workout(workout_type: str) -> WorkoutCategory:
    """Map a free-form workout type ("Outdoor Run", "Cycling") to a category."""
    name = (workout_type or "").strip().lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in name for k in keywords):
            return category
    return WorkoutCategory.OTHER


def _parse_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_datetime(value: datetime | str) -> datetime:
    """Parse an ISO timestamp as naive local wall-clock time.

    Any UTC offset is dropped so that naive and offset-aware exports compare
    and sort together, and the calendar day stays the one the athlete saw.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Daily metrics
# ---------------------------------------------------------------------------

# Fields that must never be negative
_NON_NEGATIVE_DAILY = (
    "step_count", "active_minutes", "active_calories", "total_calories",
    "total_distance", "sleep_hours", "deep_sleep_hours", "rem_sleep_hours",
    "time_in_bed", "resting_heart_rate", "hrv", "blood_oxygen",
    "respiratory_rate", "vo2_max", "workout_count",
)


@dataclass(frozen=True)
class DailyMetrics:
    """One day of aggregated biometrics.  Zero means "not measured"."""

    day: date
    step_count: int = 0
    active_minutes: float = 0.0
    active_calories: float = 0.0
    total_calories: float = 0.0
    total_distance: float = 0.0  # km
    sleep_hours: float = 0.0
    deep_sleep_hours: float = 0.0
    rem_sleep_hours: float = 0.0
    time_in_bed: float = 0.0  # hours
    resting_heart_rate: float = 0.0  # bpm
    hrv: float = 0.0  # ms
    blood_oxygen: float = 0.0  # %
    respiratory_rate: float = 0.0  # breaths/min
    vo2_max: float = 0.0
    workout_count: int = 0
    recovery_score: float | None = None  # 0-100, externally supplied
    stress_level: float | None = None  # 0-10, externally supplied
    energy_level: float | None = None  # 0-10, externally supplied

    def __post_init__(self) -> None:
        object.__setattr__(self, "day", _parse_date(self.day))
        for name in _NON_NEGATIVE_DAILY:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def is_consistent(self) -> bool:
        """Check sleep stage ordering: stages <= sleep <= time in bed."""
        stages = self.deep_sleep_hours + self.rem_sleep_hours
        if stages > self.sleep_hours + 1e-9:
            return False
        if self.time_in_bed > 0 and self.sleep_hours > self.time_in_bed + 1e-9:
            return False
        return True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyMetrics":
        """Build from a plain dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "day" not in kwargs and "date" in data:
            kwargs["day"] = data["date"]
        return cls(**kwargs)


def latest_per_day(records: Iterable[DailyMetrics]) -> list[DailyMetrics]:
    """Collapse to one record per day, later corrections superseding earlier.

    Returns the surviving records sorted by day.
    """
    by_day: dict[date, DailyMetrics] = {}
    for rec in records:
        by_day[rec.day] = rec
    return [by_day[d] for d in sorted(by_day)]


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunningDynamics:
    """Optional running-dynamics averages for a workout."""

    stride_length: float | None = None  # m
    ground_contact_time: float | None = None  # ms
    vertical_oscillation: float | None = None  # cm
    cadence: float | None = None  # spm
    power: float | None = None  # W
    asymmetry: float | None = None  # %
    ground_contact_balance: float | None = None  # % left

    @property
    def has_data(self) -> bool:
        return any(
            v is not None and v > 0
            for v in (self.stride_length, self.ground_contact_time,
                      self.vertical_oscillation, self.cadence)
        )


@dataclass(frozen=True)
class WorkoutRecord:
    """A single time-stamped workout summary."""

    id: str
    timestamp: datetime
    workout_type: str
    duration: float  # seconds
    distance: float = 0.0  # km, 0 if untracked
    calories: float = 0.0
    avg_heart_rate: float = 0.0
    max_heart_rate: float = 0.0
    cadence: float = 0.0
    pace: float = 0.0  # sec/km
    elevation_gain: float = 0.0  # m
    zone_durations: dict[int, float] | None = None  # zone -> seconds
    route: tuple[tuple[float, float], ...] | None = None  # (lat, lon)
    heart_rate_samples: tuple[tuple[float, float], ...] | None = None  # (offset s, bpm)
    dynamics: RunningDynamics | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _parse_datetime(self.timestamp))
        for name in ("duration", "distance", "calories", "avg_heart_rate",
                     "max_heart_rate", "cadence", "pace", "elevation_gain"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.pace == 0 and self.distance > 0 and self.duration > 0:
            object.__setattr__(self, "pace", self.duration / self.distance)

    @property
    def day(self) -> date:
        return self.timestamp.date()

    @property
    def category(self) -> WorkoutCategory:
        return categorize_workout(self.workout_type)

    @property
    def is_run(self) -> bool:
        return self.category == WorkoutCategory.RUN

    def __repr__(self) -> str:
        return (
            f"WorkoutRecord({self.id}, {self.category.value}, "
            f"{self.timestamp:%Y-%m-%d %H:%M}, "
            f"{self.duration / 60:.0f}min, {self.distance:.2f}km)"
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkoutRecord":
        """Build from a plain dict (e.g. one JSON line from the store)."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "workout_type" not in kwargs and "type" in data:
            kwargs["workout_type"] = data["type"]
        if kwargs.get("zone_durations") is not None:
            kwargs["zone_durations"] = {
                int(k): float(v) for k, v in kwargs["zone_durations"].items()
            }
        if kwargs.get("route") is not None:
            kwargs["route"] = tuple(tuple(p) for p in kwargs["route"])
        if kwargs.get("heart_rate_samples") is not None:
            kwargs["heart_rate_samples"] = tuple(
                (float(t), float(hr)) for t, hr in kwargs["heart_rate_samples"]
            )
        if isinstance(kwargs.get("dynamics"), dict):
            kwargs["dynamics"] = RunningDynamics(**kwargs["dynamics"])
        kwargs["id"] = str(kwargs.get("id", ""))
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Splits
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunSplit:
    """Pace/HR sample for one kilometre (or the final partial distance)."""

    kilometer: int
    distance: float  # km covered by this split
    duration: float  # seconds
    pace: float  # sec/km
    heart_rate: float = 0.0
    cadence: float = 0.0
    is_partial: bool = False


@dataclass
class SplitSummary:
    """Aggregate view over a workout's splits."""

    fastest: RunSplit | None
    slowest: RunSplit | None
    negative_split: bool  # second half faster than the first
    pace_variability: float  # coefficient of variation of full-km paces


def build_splits(
    workout: WorkoutRecord,
    paces: Sequence[float] | None = None,
) -> list[RunSplit]:
    """Derive per-km splits for a workout.

    Args:
        workout: The workout; needs distance and duration.
        paces: Optional measured pace (sec/km) per split.  When absent the
            workout's average pace is used for every split.

    Returns:
        Ordered splits; the last one is partial when the distance is not a
        whole number of kilometres.  Empty for untracked workouts.
    """
    if workout.distance <= 0 or workout.duration <= 0:
        return []

    total = workout.distance
    count = math.ceil(total - 1e-9)
    avg_pace = workout.duration / total
    splits: list[RunSplit] = []
    for i in range(1, count + 1):
        is_partial = i > total + 1e-9
        dist = round(total - (i - 1), 3) if is_partial else 1.0
        pace = avg_pace
        if paces is not None and i - 1 < len(paces) and paces[i - 1] > 0:
            pace = float(paces[i - 1])
        splits.append(RunSplit(
            kilometer=i,
            distance=dist,
            duration=round(pace * dist, 1),
            pace=round(pace, 1),
            heart_rate=workout.avg_heart_rate,
            cadence=workout.cadence,
            is_partial=is_partial,
        ))
    return splits


def split_summary(splits: Sequence[RunSplit]) -> SplitSummary:
    """Fastest/slowest full split, negative-split flag and pace variability."""
    full = [s for s in splits if not s.is_partial]
    if not full:
        return SplitSummary(fastest=None, slowest=None,
                            negative_split=False, pace_variability=0.0)

    fastest = min(full, key=lambda s: s.pace)
    slowest = max(full, key=lambda s: s.pace)

    half = len(full) // 2
    negative = False
    if half >= 1:
        first = sum(s.pace for s in full[:half]) / half
        second = sum(s.pace for s in full[-half:]) / half
        negative = second < first

    mean = sum(s.pace for s in full) / len(full)
    if mean > 0 and len(full) > 1:
        var = sum((s.pace - mean) ** 2 for s in full) / len(full)
        cv = math.sqrt(var) / mean
    else:
        cv = 0.0

    return SplitSummary(
        fastest=fastest,
        slowest=slowest,
        negative_split=negative,
        pace_variability=round(cv, 4),
    )
