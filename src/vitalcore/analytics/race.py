"""Race time projections with the Riegel power law.

    T2 = T1 x (D2 / D1) ^ 1.06

The reference performance is the fastest-paced qualifying run in the recent
window.  Confidence grows with the number of qualifying runs and shrinks as
the target distance moves away from the reference distance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from vitalcore.models import WorkoutRecord


RIEGEL_EXPONENT = 1.06

RACE_DISTANCES: dict[str, float] = {
    "5K": 5.0,
    "10K": 10.0,
    "Half Marathon": 21.0975,
    "Marathon": 42.195,
}

# Runs needed for full sample confidence
FULL_CONFIDENCE_RUNS = 20
# Confidence divisor grows by this much per unit of |ln(D2/D1)|
DISTANCE_PENALTY = 0.5


@dataclass
class RacePrediction:
    """Projected finish for one target distance."""

    name: str
    distance: float  # km
    time: float  # seconds
    pace: float  # sec/km
    confidence: float  # 0-100

    def __repr__(self) -> str:
        return (
            f"RacePrediction({self.name}: {format_duration(self.time)}, "
            f"conf={self.confidence:.0f}%)"
        )


@dataclass
class RacePredictions:
    """Projections for every target distance from one reference run."""

    reference_distance: float
    reference_time: float
    reference_id: str
    qualifying_runs: int
    predictions: list[RacePrediction]

    def get(self, name: str) -> RacePrediction | None:
        for p in self.predictions:
            if p.name == name:
                return p
        return None


def format_duration(seconds: float) -> str:
    """h:mm:ss or m:ss."""
    total = int(round(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def riegel_time(
    t1: float,
    d1: float,
    d2: float,
    exponent: float = RIEGEL_EXPONENT,
) -> float:
    """Project the time for *d2* from a performance of *t1* over *d1*."""
    if d1 <= 0 or d2 <= 0:
        raise ValueError("distances must be positive")
    if d2 == d1:
        return t1
    return t1 * (d2 / d1) ** exponent


def prediction_confidence(run_count: int, d1: float, d2: float) -> float:
    """0-100 confidence for projecting *d2* from *d1* using *run_count* runs."""
    sample = min(run_count, FULL_CONFIDENCE_RUNS) / FULL_CONFIDENCE_RUNS * 100.0
    spread = abs(math.log(d2 / d1)) if d1 > 0 and d2 > 0 else 0.0
    return round(sample / (1.0 + DISTANCE_PENALTY * spread), 1)


def qualifying_runs(
    workouts: Sequence[WorkoutRecord],
    today: date,
    lookback_days: int = 90,
    min_distance_km: float = 5.0,
) -> list[WorkoutRecord]:
    """Runs within the lookback window long enough to anchor a projection."""
    start = today - timedelta(days=lookback_days)
    return [
        w for w in workouts
        if w.is_run
        and start < w.day <= today
        and w.distance >= min_distance_km
        and w.duration > 0
    ]


def predict_races(
    workouts: Sequence[WorkoutRecord],
    today: date,
    lookback_days: int = 90,
    min_distance_km: float = 5.0,
    targets: dict[str, float] | None = None,
) -> RacePredictions | None:
    """Project race times from the best recent run.

    Args:
        workouts: Workout history; non-run workouts are ignored.
        today: Last day of the lookback window.
        lookback_days: How far back a run may be to count.
        min_distance_km: Shortest run accepted as a reference.
        targets: Name -> distance (km); defaults to RACE_DISTANCES.

    Returns:
        RacePredictions, or None when no run qualifies.
    """
    runs = qualifying_runs(workouts, today, lookback_days, min_distance_km)
    if not runs:
        return None

    best = min(runs, key=lambda w: w.duration / w.distance)
    targets = targets or RACE_DISTANCES

    predictions = []
    for name, dist in targets.items():
        t = riegel_time(best.duration, best.distance, dist)
        predictions.append(RacePrediction(
            name=name,
            distance=dist,
            time=t,
            pace=round(t / dist, 1),
            confidence=prediction_confidence(len(runs), best.distance, dist),
        ))

    return RacePredictions(
        reference_distance=best.distance,
        reference_time=best.duration,
        reference_id=best.id,
        qualifying_runs=len(runs),
        predictions=predictions,
    )
