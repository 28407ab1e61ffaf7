"""Time-in-zone aggregation over five heart rate zones (% of max HR).

Zone 1  < 60%   Recovery
Zone 2  60-70%  Aerobic Base
Zone 3  70-80%  Aerobic
Zone 4  80-90%  Threshold
Zone 5  >= 90%  VO2 Max

A sample series is bucketed by giving each sample the time until the next
one; summary-only workouts put their whole duration in the zone of the
average heart rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from vitalcore.models import WorkoutRecord


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------

# Lower bound of zones 2-5 as a fraction of max HR
ZONE_BOUNDARIES = [0.60, 0.70, 0.80, 0.90]
ZONE_NAMES = ["Recovery", "Aerobic Base", "Aerobic", "Threshold", "VO2 Max"]
ZONE_COUNT = 5

# Duration credited to the final sample when the workout end is unknown
LAST_SAMPLE_SEC = 5.0


@dataclass
class ZoneTime:
    """Time spent in one zone."""

    zone: int  # 1-5
    name: str
    min_hr: int
    max_hr: int
    duration: float  # seconds
    percentage: float  # of total duration


@dataclass
class ZoneBreakdown:
    """Per-zone durations for a workout."""

    zones: list[ZoneTime]
    total_duration: float
    current_zone: int | None  # zone of the average HR
    source: str  # "recorded", "samples" or "summary"

    def duration_in(self, zone: int) -> float:
        return self.zones[zone - 1].duration

    def percentage_in(self, zone: int) -> float:
        return self.zones[zone - 1].percentage

    def __repr__(self) -> str:
        pct = ", ".join(f"Z{z.zone}={z.percentage:.0f}%" for z in self.zones)
        return f"ZoneBreakdown({pct}, total={self.total_duration:.0f}s)"


def zone_bounds(max_hr: float) -> list[tuple[int, int]]:
    """(min_hr, max_hr) in bpm for each zone."""
    edges = [0.0] + [b * max_hr for b in ZONE_BOUNDARIES] + [float(max_hr)]
    return [(int(edges[i]), int(edges[i + 1])) for i in range(ZONE_COUNT)]


def zone_for(hr: float, max_hr: float) -> int:
    """Return the 1-based zone for a heart rate."""
    if max_hr <= 0:
        return 1
    pct = hr / max_hr
    return int(np.searchsorted(ZONE_BOUNDARIES, pct, side="right")) + 1


def _breakdown(
    durations: Sequence[float],
    max_hr: float,
    current_zone: int | None,
    source: str,
) -> ZoneBreakdown:
    total = float(sum(durations))
    bounds = zone_bounds(max_hr)
    zones = []
    for i in range(ZONE_COUNT):
        pct = durations[i] / total * 100.0 if total > 0 else 0.0
        zones.append(ZoneTime(
            zone=i + 1,
            name=ZONE_NAMES[i],
            min_hr=bounds[i][0],
            max_hr=bounds[i][1],
            duration=round(float(durations[i]), 1),
            percentage=round(pct, 1),
        ))
    return ZoneBreakdown(
        zones=zones,
        total_duration=round(total, 1),
        current_zone=current_zone,
        source=source,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def aggregate_zones(
    samples: Sequence[tuple[float, float]],
    max_hr: float,
    total_duration: float | None = None,
) -> ZoneBreakdown:
    """Bucket a heart rate series into zones.

    Args:
        samples: ``(offset_seconds, bpm)`` pairs; order does not matter.
        max_hr: Estimated maximum heart rate.
        total_duration: Workout length in seconds.  When given, spans are
            clipped to [0, total_duration] and the final sample lasts until
            the end, so the zone durations sum to it.  Otherwise the final
            sample lasts LAST_SAMPLE_SEC.

    Returns:
        ZoneBreakdown whose current zone is the zone of the mean heart rate.
    """
    if len(samples) == 0:
        return _breakdown([0.0] * ZONE_COUNT, max_hr, None, "samples")

    arr = np.asarray(samples, dtype=np.float64)
    arr = arr[np.argsort(arr[:, 0], kind="stable")]
    ts, hr = arr[:, 0], arr[:, 1]

    # The first sample covers the time since the start
    starts = np.maximum(ts, 0.0)
    starts[0] = 0.0
    if total_duration is not None:
        starts = np.minimum(starts, total_duration)
        end = total_duration
    else:
        end = starts[-1] + LAST_SAMPLE_SEC
    spans = np.diff(np.append(starts, end))

    pct = hr / max_hr if max_hr > 0 else np.zeros_like(hr)
    zone_idx = np.searchsorted(ZONE_BOUNDARIES, pct, side="right")
    durations = np.bincount(zone_idx, weights=spans, minlength=ZONE_COUNT)

    # Time-weighted mean HR
    mean_hr = float(np.average(hr, weights=spans)) if spans.sum() > 0 else float(np.mean(hr))
    return _breakdown(list(durations), max_hr, zone_for(mean_hr, max_hr), "samples")


def zones_from_summary(
    avg_hr: float,
    max_hr: float,
    duration: float,
) -> ZoneBreakdown:
    """Put the whole duration in the zone containing the average heart rate."""
    durations = [0.0] * ZONE_COUNT
    if avg_hr <= 0:
        return _breakdown(durations, max_hr, None, "summary")
    zone = zone_for(avg_hr, max_hr)
    durations[zone - 1] = float(duration)
    return _breakdown(durations, max_hr, zone, "summary")


def workout_zones(workout: WorkoutRecord, max_hr: float) -> ZoneBreakdown:
    """Best available zone breakdown: recorded, then samples, then summary."""
    if workout.zone_durations:
        durations = [float(workout.zone_durations.get(z, 0.0)) for z in range(1, ZONE_COUNT + 1)]
        current = zone_for(workout.avg_heart_rate, max_hr) if workout.avg_heart_rate > 0 else None
        return _breakdown(durations, max_hr, current, "recorded")
    if workout.heart_rate_samples:
        return aggregate_zones(workout.heart_rate_samples, max_hr, workout.duration or None)
    return zones_from_summary(workout.avg_heart_rate, max_hr, workout.duration)
