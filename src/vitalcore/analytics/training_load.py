"""Training load: per-workout stress, acute/chronic load and the ACWR.

Acute load is the training stress accumulated over the last 7 days; chronic
load is the 28-day average expressed on the same weekly scale.  Their ratio
(the acute:chronic workload ratio) is banded into a training status:

    ratio < 0.8          Undertraining
    0.8 <= ratio <= 1.3  Optimal
    1.3 <  ratio <= 1.5  Overreaching
    ratio > 1.5          Overtraining
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Sequence

import numpy as np

from vitalcore.analytics.zones import ZoneBreakdown
from vitalcore.config import UserProfile
from vitalcore.models import WorkoutRecord


ACUTE_DAYS = 7
CHRONIC_DAYS = 28

# Per-workout TSS ceiling
TSS_MAX = 300.0

# Ratio reported when there is acute load but no chronic base
NO_BASE_RATIO = 2.0

UNDERTRAINING_BELOW = 0.8
OPTIMAL_MAX = 1.3
OVERREACHING_MAX = 1.5

# Below this many weeks of history, recommendations use the beginner wording
NEW_USER_WEEKS = 2.0


class TrainingStatus(str, Enum):
    UNDERTRAINING = "Undertraining"
    OPTIMAL = "Optimal"
    OVERREACHING = "Overreaching"
    OVERTRAINING = "Overtraining"


class EffortLevel(str, Enum):
    RECOVERY = "Recovery"
    EASY = "Easy"
    MODERATE = "Moderate"
    TEMPO = "Tempo"
    THRESHOLD = "Threshold"
    MAX_EFFORT = "Max Effort"


RECOMMENDATIONS = {
    TrainingStatus.UNDERTRAINING: (
        "Training load is low. Increase volume or intensity gradually "
        "to keep building fitness."
    ),
    TrainingStatus.OPTIMAL: (
        "Training load is in the optimal zone. Maintain current load."
    ),
    TrainingStatus.OVERREACHING: (
        "You're training hard. Add recovery days to avoid tipping into "
        "overtraining."
    ),
    TrainingStatus.OVERTRAINING: (
        "High injury risk. Reduce volume, prioritize recovery."
    ),
}

NEW_USER_RECOMMENDATIONS = {
    TrainingStatus.UNDERTRAINING: (
        "Getting started. Keep running regularly to establish your baseline."
    ),
    TrainingStatus.OPTIMAL: (
        "Great start. Keep the training consistent while your base builds."
    ),
    TrainingStatus.OVERREACHING: (
        "Good effort. Space your runs out while endurance builds."
    ),
    TrainingStatus.OVERTRAINING: (
        "You're just getting started. Reduce volume, prioritize recovery "
        "and build up gradually."
    ),
}


@dataclass
class TrainingLoadState:
    """Acute/chronic load snapshot for one day."""

    acute_load: float
    chronic_load: float
    ratio: float
    status: TrainingStatus
    training_balance: float  # chronic - acute; positive = tapering
    recommendation: str

    def __repr__(self) -> str:
        return (
            f"TrainingLoadState(acute={self.acute_load:.0f}, "
            f"chronic={self.chronic_load:.0f}, "
            f"acwr={self.ratio:.2f} {self.status.value})"
        )


# ---------------------------------------------------------------------------
# Per-workout stress
# ---------------------------------------------------------------------------


def intensity_factor(avg_hr: float, max_hr: float, resting_hr: float) -> float:
    """Heart rate reserve fraction, clamped to [0, 1]."""
    if max_hr <= resting_hr or avg_hr <= 0:
        return 0.0
    return float(np.clip((avg_hr - resting_hr) / (max_hr - resting_hr), 0.0, 1.0))


def training_stress(
    workout: WorkoutRecord,
    max_hr: float = 190.0,
    resting_hr: float = 60.0,
) -> float:
    """HR-based TSS estimate: hours x intensity^2 x 100, capped at 300.

    Workouts without duration or average heart rate contribute 0.
    """
    if workout.duration <= 0 or workout.avg_heart_rate <= 0:
        return 0.0
    intensity = intensity_factor(workout.avg_heart_rate, max_hr, resting_hr)
    tss = workout.duration / 3600.0 * intensity ** 2 * 100.0
    return round(min(tss, TSS_MAX), 2)


def effort_level(avg_hr: float, max_hr: float) -> EffortLevel:
    """Perceived effort from average HR as a fraction of max."""
    pct = avg_hr / max_hr if max_hr > 0 else 0.0
    if pct < 0.60:
        return EffortLevel.RECOVERY
    if pct < 0.70:
        return EffortLevel.EASY
    if pct < 0.80:
        return EffortLevel.MODERATE
    if pct < 0.90:
        return EffortLevel.TEMPO
    if pct < 0.95:
        return EffortLevel.THRESHOLD
    return EffortLevel.MAX_EFFORT


def aerobic_effect(duration_sec: float, avg_hr: float, max_hr: float) -> float:
    """Aerobic training effect on a 1.0-5.0 scale."""
    pct = avg_hr / max_hr if max_hr > 0 else 0.0
    minutes = duration_sec / 60.0
    effect = 1.0
    if minutes >= 30:
        effect += min(1.5, minutes / 60.0)
    if 0.65 <= pct <= 0.85:
        effect += 1.5
    elif pct > 0.85:
        effect += 1.0
    return round(min(5.0, effect), 1)


def anaerobic_effect(zones: ZoneBreakdown) -> float:
    """Anaerobic training effect (1-5) from the share of time in zones 4-5."""
    share = zones.percentage_in(4) + zones.percentage_in(5)
    if share < 5:
        return 1.0
    if share < 15:
        return 2.0
    if share < 25:
        return 3.0
    if share < 40:
        return 4.0
    return 5.0


# ---------------------------------------------------------------------------
# Ratio and status
# ---------------------------------------------------------------------------


def _raw_ratio(acute: float, chronic: float) -> float:
    if chronic <= 0:
        return 0.0 if acute <= 0 else NO_BASE_RATIO
    return acute / chronic


def acwr(acute: float, chronic: float) -> float:
    """Acute:chronic ratio rounded to 2 decimals, for display.

    0 when there is no load at all; NO_BASE_RATIO when there is acute load
    but no chronic base. Classification uses the unrounded ratio.
    """
    return round(_raw_ratio(acute, chronic), 2)


def classify_acwr(ratio: float) -> TrainingStatus:
    if ratio < UNDERTRAINING_BELOW:
        return TrainingStatus.UNDERTRAINING
    if ratio <= OPTIMAL_MAX:
        return TrainingStatus.OPTIMAL
    if ratio <= OVERREACHING_MAX:
        return TrainingStatus.OVERREACHING
    return TrainingStatus.OVERTRAINING


def training_recommendation(
    status: TrainingStatus,
    weeks_of_data: float = 4.0,
) -> str:
    if weeks_of_data < NEW_USER_WEEKS:
        return NEW_USER_RECOMMENDATIONS[status]
    return RECOMMENDATIONS[status]


def load_state_from_totals(
    acute: float,
    chronic: float,
    weeks_of_data: float = 4.0,
) -> TrainingLoadState:
    """Build a TrainingLoadState from precomputed acute and chronic loads."""
    status = classify_acwr(_raw_ratio(acute, chronic))
    return TrainingLoadState(
        acute_load=round(acute, 1),
        chronic_load=round(chronic, 1),
        ratio=acwr(acute, chronic),
        status=status,
        training_balance=round(chronic - acute, 1),
        recommendation=training_recommendation(status, weeks_of_data),
    )


def analyze_training_load(
    workouts: Sequence[WorkoutRecord],
    today: date,
    profile: UserProfile | None = None,
) -> TrainingLoadState:
    """Compute acute/chronic load and ACWR from the workout history.

    Args:
        workouts: Workout history in any order; future workouts are ignored.
        today: Last day included in both windows.
        profile: Supplies max and resting heart rate for the TSS estimate.
    """
    profile = profile or UserProfile()
    acute_start = today - timedelta(days=ACUTE_DAYS)
    chronic_start = today - timedelta(days=CHRONIC_DAYS)

    acute = 0.0
    chronic_total = 0.0
    oldest: date | None = None
    for w in workouts:
        d = w.day
        if not chronic_start < d <= today:
            continue
        tss = training_stress(w, profile.max_heart_rate, profile.resting_heart_rate)
        chronic_total += tss
        if d > acute_start:
            acute += tss
        if oldest is None or d < oldest:
            oldest = d

    chronic = chronic_total / CHRONIC_DAYS * ACUTE_DAYS
    weeks = ((today - oldest).days + 1) / 7.0 if oldest is not None else 0.0
    return load_state_from_totals(acute, chronic, weeks)
