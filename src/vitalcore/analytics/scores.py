"""Composite daily health scores.

Four 0-100 sub-scores (activity, sleep, heart, recovery) are combined into a
weighted overall score.  Every sub-score falls back to a documented value
when its inputs are missing, so the overall score is always defined.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from vitalcore.analytics.wellness import (
    battery_label,
    energy_battery,
    stress_label,
    stress_level,
)
from vitalcore.config import UserProfile
from vitalcore.models import DailyMetrics


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Overall weights: activity, sleep, heart, recovery
W_ACTIVITY = 0.25
W_SLEEP = 0.30
W_HEART = 0.25
W_RECOVERY = 0.20

ACTIVE_MINUTES_TARGET = 30.0
SLEEP_TARGET_HOURS = 8.0
HRV_TARGET_MS = 50.0

# Sleep efficiency assumed when time in bed is unknown
DEFAULT_SLEEP_EFFICIENCY = 85.0

HEART_NEUTRAL = 50


class ScoreLabel(str, Enum):
    """Overall score band."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_ATTENTION = "Needs Attention"


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------


def activity_score(steps: float, active_minutes: float, step_goal: float) -> int:
    """Half from steps against the goal, half from active minutes against 30."""
    step_part = min(steps / step_goal * 50.0, 50.0) if step_goal > 0 else 0.0
    active_part = min(active_minutes / ACTIVE_MINUTES_TARGET * 50.0, 50.0)
    return int(_clamp(step_part + active_part))


@dataclass
class SleepBreakdown:
    """Sleep score and its four components."""

    score: int
    duration: int
    deep: int
    rem: int
    efficiency: int
    efficiency_pct: float

    def __repr__(self) -> str:
        return (
            f"SleepBreakdown(score={self.score}, dur={self.duration}, "
            f"deep={self.deep}, rem={self.rem}, eff={self.efficiency})"
        )


def sleep_breakdown(
    sleep_hours: float,
    deep_hours: float,
    rem_hours: float,
    time_in_bed: float,
) -> SleepBreakdown:
    """Score a night of sleep on duration, deep and REM share, and efficiency.

    Returns an all-zero breakdown when no sleep was recorded.
    """
    if sleep_hours <= 0:
        return SleepBreakdown(score=0, duration=0, deep=0, rem=0,
                              efficiency=0, efficiency_pct=0.0)

    if 7.0 <= sleep_hours <= 9.0:
        duration = 40
    elif sleep_hours >= 6.0:
        duration = 30
    else:
        duration = 15

    deep_pct = deep_hours / sleep_hours * 100.0
    if 15.0 <= deep_pct <= 25.0:
        deep = 25
    elif deep_pct >= 10.0:
        deep = 18
    else:
        deep = 10

    rem_pct = rem_hours / sleep_hours * 100.0
    if 20.0 <= rem_pct <= 25.0:
        rem = 20
    elif rem_pct >= 15.0:
        rem = 15
    else:
        rem = 8

    if time_in_bed > 0:
        efficiency_pct = sleep_hours / time_in_bed * 100.0
    else:
        efficiency_pct = DEFAULT_SLEEP_EFFICIENCY
    if efficiency_pct >= 90.0:
        efficiency = 15
    elif efficiency_pct >= 85.0:
        efficiency = 12
    else:
        efficiency = 8

    total = min(100, duration + deep + rem + efficiency)
    return SleepBreakdown(
        score=total,
        duration=duration,
        deep=deep,
        rem=rem,
        efficiency=efficiency,
        efficiency_pct=round(efficiency_pct, 1),
    )


def sleep_score(
    sleep_hours: float,
    deep_hours: float,
    rem_hours: float,
    time_in_bed: float,
) -> int:
    """Sleep score 0-100; see :func:`sleep_breakdown`."""
    return sleep_breakdown(sleep_hours, deep_hours, rem_hours, time_in_bed).score


def heart_score(resting_hr: float, hrv: float) -> int:
    """50 base plus resting-HR and HRV bonuses; neutral 50 with no data."""
    if resting_hr <= 0 and hrv <= 0:
        return HEART_NEUTRAL

    score = 50.0
    if resting_hr > 0:
        if resting_hr <= 60:
            score += 25
        elif resting_hr <= 70:
            score += 20
        elif resting_hr <= 80:
            score += 10
    if hrv > 0:
        if hrv >= 50:
            score += 25
        elif hrv >= 30:
            score += 15
        else:
            score += 5
    return int(min(score, 100.0))


def recovery_score(
    raw_recovery: float | None,
    hrv: float,
    sleep_hours: float,
) -> int:
    """Use the device's recovery score if present, else estimate from HRV + sleep."""
    if raw_recovery is not None and raw_recovery > 0:
        return int(_clamp(raw_recovery))
    hrv_part = min(hrv / HRV_TARGET_MS * 50.0, 50.0)
    sleep_part = min(sleep_hours / SLEEP_TARGET_HOURS * 50.0, 50.0)
    return int(_clamp(hrv_part + sleep_part))


# ---------------------------------------------------------------------------
# Overall
# ---------------------------------------------------------------------------


def overall_score(activity: int, sleep: int, heart: int, recovery: int) -> int:
    """Weighted mean of the four sub-scores, rounded half up."""
    weighted = (
        W_ACTIVITY * activity
        + W_SLEEP * sleep
        + W_HEART * heart
        + W_RECOVERY * recovery
    )
    return int(_clamp(weighted) + 0.5)


def score_label(score: int) -> ScoreLabel:
    if score >= 85:
        return ScoreLabel.EXCELLENT
    if score >= 70:
        return ScoreLabel.GOOD
    if score >= 50:
        return ScoreLabel.FAIR
    return ScoreLabel.NEEDS_ATTENTION


@dataclass
class DailyScores:
    """All composite scores for one day."""

    activity: int
    sleep: int
    heart: int
    recovery: int
    overall: int
    label: ScoreLabel
    energy_battery: int
    energy_label: str
    stress_level: int
    stress_label: str
    sleep_detail: SleepBreakdown

    def __repr__(self) -> str:
        return (
            f"DailyScores(overall={self.overall} {self.label.value}, "
            f"act={self.activity}, sleep={self.sleep}, "
            f"heart={self.heart}, rec={self.recovery})"
        )


def score_day(
    metrics: DailyMetrics,
    profile: UserProfile | None = None,
    now: datetime | None = None,
) -> DailyScores:
    """Compute every composite score for one day of metrics.

    Args:
        metrics: The day's aggregated metrics.
        profile: User goals; defaults to :class:`UserProfile` defaults.
        now: Wall-clock time for the energy battery's awake-hours drain.
            Defaults to the current local time.

    Returns:
        DailyScores with sub-scores, overall score and wellness heuristics.
    """
    profile = profile or UserProfile()
    now = now or datetime.now()

    act = activity_score(metrics.step_count, metrics.active_minutes, profile.step_goal)
    detail = sleep_breakdown(
        metrics.sleep_hours,
        metrics.deep_sleep_hours,
        metrics.rem_sleep_hours,
        metrics.time_in_bed,
    )
    heart = heart_score(metrics.resting_heart_rate, metrics.hrv)
    rec = recovery_score(metrics.recovery_score, metrics.hrv, metrics.sleep_hours)
    overall = overall_score(act, detail.score, heart, rec)

    battery = energy_battery(metrics, hour=now.hour, wake_hour=profile.wake_hour)
    stress = stress_level(metrics)

    return DailyScores(
        activity=act,
        sleep=detail.score,
        heart=heart,
        recovery=rec,
        overall=overall,
        label=score_label(overall),
        energy_battery=battery,
        energy_label=battery_label(battery),
        stress_level=stress,
        stress_label=stress_label(stress),
        sleep_detail=detail,
    )
