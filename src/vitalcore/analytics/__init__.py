"""Analytics engine for daily health and training metrics.

Modules:
    window         -- Rolling-window averages and trends
    scores         -- Activity, sleep, heart, recovery and overall scores
    wellness       -- Energy battery and stress level
    training_load  -- Training stress, acute/chronic load, ACWR
    race           -- Riegel race time projections
    zones          -- Heart rate time-in-zone aggregation
    form           -- Running form score from running dynamics
    summary        -- Daily report aggregation
    pipeline       -- Full per-day pipeline
"""

from vitalcore.analytics.window import (
    window_average,
    window_trend,
    describe_trend,
    TrendResult,
    TrendDirection,
)
from vitalcore.analytics.scores import (
    activity_score,
    sleep_score,
    heart_score,
    recovery_score,
    overall_score,
    score_day,
    DailyScores,
)
from vitalcore.analytics.wellness import energy_battery, stress_level
from vitalcore.analytics.training_load import (
    training_stress,
    acwr,
    classify_acwr,
    analyze_training_load,
    load_state_from_totals,
    TrainingLoadState,
    TrainingStatus,
)
from vitalcore.analytics.race import riegel_time, predict_races, RacePredictions
from vitalcore.analytics.zones import (
    zone_for,
    aggregate_zones,
    zones_from_summary,
    workout_zones,
    ZoneBreakdown,
)
from vitalcore.analytics.form import score_form, FormAnalysis
from vitalcore.analytics.summary import DailyReport, WorkoutInsight
from vitalcore.analytics.pipeline import build_daily_report

__all__ = [
    # window
    "window_average",
    "window_trend",
    "describe_trend",
    "TrendResult",
    "TrendDirection",
    # scores
    "activity_score",
    "sleep_score",
    "heart_score",
    "recovery_score",
    "overall_score",
    "score_day",
    "DailyScores",
    # wellness
    "energy_battery",
    "stress_level",
    # training load
    "training_stress",
    "acwr",
    "classify_acwr",
    "analyze_training_load",
    "load_state_from_totals",
    "TrainingLoadState",
    "TrainingStatus",
    # race
    "riegel_time",
    "predict_races",
    "RacePredictions",
    # zones
    "zone_for",
    "aggregate_zones",
    "zones_from_summary",
    "workout_zones",
    "ZoneBreakdown",
    # form
    "score_form",
    "FormAnalysis",
    # summary
    "DailyReport",
    "WorkoutInsight",
    "build_daily_report",
]
