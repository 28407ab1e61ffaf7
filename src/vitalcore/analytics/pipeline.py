"""Analytics pipeline: wire daily metrics and workouts into a DailyReport.

This module consumes the metric and workout histories produced by
:mod:`vitalcore.loader` (or supplied by a host application) and runs every
pure analytics component for one day.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Sequence

from vitalcore.analytics.form import average_dynamics, score_form
from vitalcore.analytics.race import predict_races
from vitalcore.analytics.scores import score_day
from vitalcore.analytics.summary import DailyReport, WorkoutInsight
from vitalcore.analytics.training_load import (
    aerobic_effect,
    analyze_training_load,
    anaerobic_effect,
    effort_level,
    training_stress,
)
from vitalcore.analytics.window import describe_trend, window_average
from vitalcore.analytics.zones import workout_zones
from vitalcore.config import UserProfile
from vitalcore.models import DailyMetrics, WorkoutRecord, build_splits, latest_per_day

logger = logging.getLogger(__name__)


TREND_RECENT_DAYS = 7
TREND_PRIOR_DAYS = 7

# field -> invert (a falling resting HR is an improvement)
TREND_FIELDS = {
    "step_count": False,
    "sleep_hours": False,
    "hrv": False,
    "resting_heart_rate": True,
}


def workout_insight(workout: WorkoutRecord, profile: UserProfile) -> WorkoutInsight:
    """Zones, effort, training effect, splits and form for one workout."""
    max_hr = profile.max_heart_rate
    zones = workout_zones(workout, max_hr)
    form = None
    if workout.is_run and workout.dynamics is not None and workout.dynamics.has_data:
        form = score_form(average_dynamics([workout]), profile.height_cm)

    return WorkoutInsight(
        workout_id=workout.id,
        workout_type=workout.workout_type,
        category=workout.category.value,
        training_stress=training_stress(workout, max_hr, profile.resting_heart_rate),
        effort=effort_level(workout.avg_heart_rate, max_hr).value,
        aerobic_effect=aerobic_effect(workout.duration, workout.avg_heart_rate, max_hr),
        anaerobic_effect=anaerobic_effect(zones),
        zones=zones,
        splits=build_splits(workout) if workout.is_run else [],
        form=form,
    )


def build_daily_report(
    day: date | str,
    metrics_history: Sequence[DailyMetrics],
    workouts: Sequence[WorkoutRecord],
    profile: UserProfile | None = None,
    now: datetime | None = None,
) -> DailyReport:
    """Run the full analytics pipeline for one day.

    Args:
        day: The day to report on.
        metrics_history: Daily metrics, any order; later same-day records win.
        workouts: Workout history, any order.
        profile: User goals and heart rate constants.
        now: Wall-clock time for the energy battery.  Defaults to the end
            of *day* when *day* is in the past, otherwise the current time.

    Returns:
        A populated DailyReport.  Sections with no input data stay None.
    """
    if isinstance(day, str):
        day = date.fromisoformat(day)
    profile = profile or UserProfile()
    if now is None:
        now = datetime.now()
        if day < now.date():
            now = datetime.combine(day, time(23, 0))

    history = latest_per_day(metrics_history)
    report = DailyReport(date=day.isoformat())

    # --- Scores ---
    today_metrics = next((m for m in history if m.day == day), None)
    if today_metrics is not None:
        report.has_metrics = True
        report.scores = score_day(today_metrics, profile, now)
        if not today_metrics.is_consistent():
            logger.warning("Sleep stages for %s exceed sleep or time in bed", day)
    else:
        logger.info("No metrics recorded for %s", day)

    # --- Trends and averages ---
    if history:
        for name, invert in TREND_FIELDS.items():
            report.trends[name] = describe_trend(
                history, name, TREND_RECENT_DAYS, TREND_PRIOR_DAYS, day, invert
            )
        report.avg_steps_7d = window_average(history, "step_count", 7, day)
        report.avg_sleep_7d = window_average(history, "sleep_hours", 7, day)
        report.avg_hrv_7d = window_average(history, "hrv", 7, day)
        report.avg_resting_hr_7d = window_average(history, "resting_heart_rate", 7, day)

    # --- Training ---
    past = [w for w in workouts if w.day <= day]
    if past:
        report.training_load = analyze_training_load(past, day, profile)
        report.race_predictions = predict_races(past, day)

        todays = sorted((w for w in past if w.day == day), key=lambda w: w.timestamp)
        if todays:
            report.latest_workout = workout_insight(todays[-1], profile)

    logger.debug("Built %r", report)
    return report
