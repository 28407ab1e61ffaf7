"""Energy battery and stress level heuristics.

Both prefer a device-supplied 0-10 reading (scaled x10) and otherwise
estimate from sleep, HRV, resting heart rate and the day's activity.
"""

from __future__ import annotations

from vitalcore.models import DailyMetrics


# Sleep assumed when no metrics exist for the day at all
ASSUMED_SLEEP_HOURS = 7.0

# Energy battery
BATTERY_DRAIN_PER_HOUR = 4
BATTERY_MIN = 5
BATTERY_MAX = 100
CALORIES_PER_POINT = 50
STEPS_PER_POINT = 2000
HRV_RECHARGE_THRESHOLD = 50.0
HRV_RECHARGE_BONUS = 10

# Stress
STRESS_BASE = 30

BATTERY_LABELS = [
    (80, "Fully Charged"),
    (60, "Good Energy"),
    (40, "Moderate"),
    (20, "Low Energy"),
    (0, "Recharge"),
]

STRESS_LABELS = [
    (86, "High"),
    (71, "Elevated"),
    (51, "Moderate"),
    (26, "Relaxed"),
    (0, "Calm"),
]


def _band_label(value: int, bands: list[tuple[int, str]]) -> str:
    for lower, label in bands:
        if value >= lower:
            return label
    return bands[-1][1]


def energy_battery(
    metrics: DailyMetrics | None,
    hour: int,
    wake_hour: int = 7,
) -> int:
    """Estimate remaining energy (5-100) at *hour* of the day.

    Args:
        metrics: Today's metrics, or None if nothing was recorded yet.
        hour: Current hour of day (0-23).
        wake_hour: Reference wake-up hour; drain starts here.
    """
    if metrics is not None and metrics.energy_level:
        return int(max(0, min(BATTERY_MAX, metrics.energy_level * 10)))

    sleep_hours = metrics.sleep_hours if metrics is not None else ASSUMED_SLEEP_HOURS
    active_calories = metrics.active_calories if metrics is not None else 0.0
    steps = int(metrics.step_count) if metrics is not None else 0
    hrv = metrics.hrv if metrics is not None else 0.0

    battery = min(BATTERY_MAX, int(sleep_hours / 8.0 * 100))
    battery -= max(0, hour - wake_hour) * BATTERY_DRAIN_PER_HOUR
    battery -= int(active_calories / CALORIES_PER_POINT) + steps // STEPS_PER_POINT
    if hrv > HRV_RECHARGE_THRESHOLD:
        battery += HRV_RECHARGE_BONUS

    return max(BATTERY_MIN, min(BATTERY_MAX, battery))


def battery_label(level: int) -> str:
    return _band_label(level, BATTERY_LABELS)


def stress_level(metrics: DailyMetrics | None) -> int:
    """Estimate stress (0-100) from HRV, resting heart rate and sleep."""
    if metrics is not None and metrics.stress_level:
        return int(max(0, min(100, metrics.stress_level * 10)))

    hrv = metrics.hrv if metrics is not None else 0.0
    resting_hr = metrics.resting_heart_rate if metrics is not None else 0.0
    sleep_hours = metrics.sleep_hours if metrics is not None else ASSUMED_SLEEP_HOURS

    stress = STRESS_BASE

    # Lower HRV -> higher stress
    if hrv > 0:
        if hrv < 25:
            stress += 40
        elif hrv < 40:
            stress += 25
        elif hrv < 50:
            stress += 10
        else:
            stress -= 10

    if resting_hr > 0:
        if resting_hr > 80:
            stress += 20
        elif resting_hr > 70:
            stress += 10
        elif resting_hr < 60:
            stress -= 10

    if sleep_hours < 6:
        stress += 15
    elif sleep_hours > 7:
        stress -= 10

    return max(0, min(100, stress))


def stress_label(level: int) -> str:
    return _band_label(level, STRESS_LABELS)
