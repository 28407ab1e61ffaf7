"""Per-user configuration supplied by the host application."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserProfile:
    """Goals and physiological constants for one user.

    Defaults describe a generic adult and are only a fallback; the host
    should pass real values where it has them.
    """

    step_goal: int = 10_000
    calorie_goal: float = 500.0  # active kcal/day
    max_heart_rate: int = 190
    resting_heart_rate: int = 60
    freeze_reset_period_days: int = 30
    late_in_day_hour: int = 18  # streak "at risk" from this hour on
    wake_hour: int = 7  # energy battery starts draining here
    height_cm: float = 175.0

    def __post_init__(self) -> None:
        if self.max_heart_rate <= 0:
            raise ValueError("max_heart_rate must be positive")
        if self.resting_heart_rate >= self.max_heart_rate:
            raise ValueError(
                f"resting_heart_rate ({self.resting_heart_rate}) must be below "
                f"max_heart_rate ({self.max_heart_rate})"
            )
        if self.freeze_reset_period_days <= 0:
            raise ValueError("freeze_reset_period_days must be positive")
        if not 0 <= self.late_in_day_hour <= 23 or not 0 <= self.wake_hour <= 23:
            raise ValueError("hour settings must be within 0-23")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        """Build a profile, accepting camelCase keys from the settings store."""
        aliases = {
            "stepGoal": "step_goal",
            "calorieGoal": "calorie_goal",
            "maxHeartRate": "max_heart_rate",
            "restingHeartRate": "resting_heart_rate",
            "freezeResetPeriodDays": "freeze_reset_period_days",
            "lateInDayHour": "late_in_day_hour",
            "wakeHour": "wake_hour",
            "heightCm": "height_cm",
        }
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                logger.debug("Ignoring unknown profile key %r", key)
        if "age" in data and "max_heart_rate" not in kwargs:
            kwargs["max_heart_rate"] = estimate_max_heart_rate(int(data["age"]))
        return cls(**kwargs)


def estimate_max_heart_rate(age: int) -> int:
    """Tanaka estimate: 208 - 0.7 x age, clamped to 150-220 bpm."""
    max_hr = 208 - (7 * age) // 10
    return max(150, min(220, max_hr))


def load_profile(path: str | Path | None) -> UserProfile:
    """Load a profile from a JSON file, or return defaults when *path* is None."""
    if path is None:
        return UserProfile()
    with open(path) as f:
        data = json.load(f)
    profile = UserProfile.from_dict(data)
    logger.info("Loaded profile from %s (max HR %d)", path, profile.max_heart_rate)
    return profile
