"""Daily report aggregator.

Collects the outputs of every analytics module into a single DailyReport
that is JSON-serializable.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from vitalcore.analytics.form import FormAnalysis
from vitalcore.analytics.race import RacePredictions
from vitalcore.analytics.scores import DailyScores
from vitalcore.analytics.training_load import TrainingLoadState
from vitalcore.analytics.window import TrendResult
from vitalcore.analytics.zones import ZoneBreakdown
from vitalcore.models import RunSplit


@dataclass
class WorkoutInsight:
    """Derived detail for the most recent workout of the day."""

    workout_id: str
    workout_type: str
    category: str
    training_stress: float
    effort: str
    aerobic_effect: float
    anaerobic_effect: float
    zones: ZoneBreakdown
    splits: list[RunSplit] = field(default_factory=list)
    form: FormAnalysis | None = None


@dataclass
class DailyReport:
    """A single day's health and training report."""

    date: str  # ISO date string, e.g. "2026-02-13"
    has_metrics: bool = False

    scores: DailyScores | None = None
    trends: dict[str, TrendResult] = field(default_factory=dict)
    training_load: TrainingLoadState | None = None
    race_predictions: RacePredictions | None = None
    latest_workout: WorkoutInsight | None = None

    # Averages over the trailing week
    avg_steps_7d: float = 0.0
    avg_sleep_7d: float = 0.0
    avg_hrv_7d: float = 0.0
    avg_resting_hr_7d: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return _plain(asdict(self))

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        overall = self.scores.overall if self.scores else None
        status = self.training_load.status.value if self.training_load else None
        acwr = self.training_load.ratio if self.training_load else 0.0
        return (
            f"DailyReport({self.date}: overall={overall}, "
            f"load={status} ({acwr:.2f}), "
            f"battery={self.scores.energy_battery if self.scores else None})"
        )


def _plain(value: Any) -> Any:
    """Replace enums, dates and int-keyed dicts with JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
