"""Running form score from running-dynamics averages.

Scores cadence, ground contact time, vertical oscillation and stride length
against typical targets (cadence ~180 spm, GCT < 200 ms, VO < 8 cm, stride
~0.45 x height).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

import numpy as np

from vitalcore.models import RunningDynamics, WorkoutRecord


class MetricRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    NEEDS_WORK = "Needs Work"


IDEAL_CADENCE = 180.0
IDEAL_GCT_MS = 200.0
IDEAL_VO_CM = 8.0
STRIDE_HEIGHT_RATIO = 0.45


@dataclass
class FormAnalysis:
    """Form score (0-100) with per-metric ratings."""

    score: float
    cadence: float
    cadence_rating: MetricRating
    ground_contact_time: float
    ground_contact_rating: MetricRating
    vertical_oscillation: float
    vertical_oscillation_rating: MetricRating
    stride_length: float
    stride_length_rating: MetricRating
    improvements: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"FormAnalysis(score={self.score:.0f}, cad={self.cadence:.0f}, "
            f"gct={self.ground_contact_time:.0f}ms, "
            f"vo={self.vertical_oscillation:.1f}cm)"
        )


def rate_metric(value: float, ideal: float, tolerance: float) -> MetricRating:
    """Rating by distance from an ideal value."""
    diff = abs(value - ideal)
    if diff < tolerance * 0.5:
        return MetricRating.EXCELLENT
    if diff < tolerance:
        return MetricRating.GOOD
    if diff < tolerance * 1.5:
        return MetricRating.AVERAGE
    return MetricRating.NEEDS_WORK


def rate_metric_inverse(value: float, ideal: float, tolerance: float) -> MetricRating:
    """Rating where anything under the ideal is best."""
    if value < ideal:
        return MetricRating.EXCELLENT
    if value < ideal + tolerance * 0.5:
        return MetricRating.GOOD
    if value < ideal + tolerance:
        return MetricRating.AVERAGE
    return MetricRating.NEEDS_WORK


def _mean_positive(values: Sequence[float | None]) -> float:
    vals = [v for v in values if v is not None and v > 0]
    if not vals:
        return 0.0
    return round(float(np.mean(vals)), 2)


def average_dynamics(workouts: Sequence[WorkoutRecord]) -> RunningDynamics:
    """Mean of each dynamics field across workouts that report it."""
    dyn = [w.dynamics for w in workouts if w.dynamics is not None and w.dynamics.has_data]

    def avg(name: str) -> float | None:
        v = _mean_positive([getattr(d, name) for d in dyn])
        return v or None

    return RunningDynamics(
        stride_length=avg("stride_length"),
        ground_contact_time=avg("ground_contact_time"),
        vertical_oscillation=avg("vertical_oscillation"),
        cadence=avg("cadence"),
        power=avg("power"),
        asymmetry=avg("asymmetry"),
        ground_contact_balance=avg("ground_contact_balance"),
    )


def score_form(dynamics: RunningDynamics, height_cm: float = 175.0) -> FormAnalysis:
    """Score running form from averaged dynamics.

    Missing metrics add nothing to the 50-point base and rate Average.
    """
    cadence = dynamics.cadence or 0.0
    gct = dynamics.ground_contact_time or 0.0
    vo = dynamics.vertical_oscillation or 0.0
    stride = dynamics.stride_length or 0.0

    score = 50.0

    if 175 <= cadence <= 185:
        score += 15
    elif 165 <= cadence < 175 or 185 < cadence <= 195:
        score += 10
    elif cadence >= 155:
        score += 5

    if gct > 0:
        if gct < 200:
            score += 15
        elif gct < 250:
            score += 10
        elif gct < 300:
            score += 5

    if vo > 0:
        if vo < 8:
            score += 15
        elif vo < 10:
            score += 10
        elif vo < 12:
            score += 5

    ideal_stride = height_cm / 100.0 * STRIDE_HEIGHT_RATIO
    if stride > 0 and abs(stride - ideal_stride) < 0.1:
        score += 5

    improvements = []
    if 0 < cadence < 170:
        improvements.append("Increase cadence with shorter, quicker steps")
    if gct > 280:
        improvements.append("Shorten ground contact: quick, light foot strikes")
    if vo > 10:
        improvements.append("Reduce vertical bounce and drive forward instead")

    return FormAnalysis(
        score=min(100.0, score),
        cadence=cadence,
        cadence_rating=(rate_metric(cadence, IDEAL_CADENCE, 10)
                        if cadence > 0 else MetricRating.AVERAGE),
        ground_contact_time=gct,
        ground_contact_rating=(rate_metric_inverse(gct, IDEAL_GCT_MS, 50)
                               if gct > 0 else MetricRating.AVERAGE),
        vertical_oscillation=vo,
        vertical_oscillation_rating=(rate_metric_inverse(vo, IDEAL_VO_CM, 3)
                                     if vo > 0 else MetricRating.AVERAGE),
        stride_length=stride,
        stride_length_rating=(rate_metric(stride, ideal_stride, 0.15)
                              if stride > 0 else MetricRating.AVERAGE),
        improvements=improvements,
    )
