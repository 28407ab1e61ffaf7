"""Rolling-window averages and trends over daily records.

This is the shared foundation for the other analytics modules.  Windows are
calendar-based: a 7-day window ending today covers ``(today - 7, today]``.
Days without a record are skipped rather than counted as zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any, Sequence

import numpy as np


# Percentage change inside +-STABLE_BAND counts as "stable"
STABLE_BAND = 2.0


class TrendDirection(str, Enum):
    """Direction of a trend after sign inversion."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass
class TrendResult:
    """Trend of one field between two adjacent windows."""

    field: str
    recent_mean: float
    prior_mean: float
    change_pct: float  # sign already inverted when requested
    direction: TrendDirection

    def __repr__(self) -> str:
        return (
            f"TrendResult({self.field}: {self.change_pct:+.1f}% "
            f"{self.direction.value})"
        )


# ---------------------------------------------------------------------------
# Window slicing
# ---------------------------------------------------------------------------


def _record_day(record: Any) -> date:
    day = getattr(record, "day", None)
    if day is None:
        raise ValueError(f"record has no 'day' attribute: {record!r}")
    return day


def window_values(
    records: Sequence[Any],
    field: str,
    end: date,
    days: int,
) -> list[float]:
    """Values of *field* for records whose day lies in ``(end - days, end]``.

    One value per calendar day: when a day has several records the last one
    wins (a same-day correction supersedes the earlier record).
    """
    if days <= 0:
        return []
    start = end - timedelta(days=days)
    by_day: dict[date, float] = {}
    for rec in records:
        d = _record_day(rec)
        if start < d <= end:
            by_day[d] = float(getattr(rec, field))
    return [by_day[d] for d in sorted(by_day)]


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def window_average(
    records: Sequence[Any],
    field: str,
    days: int,
    today: date,
) -> float:
    """Mean of *field* over the last *days* calendar days ending *today*.

    Returns 0.0 when no day in the window has a record.
    """
    return round(_mean(window_values(records, field, today, days)), 2)


def window_trend(
    records: Sequence[Any],
    field: str,
    recent_days: int,
    prior_days: int,
    today: date,
    invert: bool = False,
) -> float:
    """Percentage change of the recent window against the window before it.

    ``(recent_mean - prior_mean) / prior_mean * 100``.  Returns 0.0 when the
    prior window holds fewer than *prior_days* records or its mean is 0.
    With *invert* the sign is flipped so that a positive value always means
    "better" (e.g. a falling resting heart rate).
    """
    recent = window_values(records, field, today, recent_days)
    prior_end = today - timedelta(days=recent_days)
    prior = window_values(records, field, prior_end, prior_days)

    if len(prior) < prior_days:
        return 0.0
    prior_mean = _mean(prior)
    if prior_mean == 0:
        return 0.0

    change = (_mean(recent) - prior_mean) / prior_mean * 100.0
    if invert:
        change = -change
    return round(change, 2)


def trend_direction(change_pct: float, band: float = STABLE_BAND) -> TrendDirection:
    """Classify an (already inverted) percentage change."""
    if change_pct > band:
        return TrendDirection.IMPROVING
    if change_pct < -band:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def describe_trend(
    records: Sequence[Any],
    field: str,
    recent_days: int,
    prior_days: int,
    today: date,
    invert: bool = False,
) -> TrendResult:
    """Window means, percentage change and direction in one result."""
    recent_mean = _mean(window_values(records, field, today, recent_days))
    prior_end = today - timedelta(days=recent_days)
    prior_mean = _mean(window_values(records, field, prior_end, prior_days))
    change = window_trend(records, field, recent_days, prior_days, today, invert)
    return TrendResult(
        field=field,
        recent_mean=round(recent_mean, 2),
        prior_mean=round(prior_mean, 2),
        change_pct=change,
        direction=trend_direction(change),
    )
