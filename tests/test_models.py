"""Tests for vitalcore.models -- input records, categorization and splits."""

from datetime import date, datetime

import pytest

from vitalcore.models import (
    DailyMetrics,
    WorkoutCategory,
    WorkoutRecord,
    build_splits,
    categorize_workout,
    latest_per_day,
    split_summary,
)

from tests.conftest import TODAY, make_metrics, make_workout


class TestCategorizeWorkout:
    @pytest.mark.parametrize("name,category", [
        ("Running", WorkoutCategory.RUN),
        ("Treadmill Run", WorkoutCategory.RUN),
        ("Outdoor Walk", WorkoutCategory.WALK),
        ("Hiking", WorkoutCategory.WALK),
        ("Cycling", WorkoutCategory.CYCLE),
        ("Indoor Bike", WorkoutCategory.CYCLE),
        ("Traditional Strength Training", WorkoutCategory.STRENGTH),
        ("Pool Swim", WorkoutCategory.SWIM),
        ("Yoga", WorkoutCategory.YOGA),
        ("Dance", WorkoutCategory.OTHER),
        ("", WorkoutCategory.OTHER),
    ])
    def test_categories(self, name, category):
        assert categorize_workout(name) == category


class TestDailyMetrics:
    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            DailyMetrics(day=TODAY, step_count=-1)

    def test_iso_day_parsed(self):
        assert DailyMetrics(day="2026-03-15").day == TODAY

    def test_consistency(self):
        assert make_metrics().is_consistent()
        assert not make_metrics(deep_sleep_hours=5.0, rem_sleep_hours=3.0).is_consistent()
        assert not make_metrics(sleep_hours=9.0, time_in_bed=8.0).is_consistent()
        assert make_metrics(sleep_hours=9.0, time_in_bed=0.0).is_consistent()

    def test_from_dict_accepts_date_key(self):
        m = DailyMetrics.from_dict({"date": "2026-03-15", "step_count": 1234, "unknown": 1})
        assert m.day == TODAY
        assert m.step_count == 1234

    def test_latest_per_day(self):
        first = make_metrics(TODAY, step_count=100)
        correction = make_metrics(TODAY, step_count=200)
        other = make_metrics(date(2026, 3, 14))
        result = latest_per_day([first, other, correction])
        assert [m.day for m in result] == [date(2026, 3, 14), TODAY]
        assert result[-1].step_count == 200


class TestWorkoutRecord:
    def test_pace_derived(self):
        assert make_workout(duration=3000, distance=10.0).pace == 300.0

    def test_explicit_pace_kept(self):
        assert make_workout(pace=290.0).pace == 290.0

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            make_workout(duration=-5)

    def test_day_and_category(self):
        w = make_workout(workout_type="Outdoor Run")
        assert w.day == TODAY
        assert w.is_run

    def test_from_dict(self):
        w = WorkoutRecord.from_dict({
            "id": 7,
            "timestamp": "2026-03-15T07:30:00Z",
            "type": "Cycling",
            "duration": 1800,
            "distance": 12.5,
            "zone_durations": {"1": 600, "2": 1200},
            "heart_rate_samples": [[0, 110], [60, 130]],
            "dynamics": {"cadence": 85},
        })
        assert w.id == "7"
        assert w.timestamp == datetime(2026, 3, 15, 7, 30)
        assert w.timestamp.tzinfo is None
        assert w.category == WorkoutCategory.CYCLE
        assert w.zone_durations == {1: 600.0, 2: 1200.0}
        assert w.heart_rate_samples == ((0.0, 110.0), (60.0, 130.0))
        assert w.dynamics.cadence == 85


class TestSplits:
    def test_whole_kilometres(self):
        splits = build_splits(make_workout(distance=5.0, duration=1500))
        assert len(splits) == 5
        assert all(not s.is_partial for s in splits)
        assert all(s.pace == 300.0 for s in splits)

    def test_partial_last_split(self):
        splits = build_splits(make_workout(distance=5.5, duration=1650))
        assert len(splits) == 6
        assert splits[-1].is_partial
        assert splits[-1].distance == 0.5
        assert splits[-1].duration == 150.0
        assert not any(s.is_partial for s in splits[:-1])

    def test_untracked_distance(self):
        assert build_splits(make_workout(distance=0.0)) == []

    def test_measured_paces(self):
        splits = build_splits(make_workout(distance=4.0, duration=1200),
                              paces=[320, 310, 300, 290])
        summary = split_summary(splits)
        assert summary.fastest.kilometer == 4
        assert summary.slowest.kilometer == 1
        assert summary.negative_split
        assert summary.pace_variability > 0

    def test_even_pace_summary(self):
        summary = split_summary(build_splits(make_workout(distance=6.0, duration=1800)))
        assert not summary.negative_split
        assert summary.pace_variability == 0.0

    def test_empty_summary(self):
        summary = split_summary([])
        assert summary.fastest is None
