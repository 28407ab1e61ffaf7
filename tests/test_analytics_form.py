"""Tests for vitalcore.analytics.form -- running form score."""

from vitalcore.analytics.form import (
    MetricRating,
    average_dynamics,
    rate_metric,
    rate_metric_inverse,
    score_form,
)
from vitalcore.models import RunningDynamics

from tests.conftest import make_dynamics, make_workout


class TestRatings:
    def test_rate_metric(self):
        assert rate_metric(180, 180, 10) == MetricRating.EXCELLENT
        assert rate_metric(172, 180, 10) == MetricRating.GOOD
        assert rate_metric(167, 180, 10) == MetricRating.AVERAGE
        assert rate_metric(150, 180, 10) == MetricRating.NEEDS_WORK

    def test_rate_metric_inverse(self):
        assert rate_metric_inverse(190, 200, 50) == MetricRating.EXCELLENT
        assert rate_metric_inverse(210, 200, 50) == MetricRating.GOOD
        assert rate_metric_inverse(240, 200, 50) == MetricRating.AVERAGE
        assert rate_metric_inverse(260, 200, 50) == MetricRating.NEEDS_WORK


class TestScoreForm:
    def test_efficient_runner(self):
        dyn = RunningDynamics(cadence=180, ground_contact_time=190,
                              vertical_oscillation=7.5, stride_length=0.79)
        result = score_form(dyn, height_cm=175)
        # 50 + 15 + 15 + 15 + 5
        assert result.score == 100.0
        assert result.improvements == []
        assert result.cadence_rating == MetricRating.EXCELLENT

    def test_typical_runner(self):
        result = score_form(make_dynamics(), height_cm=175)
        # 50 + 15 (178 spm) + 10 (240 ms) + 10 (9 cm) + 5 (0.8 m vs 0.79)
        assert result.score == 90.0

    def test_hints_for_poor_form(self):
        dyn = RunningDynamics(cadence=160, ground_contact_time=300,
                              vertical_oscillation=11)
        result = score_form(dyn)
        assert len(result.improvements) == 3
        assert result.cadence_rating == MetricRating.NEEDS_WORK

    def test_missing_metrics(self):
        result = score_form(RunningDynamics())
        assert result.score == 50.0
        assert result.ground_contact_rating == MetricRating.AVERAGE
        assert result.stride_length_rating == MetricRating.AVERAGE


class TestAverageDynamics:
    def test_mean_over_workouts_with_data(self):
        workouts = [
            make_workout(workout_id="a", dynamics=make_dynamics(cadence=170)),
            make_workout(workout_id="b", dynamics=make_dynamics(cadence=180)),
            make_workout(workout_id="c"),  # no dynamics
        ]
        avg = average_dynamics(workouts)
        assert avg.cadence == 175.0
        assert avg.ground_contact_time == 240.0
        assert avg.power is None

    def test_no_data(self):
        assert not average_dynamics([make_workout()]).has_data
