"""Tests for vitalcore.analytics.scores -- composite daily scores."""

from datetime import datetime

import pytest

from vitalcore.analytics.scores import (
    ScoreLabel,
    activity_score,
    heart_score,
    overall_score,
    recovery_score,
    score_day,
    score_label,
    sleep_breakdown,
    sleep_score,
)
from vitalcore.config import UserProfile
from vitalcore.models import DailyMetrics

from tests.conftest import TODAY, make_metrics


class TestActivityScore:
    def test_goal_met(self):
        assert activity_score(10000, 30, 10000) == 100

    def test_half_goal(self):
        assert activity_score(5000, 15, 10000) == 50

    def test_components_capped(self):
        assert activity_score(40000, 300, 10000) == 100

    def test_zero_goal_ignores_steps(self):
        assert activity_score(10000, 30, 0) == 50

    def test_truncates(self):
        # 7777 steps -> 38.885, 20 min -> 33.33; sum 72.2 -> 72
        assert activity_score(7777, 20, 10000) == 72


class TestSleepScore:
    def test_ideal_night_scores_100(self):
        # 8h, 20% deep, 22.5% REM, 94% efficiency
        assert sleep_score(8.0, 1.6, 1.8, 8.5) == 100

    def test_breakdown_components(self):
        b = sleep_breakdown(8.0, 1.6, 1.8, 8.5)
        assert (b.duration, b.deep, b.rem, b.efficiency) == (40, 25, 20, 15)
        assert b.efficiency_pct == 94.1

    def test_no_sleep_is_zero(self):
        assert sleep_score(0, 0, 0, 0) == 0

    def test_short_night(self):
        b = sleep_breakdown(5.0, 0.3, 0.5, 6.0)
        # duration 15, deep 6% -> 10, rem 10% -> 8, efficiency 83% -> 8
        assert b.score == 41

    def test_six_hours_band(self):
        assert sleep_breakdown(6.0, 0.9, 1.2, 6.5).duration == 30

    def test_unknown_time_in_bed_assumes_85_percent(self):
        b = sleep_breakdown(8.0, 1.6, 1.8, 0.0)
        assert b.efficiency_pct == 85.0
        assert b.efficiency == 12

    def test_deep_above_band_gets_middle_tier(self):
        # 40% deep is >= 10 but outside 15-25
        assert sleep_breakdown(8.0, 3.2, 1.8, 8.5).deep == 18


class TestHeartScore:
    def test_no_data_neutral(self):
        assert heart_score(0, 0) == 50

    def test_best_case(self):
        assert heart_score(55, 60) == 100

    def test_resting_bands(self):
        assert heart_score(65, 0) == 70
        assert heart_score(75, 0) == 60
        assert heart_score(90, 0) == 50

    def test_hrv_bands(self):
        assert heart_score(0, 35) == 65
        assert heart_score(0, 20) == 55


class TestRecoveryScore:
    def test_raw_value_used(self):
        assert recovery_score(72, 20, 4) == 72

    def test_raw_value_clamped(self):
        assert recovery_score(130, 0, 0) == 100

    def test_estimated_from_hrv_and_sleep(self):
        # hrv 25 -> 25, sleep 8 -> 50
        assert recovery_score(None, 25, 8) == 75

    def test_zero_raw_falls_back(self):
        assert recovery_score(0, 50, 8) == 100


class TestOverallScore:
    def test_weighted_mean(self):
        # 0.25*80 + 0.30*90 + 0.25*70 + 0.20*60 = 76.5 -> 77
        assert overall_score(80, 90, 70, 60) == 77

    def test_all_zero(self):
        assert overall_score(0, 0, 0, 0) == 0

    def test_all_max(self):
        assert overall_score(100, 100, 100, 100) == 100

    @pytest.mark.parametrize("position", range(4))
    def test_monotone_in_each_subscore(self, position):
        base = [40, 55, 70, 35]
        previous = -1
        for value in range(0, 101, 5):
            scores = list(base)
            scores[position] = value
            current = overall_score(*scores)
            assert current >= previous
            previous = current

    @pytest.mark.parametrize("score,label", [
        (100, ScoreLabel.EXCELLENT),
        (85, ScoreLabel.EXCELLENT),
        (84, ScoreLabel.GOOD),
        (70, ScoreLabel.GOOD),
        (69, ScoreLabel.FAIR),
        (50, ScoreLabel.FAIR),
        (49, ScoreLabel.NEEDS_ATTENTION),
    ])
    def test_labels(self, score, label):
        assert score_label(score) == label


class TestScoreDay:
    def test_all_zero_metrics_in_range(self):
        scores = score_day(DailyMetrics(day=TODAY), now=datetime(2026, 3, 15, 12))
        for value in (scores.activity, scores.sleep, scores.heart, scores.recovery,
                      scores.overall, scores.energy_battery, scores.stress_level):
            assert 0 <= value <= 100
        assert scores.heart == 50
        assert scores.sleep == 0

    def test_bundles_subscores(self):
        m = make_metrics(step_count=10000, active_minutes=30,
                         sleep_hours=8.0, deep_sleep_hours=1.6,
                         rem_sleep_hours=1.8, time_in_bed=8.5,
                         resting_heart_rate=55, hrv=60)
        scores = score_day(m, UserProfile(), now=datetime(2026, 3, 15, 9))
        assert scores.activity == 100
        assert scores.sleep == 100
        assert scores.heart == 100
        assert scores.recovery == 100
        assert scores.overall == 100
        assert scores.label == ScoreLabel.EXCELLENT

    def test_step_goal_from_profile(self):
        m = make_metrics(step_count=5000, active_minutes=0)
        easy = score_day(m, UserProfile(step_goal=5000), now=datetime(2026, 3, 15, 9))
        hard = score_day(m, UserProfile(step_goal=20000), now=datetime(2026, 3, 15, 9))
        assert easy.activity == 50
        assert hard.activity == 12
