"""Tests for vitalcore.analytics.zones -- heart rate time-in-zone."""

import pytest

from vitalcore.analytics.zones import (
    LAST_SAMPLE_SEC,
    ZONE_NAMES,
    aggregate_zones,
    workout_zones,
    zone_bounds,
    zone_for,
    zones_from_summary,
)

from tests.conftest import make_workout


class TestZoneFor:
    @pytest.mark.parametrize("hr,zone", [
        (100, 1),   # 52.6%
        (113, 1),   # 59.5%
        (114, 2),   # exactly 60%
        (133, 3),   # exactly 70%
        (152, 4),   # exactly 80%
        (170, 4),   # 89.5%
        (171, 5),   # exactly 90%
        (200, 5),   # above max
    ])
    def test_boundaries(self, hr, zone):
        assert zone_for(hr, 190) == zone

    def test_zero_max_hr(self):
        assert zone_for(150, 0) == 1


class TestZoneBounds:
    def test_bounds_for_200(self):
        assert zone_bounds(200) == [(0, 120), (120, 140), (140, 160), (160, 180), (180, 200)]


class TestAggregateZones:
    def test_each_sample_lasts_until_next(self):
        samples = [(0, 100), (60, 140), (180, 175)]
        result = aggregate_zones(samples, max_hr=190, total_duration=300)
        assert result.duration_in(1) == 60.0
        assert result.duration_in(3) == 120.0
        assert result.duration_in(5) == 120.0
        assert result.total_duration == 300.0

    def test_percentages_sum_to_100(self):
        samples = [(0, 100), (60, 140), (180, 175)]
        result = aggregate_zones(samples, max_hr=190, total_duration=300)
        assert sum(z.percentage for z in result.zones) == pytest.approx(100.0, abs=0.2)
        assert result.percentage_in(1) == 20.0
        assert result.percentage_in(3) == 40.0

    def test_time_before_first_sample_credited(self):
        result = aggregate_zones([(60, 100), (120, 175)], max_hr=190, total_duration=300)
        assert result.duration_in(1) == 120.0
        assert result.duration_in(5) == 180.0
        assert result.total_duration == 300.0

    @pytest.mark.parametrize("samples", [
        [(60, 150), (120, 150)],
        [(0, 150), (700, 150)],
        [(-30, 150), (300, 150), (900, 150)],
    ])
    def test_sums_to_workout_duration(self, samples):
        result = aggregate_zones(samples, max_hr=190, total_duration=600)
        assert result.total_duration == 600.0
        assert result.duration_in(3) == 600.0

    def test_last_sample_default_duration(self):
        result = aggregate_zones([(0, 120), (10, 120)], max_hr=190)
        assert result.total_duration == 10.0 + LAST_SAMPLE_SEC

    def test_unsorted_samples(self):
        a = aggregate_zones([(0, 100), (60, 160)], 190, 120)
        b = aggregate_zones([(60, 160), (0, 100)], 190, 120)
        assert [z.duration for z in a.zones] == [z.duration for z in b.zones]

    def test_empty_samples(self):
        result = aggregate_zones([], max_hr=190)
        assert result.total_duration == 0.0
        assert result.current_zone is None
        assert all(z.percentage == 0.0 for z in result.zones)

    def test_current_zone_is_time_weighted(self):
        # 9 minutes easy, 1 minute hard -> mean HR in zone 2
        samples = [(0, 120), (540, 180)]
        result = aggregate_zones(samples, max_hr=190, total_duration=600)
        assert result.current_zone == 2

    def test_zone_names(self):
        result = aggregate_zones([(0, 120)], 190)
        assert [z.name for z in result.zones] == ZONE_NAMES


class TestZonesFromSummary:
    def test_whole_duration_in_average_zone(self):
        result = zones_from_summary(avg_hr=150, max_hr=190, duration=3600)
        assert result.current_zone == 3
        assert result.duration_in(3) == 3600.0
        assert result.percentage_in(3) == 100.0
        assert result.source == "summary"

    def test_no_heart_rate(self):
        result = zones_from_summary(avg_hr=0, max_hr=190, duration=3600)
        assert result.current_zone is None
        assert result.total_duration == 0.0


class TestWorkoutZones:
    def test_prefers_recorded_durations(self):
        w = make_workout(zone_durations={1: 600, 2: 1200, 3: 1200},
                         heart_rate_samples=((0, 180),))
        result = workout_zones(w, 190)
        assert result.source == "recorded"
        assert result.duration_in(2) == 1200.0
        assert result.total_duration == 3000.0

    def test_falls_back_to_samples(self):
        w = make_workout(duration=120, heart_rate_samples=((0, 100), (60, 175)))
        result = workout_zones(w, 190)
        assert result.source == "samples"
        assert result.duration_in(5) == 60.0

    def test_samples_sum_to_duration(self):
        w = make_workout(duration=1800, heart_rate_samples=((120, 140), (900, 160)))
        assert workout_zones(w, 190).total_duration == 1800.0

    def test_falls_back_to_summary(self):
        w = make_workout(avg_heart_rate=160)
        result = workout_zones(w, 190)
        assert result.source == "summary"
        assert result.current_zone == 4
