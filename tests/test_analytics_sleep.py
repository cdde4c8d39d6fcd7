"""Tests for sleepsense.analytics.sleep -- score combination and stage classification."""

import pytest

from sleepsense.analytics.sleep import (
    combine_scores,
    classify_stage,
    SleepStage,
    MOVEMENT_WEIGHT,
    HR_WEIGHT,
)

MOVEMENT_SCORES = [40, 70, 95, 100]
HR_SCORES = [0, 50, 70, 95]


class TestCombineScores:
    def test_weights(self):
        assert MOVEMENT_WEIGHT + HR_WEIGHT == pytest.approx(1.0)

    def test_still_and_resting(self):
        assert combine_scores(95, 95) == 95

    def test_mild_movement_resting(self):
        # 70*0.6 + 95*0.4 = 42 + 38
        assert combine_scores(70, 95) == 80

    def test_moving_no_hr(self):
        assert combine_scores(40, 0) == 24

    def test_no_accel_no_hr(self):
        assert combine_scores(100, 0) == 60

    def test_no_accel_resting(self):
        assert combine_scores(100, 95) == 98

    def test_bounds(self):
        assert combine_scores(0, 0) == 0
        assert combine_scores(100, 100) == 100

    def test_always_int_in_range(self):
        for m in MOVEMENT_SCORES:
            for h in HR_SCORES:
                score = combine_scores(m, h)
                assert isinstance(score, int)
                assert 0 <= score <= 100


class TestClassifyStage:
    @pytest.mark.parametrize("hr", [None, 45, 70, 150])
    def test_moving_is_awake(self, hr):
        assert classify_stage(40, hr) == SleepStage.AWAKE

    def test_still_low_hr_is_deep(self):
        assert classify_stage(95, 55) == SleepStage.DEEP

    def test_still_high_hr_is_rem(self):
        assert classify_stage(95, 70) == SleepStage.REM

    def test_deep_rem_boundary(self):
        assert classify_stage(95, 59.9) == SleepStage.DEEP
        assert classify_stage(95, 60) == SleepStage.REM

    def test_no_accel_uses_same_rules(self):
        assert classify_stage(100, 50) == SleepStage.DEEP
        assert classify_stage(100, 80) == SleepStage.REM

    @pytest.mark.parametrize("movement", [95, 100])
    def test_still_without_hr_is_light(self, movement):
        # Missing HR must not read as a very low HR
        assert classify_stage(movement, None) == SleepStage.LIGHT

    @pytest.mark.parametrize("hr", [None, 45, 70, 150])
    def test_mild_movement_is_light(self, hr):
        assert classify_stage(70, hr) == SleepStage.LIGHT

    def test_labels(self):
        assert [s.value for s in SleepStage] == ["Awake", "Light", "Deep", "REM"]

    def test_total(self):
        for m in MOVEMENT_SCORES:
            for hr in [None, 30, 45, 59, 60, 90, 200]:
                assert classify_stage(m, hr) in set(SleepStage)
