"""
Tests for evaluate(): piece-wise exponential survival from log-scale draws.

Closed-form reference: with hazard exp(-ls_j) on segment j,
    S(t) = exp(-sum_j w_j(t) * exp(-ls_j))
where w_j(t) is the time spent in segment j by time t.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from pybayessurv.core.exceptions import DimensionError, ValidationError
from pybayessurv.posterior import Arm, PosteriorDraws
from pybayessurv.survival import evaluate


# ── Fixtures ─────────────────────────────────────────────────────────

# One draw, scale 1 in both segments of a [6] schedule
UNIT = {1: {0: [0.0], 1: [0.0]}, 2: {0: [0.0], 1: [0.0]}}

# One draw, log_scale 1 everywhere on a [6, 12] schedule
LOG_ONE = {1: {0: [1.0], 1: [1.0], 2: [1.0]}, 2: {0: [1.0], 1: [1.0], 2: [1.0]}}


class TestConcreteScenarios:

    def test_before_first_changepoint(self):
        assert_allclose(evaluate(3.0, 1, [6], UNIT), [np.exp(-3.0)], rtol=1e-14)

    def test_at_changepoint(self):
        assert_allclose(evaluate(6.0, 1, [6], UNIT), [np.exp(-6.0)], rtol=1e-14)

    def test_in_open_segment(self):
        s = evaluate(10.0, 1, [6], UNIT)
        assert_allclose(s, [np.exp(-6.0) * np.exp(-4.0)], rtol=1e-14)
        assert_allclose(s, [np.exp(-10.0)], rtol=1e-14)

    def test_two_changepoints_scale_e(self):
        s = evaluate(12.0, 1, [6, 12], LOG_ONE)
        assert_allclose(s, [np.exp(-12.0 / np.e)], rtol=1e-14)

    def test_different_segment_hazards(self):
        """Segment 0 scale 2, segment 1 scale 4: S(10) = exp(-6/2 - 4/4)."""
        ls = {1: [[np.log(2.0)], [np.log(4.0)]], 2: [[0.0], [0.0]]}
        assert_allclose(evaluate(10.0, 1, [6], ls), [np.exp(-3.0 - 1.0)], rtol=1e-14)

    def test_arm_selects_columns(self):
        ls = {1: [[0.0], [0.0]], 2: [[np.log(2.0)], [np.log(2.0)]]}
        assert_allclose(evaluate(4.0, Arm.CONTROL, [6], ls), [np.exp(-4.0)])
        assert_allclose(evaluate(4.0, Arm.TREATMENT, [6], ls), [np.exp(-2.0)])

    def test_only_selected_arm_required(self):
        ls = {"treatment": {0: [0.0], 1: [0.0]}}
        assert_allclose(evaluate(1.0, 2, [6], ls), [np.exp(-1.0)])

    def test_one_value_per_draw(self):
        ls = {1: [[0.0, np.log(2.0), np.log(4.0)], [0.0, 0.0, 0.0]], 2: [[0.0] * 3] * 2}
        s = evaluate(2.0, 1, [6], ls)
        assert s.shape == (3,)
        assert_allclose(s, np.exp([-2.0, -1.0, -0.5]))

    def test_accepts_posterior_draws(self):
        draws = PosteriorDraws.from_log_scales([6], UNIT)
        assert_allclose(evaluate(3.0, 1, [6], draws), [np.exp(-3.0)])

    def test_posterior_draws_schedule_mismatch(self):
        draws = PosteriorDraws.from_log_scales([6], UNIT)
        with pytest.raises(ValidationError, match="do not match"):
            evaluate(3.0, 1, [7], draws)


class TestProperties:

    @pytest.fixture
    def random_log_scales(self, rng):
        n = 200
        return {
            arm: {j: rng.normal(2.5, 0.5, n) for j in range(5)}
            for arm in (1, 2)
        }

    def test_zero_time_is_one(self, random_log_scales):
        for arm in (1, 2):
            s = evaluate(0.0, arm, [6, 12, 18, 24], random_log_scales)
            assert_array_equal(s, np.ones(200))

    def test_zero_time_is_one_with_extreme_draws(self):
        ls = {1: [[-800.0, 800.0], [-800.0, 800.0]], 2: [[0.0, 0.0], [0.0, 0.0]]}
        assert_array_equal(evaluate(0.0, 1, [6], ls), [1.0, 1.0])

    def test_non_increasing_in_time(self, random_log_scales):
        grid = np.linspace(0.0, 40.0, 81)
        curve = np.array([evaluate(t, 1, [6, 12, 18, 24], random_log_scales) for t in grid])
        assert np.all(np.diff(curve, axis=0) <= 0)

    def test_in_unit_interval(self, random_log_scales):
        for t in (0.5, 6.0, 13.0, 30.0, 100.0):
            s = evaluate(t, 2, [6, 12, 18, 24], random_log_scales)
            assert np.all(s > 0)
            assert np.all(s <= 1)

    @pytest.mark.parametrize("c", [6.0, 12.0, 18.0, 24.0])
    def test_continuous_at_changepoints(self, random_log_scales, c):
        cps = [6, 12, 18, 24]
        at = evaluate(c, 1, cps, random_log_scales)
        left = evaluate(c - 1e-9, 1, cps, random_log_scales)
        right = evaluate(c + 1e-9, 1, cps, random_log_scales)
        assert_allclose(at, left, rtol=1e-8)
        assert_allclose(at, right, rtol=1e-8)

    def test_idempotent_and_pure(self, random_log_scales):
        before = {a: {j: v.copy() for j, v in segs.items()} for a, segs in random_log_scales.items()}
        first = evaluate(15.0, 1, [6, 12, 18, 24], random_log_scales)
        second = evaluate(15.0, 1, [6, 12, 18, 24], random_log_scales)
        assert_array_equal(first, second)
        for a in before:
            for j in before[a]:
                assert_array_equal(before[a][j], random_log_scales[a][j])

    def test_extreme_hazard_underflows_to_zero(self):
        ls = {1: [[-800.0], [0.0]], 2: [[0.0], [0.0]]}
        assert_array_equal(evaluate(1.0, 1, [6], ls), [0.0])


class TestPreconditions:

    @pytest.mark.parametrize("t", [-1.0, -1e-12, np.nan, np.inf])
    def test_rejects_bad_time(self, t):
        with pytest.raises(ValidationError):
            evaluate(t, 1, [6], UNIT)

    def test_rejects_array_time(self):
        with pytest.raises(ValidationError, match="scalar"):
            evaluate([1.0, 2.0], 1, [6], UNIT)

    @pytest.mark.parametrize("cps", [[12, 6], [6, 6], [], [0, 6]])
    def test_rejects_bad_changepoints(self, cps):
        with pytest.raises(ValidationError):
            evaluate(3.0, 1, cps, UNIT)

    def test_rejects_unknown_arm(self):
        with pytest.raises(ValidationError, match="arm must be"):
            evaluate(3.0, 3, [6], UNIT)

    def test_rejects_missing_arm(self):
        with pytest.raises(ValidationError, match="exactly once"):
            evaluate(3.0, 2, [6], {1: UNIT[1]})

    def test_rejects_mismatched_draw_counts(self):
        ls = {1: {0: [0.0, 0.1], 1: [0.0]}}
        with pytest.raises(DimensionError, match="inconsistent draw counts"):
            evaluate(3.0, 1, [6], ls)

    def test_rejects_segment_count_mismatch(self):
        with pytest.raises(ValidationError, match="missing"):
            evaluate(3.0, 1, [6, 12], UNIT)

    def test_rejects_draw_count_mismatch_across_arms(self):
        ls = {1: {0: [0.0, 0.1], 1: [0.0, 0.1]}, 2: {0: [0.0], 1: [0.0]}}
        with pytest.raises(DimensionError, match="different draw counts"):
            evaluate(3.0, 1, [6], ls)

    def test_validates_unselected_arm_segments(self):
        ls = {1: {0: [0.0], 1: [0.0]}, 2: {0: [0.0]}}
        with pytest.raises(ValidationError, match="missing"):
            evaluate(3.0, 1, [6], ls)
