"""
Tests for posterior ingestion: Arm, ChangepointSchedule, PosteriorDraws.
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from pybayessurv.core.exceptions import DimensionError, ValidationError
from pybayessurv.posterior import Arm, ChangepointSchedule, PosteriorDraws


# ── Arm ──────────────────────────────────────────────────────────────


class TestArm:

    @pytest.mark.parametrize("value", [1, "1", "control", "CONTROL", Arm.CONTROL, np.int64(1)])
    def test_coerce_control(self, value):
        assert Arm.coerce(value) is Arm.CONTROL

    @pytest.mark.parametrize("value", [2, "2", "treatment", np.int32(2)])
    def test_coerce_treatment(self, value):
        assert Arm.coerce(value) is Arm.TREATMENT

    @pytest.mark.parametrize("value", [0, 3, "placebo", None, True, 1.5])
    def test_coerce_rejects(self, value):
        with pytest.raises(ValidationError, match="arm must be"):
            Arm.coerce(value)


# ── ChangepointSchedule ──────────────────────────────────────────────


class TestChangepointSchedule:

    def test_segments(self):
        s = ChangepointSchedule.from_changepoints([6, 12, 18, 24])
        assert s.n_changepoints == 4
        assert s.n_segments == 5
        assert_array_equal(s.lower, [0, 6, 12, 18, 24])
        assert_array_equal(s.upper, [6, 12, 18, 24, np.inf])
        assert_array_equal(s.widths[:-1], [6, 6, 6, 6])

    def test_scalar_changepoint(self):
        s = ChangepointSchedule.from_changepoints(6.0)
        assert s.n_segments == 2

    def test_segment_of_half_open(self):
        s = ChangepointSchedule.from_changepoints([6, 12])
        assert s.segment_of(0.0) == 0
        assert s.segment_of(6.0) == 0
        assert s.segment_of(6.5) == 1
        assert s.segment_of(12.0) == 1
        assert s.segment_of(100.0) == 2
        assert_array_equal(s.segment_of(np.array([3.0, 12.0, 13.0])), [0, 1, 2])

    def test_immutable_boundaries(self):
        s = ChangepointSchedule.from_changepoints([6, 12])
        with pytest.raises(ValueError):
            s.changepoints[0] = 1.0

    def test_passthrough(self):
        s = ChangepointSchedule.from_changepoints([6, 12])
        assert ChangepointSchedule.from_changepoints(s) is s

    @pytest.mark.parametrize("bad, match", [
        ([], "at least one"),
        ([12, 6], "strictly increasing"),
        ([6, 6], "strictly increasing"),
        ([0, 6], "positive"),
        ([-1, 6], "positive"),
        ([6, np.inf], "non-finite"),
        ([[6, 12]], "1D"),
    ])
    def test_rejects_invalid(self, bad, match):
        with pytest.raises(ValidationError, match=match):
            ChangepointSchedule.from_changepoints(bad)


# ── PosteriorDraws.from_log_scales ───────────────────────────────────


class TestFromLogScales:

    def test_orders_segments(self):
        draws = PosteriorDraws.from_log_scales(
            [6],
            {1: {1: [0.5, 0.6], 0: [0.1, 0.2]}, "2": [[1.0, 1.1], [1.5, 1.6]]},
        )
        assert draws.n_draws == 2
        assert draws.n_segments == 2
        assert_array_equal(draws.log_scales(Arm.CONTROL), [[0.1, 0.2], [0.5, 0.6]])
        assert_array_equal(draws.log_scales("treatment"), [[1.0, 1.1], [1.5, 1.6]])
        assert draws.source == "log_scales"

    def test_values_read_only(self):
        draws = PosteriorDraws.from_log_scales([6], {1: [[0.0], [0.0]], 2: [[0.0], [0.0]]})
        with pytest.raises(ValueError):
            draws.values[0, 0, 0] = 1.0

    def test_does_not_alias_input(self):
        seg = np.array([0.0, 1.0])
        draws = PosteriorDraws.from_log_scales([6], {1: [seg, seg], 2: [seg, seg]})
        seg[0] = 99.0
        assert draws.log_scales(1)[0, 0] == 0.0

    def test_scales_and_hazards(self):
        draws = PosteriorDraws.from_log_scales([6], {1: [[0.0], [1.0]], 2: [[0.0], [1.0]]})
        assert_allclose(draws.scales(1)[:, 0], [1.0, np.e])
        assert_allclose(draws.hazards(1)[:, 0], [1.0, np.exp(-1.0)])

    def test_missing_arm(self):
        with pytest.raises(ValidationError, match="missing arm"):
            PosteriorDraws.from_log_scales([6], {1: [[0.0], [0.0]]})

    def test_duplicate_arm(self):
        with pytest.raises(ValidationError, match="given twice"):
            PosteriorDraws.from_log_scales(
                [6], {1: [[0.0], [0.0]], "control": [[0.0], [0.0]], 2: [[0.0], [0.0]]},
            )

    def test_missing_segment(self):
        with pytest.raises(ValidationError, match=r"missing \[1\]"):
            PosteriorDraws.from_log_scales([6], {1: {0: [0.0]}, 2: {0: [0.0], 1: [0.0]}})

    def test_wrong_segment_count(self):
        with pytest.raises(DimensionError, match="expected 2 segments"):
            PosteriorDraws.from_log_scales([6], {1: [[0.0]], 2: [[0.0], [0.0]]})

    def test_mismatched_draws_within_arm(self):
        with pytest.raises(DimensionError, match="inconsistent draw counts"):
            PosteriorDraws.from_log_scales([6], {1: [[0.0, 1.0], [0.0]], 2: [[0.0], [0.0]]})

    def test_mismatched_draws_across_arms(self):
        with pytest.raises(DimensionError, match="different draw counts"):
            PosteriorDraws.from_log_scales([6], {1: [[0.0, 1.0], [0.0, 1.0]], 2: [[0.0], [0.0]]})

    def test_non_finite_draw(self):
        with pytest.raises(ValidationError, match="non-finite"):
            PosteriorDraws.from_log_scales([6], {1: [[np.nan], [0.0]], 2: [[0.0], [0.0]]})

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError, match="mapping keyed by arm"):
            PosteriorDraws.from_log_scales([6], [[[0.0], [0.0]], [[0.0], [0.0]]])


# ── PosteriorDraws.from_coefficients / from_table ────────────────────


B0 = np.array([2.0, 2.5])
B_ARM = np.array([-0.5, -0.4])
B_PERIOD = np.array([[0.1, 0.2], [0.3, 0.4]])       # (N=2, K=2)
B_INTER = np.array([[0.01, 0.02], [0.03, 0.04]])


class TestFromCoefficients:

    def test_treatment_contrasts(self):
        draws = PosteriorDraws.from_coefficients([6, 12], B0, B_ARM, B_PERIOD, B_INTER)
        control = draws.log_scales(Arm.CONTROL)
        treatment = draws.log_scales(Arm.TREATMENT)

        assert_allclose(control[0], B0)
        assert_allclose(treatment[0], B0 + B_ARM)
        assert_allclose(control[1], B0 + B_PERIOD[:, 0])
        assert_allclose(control[2], B0 + B_PERIOD[:, 1])
        assert_allclose(treatment[2], B0 + B_ARM + B_PERIOD[:, 1] + B_INTER[:, 1])

    def test_single_changepoint_accepts_1d_effects(self):
        draws = PosteriorDraws.from_coefficients([6], B0, B_ARM, [0.1, 0.2], [0.0, 0.0])
        assert_allclose(draws.log_scales(1)[1], B0 + [0.1, 0.2])

    def test_effect_shape_mismatch(self):
        with pytest.raises(DimensionError, match=r"expected shape \(2, 2\)"):
            PosteriorDraws.from_coefficients([6, 12], B0, B_ARM, B_PERIOD.T[:1], B_INTER)

    def test_arm_effect_length_mismatch(self):
        with pytest.raises(DimensionError, match="expected 2 draws"):
            PosteriorDraws.from_coefficients([6, 12], B0, [0.1], B_PERIOD, B_INTER)


class TestFromTable:

    def _table(self):
        return {
            "b_Intercept": B0,
            "b_arm2": B_ARM,
            "b_period2": B_PERIOD[:, 0],
            "b_period3": B_PERIOD[:, 1],
            "b_arm2:period2": B_INTER[:, 0],
            "b_arm2:period3": B_INTER[:, 1],
            "lp__": np.array([-10.0, -11.0]),
        }

    def test_mapping_matches_coefficients(self):
        from_table = PosteriorDraws.from_table(self._table(), [6, 12])
        from_coef = PosteriorDraws.from_coefficients([6, 12], B0, B_ARM, B_PERIOD, B_INTER)
        assert_allclose(from_table.values, from_coef.values)
        assert from_table.source == "table"

    def test_dataframe(self):
        df = pd.DataFrame(self._table())
        draws = PosteriorDraws.from_table(df, [6, 12])
        assert draws.n_draws == 2
        assert_allclose(draws.log_scales(2)[0], B0 + B_ARM)

    def test_custom_names(self):
        table = {
            "Intercept": B0, "trt": B_ARM,
            "p2": B_PERIOD[:, 0], "trt_p2": B_INTER[:, 0],
        }
        draws = PosteriorDraws.from_table(
            table, [6],
            intercept="Intercept", arm="trt",
            period="p{period}", interaction="trt_p{period}",
        )
        assert draws.n_segments == 2
        assert_allclose(
            draws.log_scales(2)[1], B0 + B_ARM + B_PERIOD[:, 0] + B_INTER[:, 0],
        )

    def test_missing_column_lists_available(self):
        table = self._table()
        del table["b_period3"]
        with pytest.raises(ValidationError, match=r"missing column\(s\) \['b_period3'\]"):
            PosteriorDraws.from_table(table, [6, 12])
