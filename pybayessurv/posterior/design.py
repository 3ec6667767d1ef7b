"""
PosteriorDraws: immutable container for piece-wise exponential posteriors.

Holds the log-scale parameter of every (arm, segment) cell for every
posterior draw, together with the changepoint schedule that defines the
segments. Validates inputs at construction time; all downstream code
trusts clean data.

The log-scale array is laid out once at ingestion as (arm, segment, draw),
so evaluation indexes by position and never looks parameters up by name.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from pybayessurv.core.exceptions import DimensionError, ValidationError
from pybayessurv.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_min_samples,
    check_strictly_increasing,
)

if TYPE_CHECKING:
    import pandas as pd


class Arm(IntEnum):
    """Treatment arm. Values match the 1/2 coding of the trial data."""

    CONTROL = 1
    TREATMENT = 2

    @classmethod
    def coerce(cls, value) -> Arm:
        """Accept an Arm, 1/2, "1"/"2", or a member name (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.upper() in cls.__members__:
                return cls[text.upper()]
            if text.isdigit():
                value = int(text)
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                pass
        raise ValidationError(
            f"arm must be one of {[a.value for a in cls]} or "
            f"{[a.name.lower() for a in cls]}, got {value!r}"
        )


@dataclass(frozen=True)
class ChangepointSchedule:
    """Ordered segment boundaries of a piece-wise exponential model.

    K changepoints c1 < ... < cK define K + 1 segments
    [0, c1], (c1, c2], ..., (cK, inf). The final segment is open-ended.

    Parameters
    ----------
    changepoints : NDArray
        (K,) strictly increasing, finite, positive boundaries.
    """

    changepoints: NDArray

    @classmethod
    def from_changepoints(cls, changepoints) -> ChangepointSchedule:
        """Create and validate a schedule.

        Raises
        ------
        ValidationError
            If the boundaries are empty, non-finite, non-positive or not
            strictly increasing.
        """
        if isinstance(changepoints, ChangepointSchedule):
            return changepoints

        arr = check_array(changepoints, "changepoints")
        if arr.ndim == 0:
            arr = arr.reshape(1)
        check_1d(arr, "changepoints")

        if len(arr) == 0:
            raise ValidationError("changepoints must contain at least one boundary")

        check_finite(arr, "changepoints")

        if arr[0] <= 0:
            raise ValidationError(
                f"changepoints must be positive, got first boundary {arr[0]}"
            )

        check_strictly_increasing(arr, "changepoints")

        arr = arr.copy()
        arr.setflags(write=False)
        return cls(changepoints=arr)

    @property
    def n_changepoints(self) -> int:
        return len(self.changepoints)

    @property
    def n_segments(self) -> int:
        """Number of segments (changepoints + 1)."""
        return len(self.changepoints) + 1

    @property
    def lower(self) -> NDArray:
        """(K+1,) left boundary of each segment."""
        return np.concatenate(([0.0], self.changepoints))

    @property
    def upper(self) -> NDArray:
        """(K+1,) right boundary of each segment; inf for the last."""
        return np.concatenate((self.changepoints, [np.inf]))

    @property
    def widths(self) -> NDArray:
        """(K+1,) segment widths; inf for the open segment."""
        return self.upper - self.lower

    def segment_of(self, t):
        """Index of the segment containing t, using (c_j, c_{j+1}].

        t = 0 and t = c1 both map to segment 0. Accepts scalars or arrays.
        """
        idx = np.searchsorted(self.changepoints, t, side='left')
        if np.ndim(idx) == 0:
            return int(idx)
        return idx

    def __len__(self) -> int:
        return self.n_changepoints

    def __repr__(self) -> str:
        return f"ChangepointSchedule({self.changepoints.tolist()})"


def stack_segments(segments, n_segments: int, name: str) -> NDArray:
    """Order a segment -> draws mapping into a (n_segments, N) array.

    ``segments`` is either a mapping keyed by segment index 0..K or an
    ordered sequence of K + 1 draw sequences.
    """
    if isinstance(segments, Mapping):
        keys = set()
        for key in segments:
            if isinstance(key, bool) or not isinstance(key, (int, np.integer)):
                raise ValidationError(
                    f"{name}: segment keys must be integers, got {key!r}"
                )
            keys.add(int(key))
        expected = set(range(n_segments))
        if keys != expected:
            missing = sorted(expected - keys)
            extra = sorted(keys - expected)
            raise ValidationError(
                f"{name}: expected segments 0..{n_segments - 1}, "
                f"missing {missing}, unexpected {extra}"
            )
        ordered = [segments[j] for j in range(n_segments)]
    else:
        ordered = list(segments)
        if len(ordered) != n_segments:
            raise DimensionError(
                f"{name}: expected {n_segments} segments, got {len(ordered)}"
            )

    rows = []
    for j, seq in enumerate(ordered):
        row = check_array(seq, f"{name}[{j}]")
        if row.ndim == 0:
            row = row.reshape(1)
        check_1d(row, f"{name}[{j}]")
        rows.append(row)

    lengths = {len(r) for r in rows}
    if len(lengths) > 1:
        details = ", ".join(f"segment {j}={len(r)}" for j, r in enumerate(rows))
        raise DimensionError(f"{name}: inconsistent draw counts: {details}")

    out = np.vstack(rows)
    check_min_samples(out.T, 1, name)
    check_finite(out, name)
    return out


def _draw_column(values, name: str, n_draws: int | None) -> NDArray:
    arr = check_array(values, name)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    check_1d(arr, name)
    check_finite(arr, name)
    if n_draws is not None and len(arr) != n_draws:
        raise DimensionError(
            f"{name}: expected {n_draws} draws, got {len(arr)}"
        )
    return arr


@dataclass(frozen=True)
class PosteriorDraws:
    """Immutable posterior sample set of a two-arm piece-wise model.

    Parameters
    ----------
    schedule : ChangepointSchedule
        Segment boundaries.
    values : NDArray
        (2, K+1, N) log-scale parameters indexed by
        (arm - 1, segment, draw). Read-only.
    source : str
        How the draws were ingested ('log_scales', 'coefficients', 'table').
    """

    schedule: ChangepointSchedule
    values: NDArray
    source: str

    @classmethod
    def _build(cls, schedule: ChangepointSchedule, values: NDArray, source: str) -> PosteriorDraws:
        values = np.array(values, dtype=np.float64)
        values.setflags(write=False)
        return cls(schedule=schedule, values=values, source=source)

    @classmethod
    def from_log_scales(cls, changepoints, log_scales) -> PosteriorDraws:
        """Ingest log-scale draws keyed by arm then segment.

        Parameters
        ----------
        changepoints : array-like or ChangepointSchedule
            Segment boundaries.
        log_scales : mapping
            ``{arm: {segment: draws}}`` for both arms. Arm keys may be
            anything ``Arm.coerce`` accepts; segment values may also be an
            ordered list of K + 1 draw sequences.

        Raises
        ------
        ValidationError
            If an arm or segment is missing or a key is not recognised.
        DimensionError
            If draw counts differ across arms or segments.
        """
        schedule = ChangepointSchedule.from_changepoints(changepoints)

        if not isinstance(log_scales, Mapping):
            raise ValidationError(
                f"log_scales must be a mapping keyed by arm, "
                f"got {type(log_scales).__name__}"
            )

        by_arm: dict[Arm, Any] = {}
        for key, segments in log_scales.items():
            arm = Arm.coerce(key)
            if arm in by_arm:
                raise ValidationError(f"log_scales: arm {arm.name} given twice")
            by_arm[arm] = segments

        missing = [a.name for a in Arm if a not in by_arm]
        if missing:
            raise ValidationError(f"log_scales: missing arm(s) {missing}")

        stacked = [
            stack_segments(by_arm[arm], schedule.n_segments, f"log_scales[{arm.name}]")
            for arm in Arm
        ]
        if stacked[0].shape[1] != stacked[1].shape[1]:
            raise DimensionError(
                f"log_scales: arms have different draw counts: "
                f"CONTROL={stacked[0].shape[1]}, TREATMENT={stacked[1].shape[1]}"
            )

        return cls._build(schedule, np.stack(stacked), 'log_scales')

    @classmethod
    def from_coefficients(
        cls,
        changepoints,
        intercept,
        arm_effect,
        period_effects,
        interaction_effects,
    ) -> PosteriorDraws:
        """Ingest regression coefficients of ``log(scale) ~ arm * period``.

        Uses treatment contrasts with CONTROL and the first period as
        reference levels:

            ls[CONTROL][0]   = b0
            ls[TREATMENT][0] = b0 + b_arm
            ls[CONTROL][j]   = b0 + b_period[j]
            ls[TREATMENT][j] = b0 + b_arm + b_period[j] + b_arm:period[j]

        Parameters
        ----------
        intercept, arm_effect : array-like
            (N,) draws.
        period_effects, interaction_effects : array-like
            (N, K) draws, one column per non-reference period. A 1-D array
            is accepted when K == 1.
        """
        schedule = ChangepointSchedule.from_changepoints(changepoints)
        k = schedule.n_changepoints

        b0 = _draw_column(intercept, "intercept", None)
        n = len(b0)
        b_arm = _draw_column(arm_effect, "arm_effect", n)

        def _effects(values, name):
            arr = check_array(values, name)
            if arr.ndim == 1 and k == 1:
                arr = arr.reshape(-1, 1)
            if arr.ndim != 2 or arr.shape != (n, k):
                raise DimensionError(
                    f"{name}: expected shape ({n}, {k}), got {arr.shape}"
                )
            check_finite(arr, name)
            return arr.T

        b_period = _effects(period_effects, "period_effects")
        b_inter = _effects(interaction_effects, "interaction_effects")

        values = np.empty((2, k + 1, n), dtype=np.float64)
        values[0, 0] = b0
        values[1, 0] = b0 + b_arm
        values[0, 1:] = b0 + b_period
        values[1, 1:] = b0 + b_arm + b_period + b_inter

        return cls._build(schedule, values, 'coefficients')

    @classmethod
    def from_table(
        cls,
        table: 'pd.DataFrame | Mapping[str, Any]',
        changepoints,
        *,
        intercept: str = "b_Intercept",
        arm: str = "b_arm2",
        period: str = "b_period{period}",
        interaction: str = "b_arm2:period{period}",
    ) -> PosteriorDraws:
        """Ingest a posterior draws table (one row per draw).

        Column names are resolved once here. ``period`` and
        ``interaction`` are templates formatted with ``period`` equal to
        the factor level of each non-reference segment (2..K+1), matching
        brms names such as ``b_period3`` and ``b_arm2:period3``.

        Parameters
        ----------
        table : pandas.DataFrame or mapping
            Draws table, e.g. ``as_draws_df`` output.

        Raises
        ------
        ValidationError
            If any required column is absent.
        """
        schedule = ChangepointSchedule.from_changepoints(changepoints)
        levels = range(2, schedule.n_segments + 1)

        period_cols = [period.format(period=level) for level in levels]
        inter_cols = [interaction.format(period=level) for level in levels]
        required = [intercept, arm, *period_cols, *inter_cols]

        available = [str(c) for c in table.keys()]
        missing = [c for c in required if c not in available]
        if missing:
            raise ValidationError(
                f"draws table is missing column(s) {missing}. "
                f"Available: {available}"
            )

        def _col(name):
            return check_array(np.asarray(table[name]), name).ravel()

        draws = cls.from_coefficients(
            schedule,
            intercept=_col(intercept),
            arm_effect=_col(arm),
            period_effects=np.column_stack([_col(c) for c in period_cols]),
            interaction_effects=np.column_stack([_col(c) for c in inter_cols]),
        )
        return cls._build(schedule, draws.values, 'table')

    # -- Accessors --

    @property
    def changepoints(self) -> NDArray:
        return self.schedule.changepoints

    @property
    def n_segments(self) -> int:
        return self.values.shape[1]

    @property
    def n_draws(self) -> int:
        return self.values.shape[2]

    def log_scales(self, arm) -> NDArray:
        """(K+1, N) read-only log-scale draws for one arm."""
        return self.values[Arm.coerce(arm) - 1]

    def scales(self, arm) -> NDArray:
        """(K+1, N) exponential scale (mean survival time) per segment."""
        return np.exp(self.log_scales(arm))

    def hazards(self, arm) -> NDArray:
        """(K+1, N) constant hazard rate per segment, exp(-log_scale)."""
        return np.exp(-self.log_scales(arm))

    def __repr__(self) -> str:
        return (
            f"PosteriorDraws(changepoints={self.changepoints.tolist()}, "
            f"n_draws={self.n_draws}, source={self.source!r})"
        )
