"""
Public API for posterior summaries.

    credible_intervals(samples) → CredibleIntervalSolution
    joint_credible_region(samples, method=...) → JointRegionSolution
    prob_any_benefit(samples, threshold=...) → AnyBenefitSolution

``samples`` is an (N, k) matrix: N posterior draws of k quantities. A 1-D
array is treated as k = 1. Each function validates inputs, computes the
summary, and wraps the Result in a Solution.
"""

from __future__ import annotations

from typing import Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pybayessurv.core.exceptions import ValidationError
from pybayessurv.core.result import Result
from pybayessurv.core.compute.timing import Timer
from pybayessurv.core.validation import (
    check_2d,
    check_array,
    check_conf_level,
    check_finite,
    check_min_samples,
)
from pybayessurv.posterior._intervals import (
    any_benefit,
    ellipse_region,
    pointwise_intervals,
    rank_region,
)
from pybayessurv.posterior.solution import (
    AnyBenefitSolution,
    CredibleIntervalSolution,
    JointRegionSolution,
)


def _as_samples(samples: ArrayLike) -> NDArray:
    """Validate a draws matrix and return it as (N, k) float64."""
    arr = check_array(samples, "samples")
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    check_2d(arr, "samples")
    check_min_samples(arr, 2, "samples")
    if arr.shape[1] == 0:
        raise ValidationError("samples: must have at least one column")
    check_finite(arr, "samples")
    return arr


def credible_intervals(
    samples: ArrayLike,
    *,
    conf_level: float = 0.95,
    labels=None,
) -> CredibleIntervalSolution:
    """Pointwise equal-tailed credible intervals.

    Parameters
    ----------
    samples : array-like
        (N, k) posterior draws.
    conf_level : float
        Credibility level of each interval (default 0.95).
    labels : sequence or None
        Names of the k quantities, used by summary().

    Returns
    -------
    CredibleIntervalSolution
        Includes the share of draws inside all k intervals at once, which
        falls below conf_level as k grows.
    """
    arr = _as_samples(samples)
    check_conf_level(conf_level)

    timer = Timer()
    timer.start()
    params = pointwise_intervals(arr, conf_level)
    timer.stop()

    result = Result(
        params=params,
        info={"method": "equal-tailed", "conf_level": conf_level},
        timing=timer.result(),
        backend_name="cpu_quantile",
        warnings=(),
    )
    return CredibleIntervalSolution(_result=result, _labels=labels)


def joint_credible_region(
    samples: ArrayLike,
    *,
    conf_level: float = 0.95,
    method: Literal["rank", "ellipse"] = "rank",
    labels=None,
) -> JointRegionSolution:
    """Joint credible region containing conf_level of the draws.

    Parameters
    ----------
    samples : array-like
        (N, k) posterior draws.
    conf_level : float
        Joint credibility level (default 0.95).
    method : str
        "rank" (default): simultaneous rectangular band from the max-rank
        envelope. "ellipse": Mahalanobis ellipsoid around the mean.
    labels : sequence or None
        Names of the k quantities, used by summary().

    Returns
    -------
    JointRegionSolution
    """
    arr = _as_samples(samples)
    check_conf_level(conf_level)

    if method not in ("rank", "ellipse"):
        raise ValidationError(
            f"method must be 'rank' or 'ellipse', got '{method}'"
        )

    timer = Timer()
    timer.start()
    if method == "rank":
        params = rank_region(arr, conf_level)
    else:
        params = ellipse_region(arr, conf_level)
    timer.stop()

    warnings_list = []
    if params.coverage > conf_level + 0.5 / np.sqrt(params.n_draws):
        warnings_list.append(
            f"achieved coverage {params.coverage:.4f} well above "
            f"{conf_level} (ties or few draws)"
        )

    result = Result(
        params=params,
        info={"method": method, "conf_level": conf_level},
        timing=timer.result(),
        backend_name=f"cpu_{method}_region",
        warnings=tuple(warnings_list),
    )
    return JointRegionSolution(_result=result, _labels=labels)


def prob_any_benefit(
    samples: ArrayLike,
    *,
    threshold: float = 0.0,
    direction: Literal["greater", "less"] = "greater",
    labels=None,
) -> AnyBenefitSolution:
    """Posterior probability that at least one quantity shows benefit.

    Parameters
    ----------
    samples : array-like
        (N, k) posterior draws, e.g. survival differences at k times.
    threshold : float
        Benefit boundary (default 0: no difference).
    direction : str
        "greater" (default): benefit when a value exceeds threshold.
        "less": benefit when a value falls below it (e.g. hazard ratios).
    labels : sequence or None
        Names of the k quantities, used by summary().

    Returns
    -------
    AnyBenefitSolution
    """
    arr = _as_samples(samples)

    if direction not in ("greater", "less"):
        raise ValidationError(
            f"direction must be 'greater' or 'less', got '{direction}'"
        )
    if not np.isfinite(threshold):
        raise ValidationError(f"threshold must be finite, got {threshold}")

    timer = Timer()
    timer.start()
    params = any_benefit(arr, float(threshold), direction)
    timer.stop()

    result = Result(
        params=params,
        info={"method": "any-benefit", "direction": direction},
        timing=timer.result(),
        backend_name="cpu_indicator",
        warnings=(),
    )
    return AnyBenefitSolution(_result=result, _labels=labels)
