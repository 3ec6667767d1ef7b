"""
Summaries of multivariate posterior uncertainty.

Three ways to summarize N draws of k quantities:
- pointwise: equal-tailed interval per quantity. Each has the nominal
  level on its own, but jointly they cover fewer draws.
- joint region: a set containing conf_level of the draws jointly, either
  the max-rank envelope (rectangular) or a Mahalanobis ellipsoid.
- any benefit: posterior probability that at least one quantity is on
  the favourable side of a threshold.

References:
    Besag, J., Green, P., Higdon, D. & Mengersen, K. (1995). Bayesian
        computation and stochastic systems. Statistical Science, 10(1),
        3-41. (simultaneous credible bands from ranks)
    Held, L. (2004). Simultaneous posterior probability statements from
        Monte Carlo output. JCGS, 13(1), 20-35.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from scipy import linalg as sp_linalg
from scipy import stats as sp_stats

from pybayessurv.core.exceptions import NumericalError
from pybayessurv.posterior._common import (
    AnyBenefitParams,
    CredibleIntervalParams,
    JointRegionParams,
)


def pointwise_intervals(samples: NDArray, conf_level: float) -> CredibleIntervalParams:
    """Equal-tailed intervals from the alpha/2 and 1 - alpha/2 quantiles.

    Quantiles use linear interpolation (R type 7, NumPy default).
    """
    alpha = 1.0 - conf_level
    lower, upper = np.quantile(samples, [alpha / 2.0, 1.0 - alpha / 2.0], axis=0)
    inside = np.all((samples >= lower) & (samples <= upper), axis=1)

    return CredibleIntervalParams(
        mean=samples.mean(axis=0),
        median=np.median(samples, axis=0),
        lower=lower,
        upper=upper,
        conf_level=conf_level,
        inside=inside,
        simultaneous_coverage=float(inside.mean()),
        n_draws=samples.shape[0],
    )


def rank_region(samples: NDArray, conf_level: float) -> JointRegionParams:
    """Simultaneous rectangular band from the max-rank envelope.

    A draw's extremeness is the largest of max(r, N + 1 - r) over its
    coordinates, with r its rank within each column. Ties share their
    average rank, so a constant column (S(0) = 1 on any grid starting at
    zero) ranks every draw at (N + 1) / 2 and never drives extremeness.
    The band spans the order statistics N + 1 - t* .. t* of every column,
    where t* is the ceil(conf_level * N)-th smallest extremeness rounded
    up, so it contains every draw with extremeness <= t*.
    """
    n = samples.shape[0]
    ranks = sp_stats.rankdata(samples, axis=0, method='average')
    extremeness = np.max(np.maximum(ranks, n + 1 - ranks), axis=1)

    cutoff = math.ceil(np.sort(extremeness)[math.ceil(conf_level * n) - 1])

    ordered = np.sort(samples, axis=0)
    lower = ordered[n - cutoff]
    upper = ordered[cutoff - 1]
    inside = np.all((samples >= lower) & (samples <= upper), axis=1)

    return JointRegionParams(
        method='rank',
        conf_level=conf_level,
        center=samples.mean(axis=0),
        lower=lower,
        upper=upper,
        inside=inside,
        coverage=float(inside.mean()),
        cutoff=float(cutoff),
        n_draws=n,
    )


def ellipse_region(samples: NDArray, conf_level: float) -> JointRegionParams:
    """Mahalanobis ellipsoid around the posterior mean.

    The region holds the draws whose squared distance under the posterior
    covariance is within the conf_level empirical quantile. Bounds are the
    ellipsoid's axis-aligned bounding box, center +/- sqrt(d2* diag(Sigma)).

    Raises
    ------
    NumericalError
        If the posterior covariance is not positive definite (e.g. a
        constant coordinate, or fewer draws than quantities).
    """
    n, k = samples.shape
    center = samples.mean(axis=0)
    cov = np.atleast_2d(np.cov(samples, rowvar=False))

    try:
        chol = sp_linalg.cholesky(cov, lower=True)
    except np.linalg.LinAlgError as e:
        min_eig = float(np.min(np.linalg.eigvalsh(cov)))
        raise NumericalError(
            f"posterior covariance of {k} quantities over {n} draws is not "
            f"positive definite (min eigenvalue {min_eig:.3g})",
            quantity='posterior covariance',
            detail=min_eig,
        ) from e

    z = sp_linalg.solve_triangular(chol, (samples - center).T, lower=True)
    d2 = np.sum(z ** 2, axis=0)

    cutoff = float(np.quantile(d2, conf_level, method='higher'))
    inside = d2 <= cutoff

    half_width = np.sqrt(cutoff * np.diag(cov))

    return JointRegionParams(
        method='ellipse',
        conf_level=conf_level,
        center=center,
        lower=center - half_width,
        upper=center + half_width,
        inside=inside,
        coverage=float(inside.mean()),
        cutoff=cutoff,
        n_draws=n,
    )


def any_benefit(samples: NDArray, threshold: float, direction: str) -> AnyBenefitParams:
    """Posterior probability of benefit at any / every coordinate."""
    if direction == "greater":
        benefit = samples > threshold
    else:
        benefit = samples < threshold

    indicator = np.any(benefit, axis=1)

    return AnyBenefitParams(
        threshold=threshold,
        direction=direction,
        prob_each=benefit.mean(axis=0),
        prob_any=float(indicator.mean()),
        prob_all=float(np.all(benefit, axis=1).mean()),
        indicator=indicator,
        n_draws=samples.shape[0],
    )
