"""
Parameter payloads for posterior summaries.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
Inputs to every summary are draw matrices of shape (N, k): N posterior
draws of k quantities (e.g. S(t) at k times).
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray


@dataclass(frozen=True)
class CredibleIntervalParams:
    """Pointwise equal-tailed credible intervals."""

    mean: NDArray                # (k,)
    median: NDArray              # (k,)
    lower: NDArray               # (k,): alpha/2 quantile
    upper: NDArray               # (k,): 1 - alpha/2 quantile
    conf_level: float
    inside: NDArray              # (N,) bool: draw inside every interval
    simultaneous_coverage: float # mean(inside); below conf_level when k > 1
    n_draws: int


@dataclass(frozen=True)
class JointRegionParams:
    """Joint credible region over all k quantities."""

    method: str                  # "rank" or "ellipse"
    conf_level: float
    center: NDArray              # (k,): posterior mean
    lower: NDArray               # (k,): region bounding box
    upper: NDArray               # (k,)
    inside: NDArray              # (N,) bool: region membership per draw
    coverage: float              # mean(inside)
    cutoff: float                # rank extremeness or squared Mahalanobis cutoff
    n_draws: int


@dataclass(frozen=True)
class AnyBenefitParams:
    """Posterior probability that any / all quantities show benefit."""

    threshold: float
    direction: str               # "greater" or "less"
    prob_each: NDArray           # (k,): P(benefit at coordinate j)
    prob_any: float              # P(benefit at one or more coordinates)
    prob_all: float              # P(benefit at every coordinate)
    indicator: NDArray           # (N,) bool: draw shows benefit somewhere
    n_draws: int
