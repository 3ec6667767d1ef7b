"""
Parameter payloads for piece-wise exponential survival results.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
Draw matrices are laid out (time, draw).
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray

from pybayessurv.posterior.design import Arm


@dataclass(frozen=True)
class SurvivalParams:
    """Posterior draws of S(t) for one arm on a time grid."""

    times: NDArray               # (m,) query times
    arm: Arm
    draws: NDArray               # (m, N): S(t) per time and draw
    changepoints: NDArray        # (K,) segment boundaries
    n_draws: int


@dataclass(frozen=True)
class ContrastParams:
    """Posterior draws of S_comparator(t) - S_reference(t)."""

    times: NDArray               # (m,)
    reference: Arm
    comparator: Arm
    reference_draws: NDArray     # (m, N)
    comparator_draws: NDArray    # (m, N)
    difference: NDArray          # (m, N): comparator minus reference
    n_draws: int


@dataclass(frozen=True)
class RestrictedMeanParams:
    """Restricted mean survival time up to tau, per draw."""

    tau: float
    arm: Arm
    draws: NDArray               # (N,)
    n_draws: int


@dataclass(frozen=True)
class EpisodeParams:
    """Time-split (episode) dataset, one row per subject per period.

    Rows are ordered by subject, then period.
    """

    subject: NDArray             # (r,): index into the input arrays
    period: NDArray              # (r,): segment index, 0-based
    tstart: NDArray              # (r,): left boundary of the episode
    tstop: NDArray               # (r,): right boundary of the episode
    exposure: NDArray            # (r,): tstop - tstart
    event: NDArray               # (r,): 1 only in a subject's final episode with an event
    arm: NDArray                 # (r,): arm code (1/2)
    changepoints: NDArray        # (K,)
    n_subjects: int
    n_events: int
