"""
Piece-wise exponential survival from posterior draws.

Public API:
    evaluate(t, arm, changepoints, log_scales) -> NDArray
    survival_probability(t, arm, draws) -> SurvivalSolution
    survival_curve(times, arm, draws) -> SurvivalSolution
    survival_difference(times, draws) -> ContrastSolution
    restricted_mean(tau, arm, draws) -> RestrictedMeanSolution
    split_episodes(time, event, arm, changepoints) -> EpisodeSolution
"""

from pybayessurv.survival.design import SurvivalDesign
from pybayessurv.survival.solvers import (
    evaluate,
    restricted_mean,
    split_episodes,
    survival_curve,
    survival_difference,
    survival_probability,
)
from pybayessurv.survival.solution import (
    ContrastSolution,
    EpisodeSolution,
    RestrictedMeanSolution,
    SurvivalSolution,
)

__all__ = [
    "evaluate",
    "survival_probability",
    "survival_curve",
    "survival_difference",
    "restricted_mean",
    "split_episodes",
    "SurvivalDesign",
    "SurvivalSolution",
    "ContrastSolution",
    "RestrictedMeanSolution",
    "EpisodeSolution",
]
