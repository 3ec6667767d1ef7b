"""
Posterior draws and their summaries.

Public API:
    Arm, ChangepointSchedule, PosteriorDraws   - ingestion
    credible_intervals(samples)                - pointwise intervals
    joint_credible_region(samples)             - joint region + membership
    prob_any_benefit(samples)                  - P(benefit anywhere)
"""

from pybayessurv.posterior.design import Arm, ChangepointSchedule, PosteriorDraws
from pybayessurv.posterior.solvers import (
    credible_intervals,
    joint_credible_region,
    prob_any_benefit,
)
from pybayessurv.posterior.solution import (
    AnyBenefitSolution,
    CredibleIntervalSolution,
    JointRegionSolution,
)

__all__ = [
    "Arm",
    "ChangepointSchedule",
    "PosteriorDraws",
    "credible_intervals",
    "joint_credible_region",
    "prob_any_benefit",
    "AnyBenefitSolution",
    "CredibleIntervalSolution",
    "JointRegionSolution",
]
