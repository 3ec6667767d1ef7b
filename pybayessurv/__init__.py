"""
pybayessurv: posterior summaries for piece-wise exponential survival models.

Turns posterior draws of a Bayesian piece-wise exponential regression
(fitted elsewhere, e.g. with brms or PyMC) into survival probabilities,
survival curves, arm contrasts and joint uncertainty summaries.

Submodules:
    posterior: draw ingestion, credible intervals, joint regions, any-benefit
    survival: piece-wise evaluator, curves, contrasts, RMST, episode splitting
"""

__version__ = "0.1.0"

from pybayessurv import posterior
from pybayessurv import survival
from pybayessurv.posterior import Arm, ChangepointSchedule, PosteriorDraws

__all__ = [
    "__version__",
    "posterior",
    "survival",
    "Arm",
    "ChangepointSchedule",
    "PosteriorDraws",
]
