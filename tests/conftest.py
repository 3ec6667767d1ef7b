"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pybayessurv.posterior import PosteriorDraws


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def changepoints():
    """Quarterly-ish schedule used throughout the trial analysis."""
    return np.array([6.0, 12.0, 18.0, 24.0])


@pytest.fixture
def simulated_draws(rng, changepoints):
    """1000 posterior draws of a log(scale) ~ arm * period model.

    TREATMENT has a worse early hazard and a better late hazard, so the
    survival curves cross.
    """
    n = 1000
    k = len(changepoints)
    intercept = rng.normal(3.0, 0.1, n)
    arm_effect = rng.normal(-0.3, 0.1, n)
    period_effects = rng.normal(0.0, 0.1, (n, k))
    interaction = rng.normal(0.0, 0.05, (n, k)) + np.linspace(0.2, 0.8, k)
    return PosteriorDraws.from_coefficients(
        changepoints, intercept, arm_effect, period_effects, interaction,
    )
