"""
Core infrastructure for pybayessurv.

Shared abstractions used by the posterior and survival submodules.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Hardware detection, timing, tolerance tiers
"""

from pybayessurv.core.result import Result
from pybayessurv.core.exceptions import (
    PyBayesSurvError,
    ValidationError,
    DimensionError,
    NumericalError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyBayesSurvError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
]
