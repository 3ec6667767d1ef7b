"""
Exception hierarchy for pybayessurv.

All exceptions inherit from PyBayesSurvError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyBayesSurvError(Exception):
    """Base exception for all pybayessurv errors."""
    pass


class ValidationError(PyBayesSurvError):
    """
    Input validation failed.

    Raised when user-provided inputs fail precondition checks: negative
    query times, non-increasing changepoints, unknown arms.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or when
    posterior draw sequences have inconsistent lengths across arms and
    segments.
    """
    pass


class NumericalError(PyBayesSurvError):
    """
    Numerical computation failed.

    Attributes:
        quantity: Name/description of the problematic quantity
        detail: Diagnostic value (e.g. minimum eigenvalue), if available
    """

    def __init__(
        self,
        message: str,
        quantity: str | None = None,
        detail: float | None = None,
    ):
        super().__init__(message)
        self.quantity = quantity
        self.detail = detail
