"""
Tests for pybayessurv exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyBayesSurvError)
    - Diagnostic attributes on NumericalError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pybayessurv.core.exceptions import (
    DimensionError,
    NumericalError,
    PyBayesSurvError,
    ValidationError,
)


class TestInheritance:
    """Every exception is catchable via PyBayesSurvError."""

    def test_validation_error_is_base_error(self):
        with pytest.raises(PyBayesSurvError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_numerical_error_is_base_error(self):
        with pytest.raises(PyBayesSurvError):
            raise NumericalError("computation failed")

    def test_numerical_error_is_not_validation_error(self):
        assert not issubclass(NumericalError, ValidationError)


class TestNumericalErrorAttributes:

    def test_attributes_stored(self):
        err = NumericalError("singular", quantity="posterior covariance", detail=-1e-3)
        assert err.quantity == "posterior covariance"
        assert err.detail == -1e-3
        assert str(err) == "singular"

    def test_defaults_none(self):
        err = NumericalError("singular")
        assert err.quantity is None
        assert err.detail is None
