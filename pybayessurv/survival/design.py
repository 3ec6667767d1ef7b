"""
SurvivalDesign: immutable container for two-arm time-to-event data.

Wraps time, event indicator and arm. Validates inputs at construction
time; all downstream code trusts clean data.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from pybayessurv.core.exceptions import DimensionError, ValidationError
from pybayessurv.core.validation import (
    check_array,
    check_consistent_length,
    check_finite,
    check_non_negative,
)
from pybayessurv.posterior.design import Arm


@dataclass(frozen=True)
class SurvivalDesign:
    """Immutable survival data container.

    Parameters
    ----------
    time : NDArray
        Time to event or censoring. Non-negative and finite.
    event : NDArray
        Event indicator: 1 = event observed, 0 = censored.
    arm : NDArray
        Arm codes, 1 (CONTROL) or 2 (TREATMENT).
    """

    time: NDArray
    event: NDArray
    arm: NDArray

    @classmethod
    def for_survival(cls, time, event, arm) -> SurvivalDesign:
        """Create and validate survival data.

        Parameters
        ----------
        time : array-like
            Time to event or censoring.
        event : array-like
            Event indicator (0/1 or False/True).
        arm : array-like
            Arm labels; anything ``Arm.coerce`` accepts per element.

        Raises
        ------
        ValidationError
            If inputs are invalid.
        """
        time = check_array(time, "time").ravel()
        event = check_array(event, "event").ravel()

        n = len(time)

        if n == 0:
            raise ValidationError("time must have at least one observation")

        check_consistent_length(time, event, names=("time", "event"))

        check_finite(time, "time")
        check_non_negative(time, "time")

        unique_events = np.unique(event)
        if not np.all(np.isin(unique_events, [0.0, 1.0])):
            raise ValidationError(
                f"event must contain only 0 and 1, "
                f"got unique values: {unique_events}"
            )

        arm_raw = np.asarray(arm).ravel()
        if len(arm_raw) != n:
            raise DimensionError(
                f"arm must have {n} elements to match time, "
                f"got {len(arm_raw)}"
            )
        arm_codes = np.array(
            [int(Arm.coerce(a.item() if hasattr(a, 'item') else a)) for a in arm_raw],
            dtype=np.intp,
        )

        return cls(time=time, event=event, arm=arm_codes)

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.time)

    @property
    def n_events(self) -> int:
        """Number of observed events."""
        return int(np.sum(self.event))
