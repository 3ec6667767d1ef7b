"""
CPU backend for survival curve evaluation.

NumPy float64 reference implementation. All other backends are validated
against this one.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pybayessurv.core.result import Result
from pybayessurv.core.compute.timing import Timer
from pybayessurv.posterior.design import Arm, PosteriorDraws
from pybayessurv.survival._common import SurvivalParams
from pybayessurv.survival._piecewise import log_survival


class CPUSurvivalBackend:
    """Evaluates S(t) on a time grid with NumPy in double precision."""

    @property
    def name(self) -> str:
        return 'cpu_piecewise'

    def solve(
        self,
        times: NDArray,
        arm: Arm,
        draws: PosteriorDraws,
    ) -> Result[SurvivalParams]:
        """
        Evaluate posterior survival draws.

        Parameters
        ----------
        times : NDArray
            (m,) validated non-negative query times.
        arm : Arm
            Arm whose log-scale draws are used.
        draws : PosteriorDraws
            Posterior sample set.

        Returns
        -------
        Result[SurvivalParams]
        """
        timer = Timer()
        timer.start()

        schedule = draws.schedule

        with timer.section('log_survival'):
            log_s = log_survival(
                times, schedule.lower, schedule.upper, draws.log_scales(arm),
            )

        with timer.section('exponentiate'):
            surv = np.exp(log_s)

        timer.stop()

        warnings_list = []
        n_zero = int(np.sum(surv == 0.0))
        if n_zero > 0:
            warnings_list.append(
                f"{n_zero} survival value(s) underflowed to 0 "
                f"(extreme log-scale draws)"
            )

        params = SurvivalParams(
            times=times,
            arm=arm,
            draws=surv,
            changepoints=schedule.changepoints,
            n_draws=draws.n_draws,
        )

        return Result(
            params=params,
            info={
                'method': 'piecewise_exponential',
                'arm': arm.name,
                'n_times': len(times),
                'n_segments': schedule.n_segments,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
