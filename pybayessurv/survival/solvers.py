"""
Public API for piece-wise exponential survival.

    evaluate(t, arm, changepoints, log_scales) → NDArray (N,)
    survival_probability(t, arm, draws) → SurvivalSolution
    survival_curve(times, arm, draws) → SurvivalSolution     # GPU accelerated
    survival_difference(times, draws) → ContrastSolution
    restricted_mean(tau, arm, draws) → RestrictedMeanSolution
    split_episodes(time, event, arm, changepoints) → EpisodeSolution

Each function validates inputs, dispatches to the appropriate backend,
and wraps the Result in a Solution.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from typing import Literal

import numpy as np
from numpy.typing import NDArray

from pybayessurv.core.exceptions import DimensionError, ValidationError
from pybayessurv.core.result import Result
from pybayessurv.core.compute.device import select_device
from pybayessurv.core.compute.timing import Timer
from pybayessurv.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_non_negative,
)
from pybayessurv.posterior.design import (
    Arm,
    ChangepointSchedule,
    PosteriorDraws,
    stack_segments,
)
from pybayessurv.survival._common import ContrastParams, RestrictedMeanParams
from pybayessurv.survival._piecewise import restricted_mean as restricted_mean_fit
from pybayessurv.survival._piecewise import survival
from pybayessurv.survival._split import split_episodes_fit
from pybayessurv.survival.backends.cpu import CPUSurvivalBackend
from pybayessurv.survival.design import SurvivalDesign
from pybayessurv.survival.solution import (
    ContrastSolution,
    EpisodeSolution,
    RestrictedMeanSolution,
    SurvivalSolution,
)


BackendChoice = Literal['auto', 'cpu', 'gpu']


def _check_time(t, name: str = "t") -> float:
    """Validate a single query time."""
    arr = check_array(t, name)
    if arr.ndim != 0 and arr.size != 1:
        raise ValidationError(f"{name} must be a scalar, got shape {arr.shape}")
    value = float(arr.reshape(()))
    if not np.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _check_times(times) -> NDArray:
    arr = check_array(times, "times")
    if arr.ndim == 0:
        arr = arr.reshape(1)
    check_1d(arr, "times")
    if len(arr) == 0:
        raise ValidationError("times must contain at least one value")
    check_finite(arr, "times")
    check_non_negative(arr, "times")
    return arr


def _check_draws(draws) -> PosteriorDraws:
    if not isinstance(draws, PosteriorDraws):
        raise ValidationError(
            f"draws must be a PosteriorDraws, got {type(draws).__name__}. "
            f"Build one with PosteriorDraws.from_log_scales/from_coefficients/from_table."
        )
    return draws


def _gpu_backend(device, use_fp64: bool):
    from pybayessurv.survival.backends.gpu import GPUSurvivalBackend

    if use_fp64 and device.device_type != 'cuda':
        warnings.warn(
            f"{device.device_type.upper()} does not support float64; "
            f"falling back to float32",
            UserWarning,
            stacklevel=4,
        )
        use_fp64 = False
    return GPUSurvivalBackend(device=device, use_fp64=use_fp64)


def _get_backend(backend: BackendChoice, use_fp64: bool = False):
    """Select backend based on preference."""
    if backend == 'cpu':
        return CPUSurvivalBackend()

    if backend == 'auto':
        device = select_device('auto')
        if device.is_gpu:
            return _gpu_backend(device, use_fp64)
        return CPUSurvivalBackend()

    if backend == 'gpu':
        return _gpu_backend(select_device('gpu'), use_fp64)

    raise ValidationError(f"Unknown backend: {backend!r}")


def evaluate(t, arm, changepoints, log_scales) -> NDArray:
    """Posterior draws of S(t) for one arm.

    Pure function: inputs are not modified and repeated calls return
    identical values.

    Parameters
    ----------
    t : float
        Non-negative query time.
    arm : Arm, int or str
        Arm whose parameters are used.
    changepoints : array-like
        Strictly increasing positive segment boundaries c1 < ... < cK.
    log_scales : mapping
        ``{arm: {segment: draws}}``. Every arm present is validated and
        only the selected one is evaluated. Segment keys run 0..K and every
        sequence, in every arm, has the same length N. A
        PosteriorDraws is also accepted (its own changepoints must match).

    Returns
    -------
    NDArray
        (N,) survival probabilities, S_i(t) for draw i.

    Raises
    ------
    ValidationError
        On negative or non-finite t, invalid changepoints, or a missing
        arm or segment.
    DimensionError
        If draw counts differ between segments or arms.
    """
    t_val = _check_time(t)
    arm = Arm.coerce(arm)
    schedule = ChangepointSchedule.from_changepoints(changepoints)

    if isinstance(log_scales, PosteriorDraws):
        if not np.array_equal(log_scales.changepoints, schedule.changepoints):
            raise ValidationError(
                f"changepoints {schedule.changepoints.tolist()} do not match "
                f"the draws' schedule {log_scales.changepoints.tolist()}"
            )
        log_scale = log_scales.log_scales(arm)
    else:
        if not isinstance(log_scales, Mapping):
            raise ValidationError(
                f"log_scales must be a mapping keyed by arm, "
                f"got {type(log_scales).__name__}"
            )
        selected = [v for k, v in log_scales.items() if Arm.coerce(k) == arm]
        if len(selected) != 1:
            raise ValidationError(
                f"log_scales must contain arm {arm.name} exactly once, "
                f"found {len(selected)}"
            )
        stacked = {
            Arm.coerce(k): stack_segments(
                v, schedule.n_segments, f"log_scales[{Arm.coerce(k).name}]",
            )
            for k, v in log_scales.items()
        }
        counts = {a.name: s.shape[1] for a, s in stacked.items()}
        if len(set(counts.values())) > 1:
            raise DimensionError(
                f"log_scales: arms have different draw counts: {counts}"
            )
        log_scale = stacked[arm]

    return survival(
        np.array([t_val]), schedule.lower, schedule.upper, log_scale,
    )[0]


def survival_probability(t, arm, draws: PosteriorDraws) -> SurvivalSolution:
    """Posterior draws of S(t) at a single time.

    Parameters
    ----------
    t : float
        Non-negative query time.
    arm : Arm, int or str
        Arm to evaluate.
    draws : PosteriorDraws
        Ingested posterior sample set.

    Returns
    -------
    SurvivalSolution
        One grid time; ``solution.at(0)`` gives the (N,) draws.
    """
    t_val = _check_time(t)
    return survival_curve(np.array([t_val]), arm, draws, backend='cpu')


def survival_curve(
    times,
    arm,
    draws: PosteriorDraws,
    *,
    backend: BackendChoice = 'cpu',
    use_fp64: bool = False,
) -> SurvivalSolution:
    """Posterior survival curve draws on a time grid.

    Parameters
    ----------
    times : array-like
        (m,) non-negative query times, any order.
    arm : Arm, int or str
        Arm to evaluate.
    draws : PosteriorDraws
        Ingested posterior sample set.
    backend : str
        'cpu' (default, float64 reference), 'gpu' (PyTorch, float32), or
        'auto' (GPU if available).
    use_fp64 : bool
        Run the GPU backend in float64. CUDA only; on MPS this warns and
        falls back to float32. Ignored by the CPU backend.

    Returns
    -------
    SurvivalSolution
    """
    times_arr = _check_times(times)
    arm = Arm.coerce(arm)
    draws = _check_draws(draws)

    be = _get_backend(backend, use_fp64)
    result = be.solve(times_arr, arm, draws)

    return SurvivalSolution(_result=result)


def survival_difference(
    times,
    draws: PosteriorDraws,
    *,
    reference=Arm.CONTROL,
) -> ContrastSolution:
    """Posterior draws of S_other(t) - S_reference(t) on a time grid.

    Draw i of both curves comes from the same posterior sample, so the
    difference keeps the joint posterior dependence between arms.

    Parameters
    ----------
    times : array-like
        (m,) non-negative query times.
    draws : PosteriorDraws
        Ingested posterior sample set.
    reference : Arm, int or str
        Arm subtracted from the other (default CONTROL).

    Returns
    -------
    ContrastSolution
    """
    times_arr = _check_times(times)
    draws = _check_draws(draws)
    reference = Arm.coerce(reference)
    comparator = Arm.TREATMENT if reference == Arm.CONTROL else Arm.CONTROL

    timer = Timer()
    timer.start()

    schedule = draws.schedule
    with timer.section('survival'):
        ref = survival(times_arr, schedule.lower, schedule.upper, draws.log_scales(reference))
        comp = survival(times_arr, schedule.lower, schedule.upper, draws.log_scales(comparator))

    timer.stop()

    warnings_list = []
    for arm_name, surv in ((reference.name, ref), (comparator.name, comp)):
        n_zero = int(np.sum(surv == 0.0))
        if n_zero > 0:
            warnings_list.append(
                f"{n_zero} {arm_name} survival value(s) underflowed to 0 "
                f"(extreme log-scale draws)"
            )

    params = ContrastParams(
        times=times_arr,
        reference=reference,
        comparator=comparator,
        reference_draws=ref,
        comparator_draws=comp,
        difference=comp - ref,
        n_draws=draws.n_draws,
    )

    result = Result(
        params=params,
        info={
            "method": "piecewise_exponential",
            "contrast": f"{comparator.name} - {reference.name}",
        },
        timing=timer.result(),
        backend_name="cpu_piecewise",
        warnings=tuple(warnings_list),
    )

    return ContrastSolution(_result=result)


def restricted_mean(tau, arm, draws: PosteriorDraws) -> RestrictedMeanSolution:
    """Restricted mean survival time, the area under S(t) on [0, tau].

    Parameters
    ----------
    tau : float
        Non-negative horizon.
    arm : Arm, int or str
        Arm to evaluate.
    draws : PosteriorDraws
        Ingested posterior sample set.

    Returns
    -------
    RestrictedMeanSolution
    """
    tau_val = _check_time(tau, "tau")
    arm = Arm.coerce(arm)
    draws = _check_draws(draws)

    timer = Timer()
    timer.start()

    schedule = draws.schedule
    rmst = restricted_mean_fit(
        tau_val, schedule.lower, schedule.upper, draws.log_scales(arm),
    )

    timer.stop()

    params = RestrictedMeanParams(
        tau=tau_val,
        arm=arm,
        draws=rmst,
        n_draws=draws.n_draws,
    )

    result = Result(
        params=params,
        info={"method": "closed-form RMST", "arm": arm.name},
        timing=timer.result(),
        backend_name="cpu_piecewise",
        warnings=(),
    )

    return RestrictedMeanSolution(_result=result)


def split_episodes(time, event, arm, changepoints) -> EpisodeSolution:
    """Split subjects at the changepoints for piece-wise model fitting.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    arm : array-like
        Arm label per subject.
    changepoints : array-like
        Strictly increasing positive segment boundaries.

    Returns
    -------
    EpisodeSolution
    """
    design = SurvivalDesign.for_survival(time, event, arm)
    schedule = ChangepointSchedule.from_changepoints(changepoints)

    timer = Timer()
    timer.start()

    params = split_episodes_fit(design.time, design.event, design.arm, schedule)

    timer.stop()

    warnings_list = []
    n_zero = int(np.sum(params.exposure == 0))
    if n_zero > 0:
        warnings_list.append(
            f"{n_zero} episode(s) have zero exposure (subjects with time 0)"
        )

    result = Result(
        params=params,
        info={
            "method": "episode split",
            "n_segments": schedule.n_segments,
            "n_rows": len(params.subject),
        },
        timing=timer.result(),
        backend_name="cpu_split",
        warnings=tuple(warnings_list),
    )

    return EpisodeSolution(_result=result)
