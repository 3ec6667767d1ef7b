"""
Episode splitting for piece-wise exponential model fitting.

Converts one-row-per-subject survival data into a time-split (episode)
dataset: each subject contributes one row per segment they enter, with
the exposure spent in that segment and an event flag set only in the
segment where an observed event happens. Fitting an exponential
regression with ``log(scale) ~ arm * period`` on the episodes gives the
piece-wise exponential model whose draws PosteriorDraws ingests.

Segment membership uses the same half-open convention as the evaluator:
a subject with time equal to a changepoint ends in the segment closing
at that changepoint.

References:
    Holford, T. R. (1980). The analysis of rates and of survivorship
        using log-linear models. Biometrics, 36(2), 299-305.
    R Core Team. survival::survSplit
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pybayessurv.posterior.design import ChangepointSchedule
from pybayessurv.survival._common import EpisodeParams


def split_episodes_fit(
    time: NDArray,
    event: NDArray,
    arm: NDArray,
    schedule: ChangepointSchedule,
) -> EpisodeParams:
    """Expand subjects into episodes.

    Parameters
    ----------
    time : NDArray
        (n,) non-negative observed times.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    arm : NDArray
        (n,) arm codes (1/2).
    schedule : ChangepointSchedule
        Segment boundaries.

    Returns
    -------
    EpisodeParams
    """
    lower = schedule.lower
    upper = schedule.upper
    n = len(time)

    rows_subject = []
    rows_period = []
    rows_start = []
    rows_stop = []
    rows_event = []

    for i in range(n):
        for j in range(schedule.n_segments):
            # Segment j > 0 is entered only when time is past its left edge
            if j > 0 and time[i] <= lower[j]:
                break

            last = time[i] <= upper[j]

            rows_subject.append(i)
            rows_period.append(j)
            rows_start.append(lower[j])
            rows_stop.append(time[i] if last else upper[j])
            rows_event.append(event[i] if last else 0.0)

            if last:
                break

    subject = np.array(rows_subject, dtype=np.intp)
    tstart = np.array(rows_start, dtype=np.float64)
    tstop = np.array(rows_stop, dtype=np.float64)

    return EpisodeParams(
        subject=subject,
        period=np.array(rows_period, dtype=np.intp),
        tstart=tstart,
        tstop=tstop,
        exposure=tstop - tstart,
        event=np.array(rows_event, dtype=np.float64),
        arm=arm[subject].astype(np.intp),
        changepoints=schedule.changepoints,
        n_subjects=n,
        n_events=int(np.sum(event)),
    )
