"""
Solution wrappers for piece-wise survival results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with a summary() method. Posterior summaries of the draws delegate to
pybayessurv.posterior so every curve is summarized the same way.
"""

from __future__ import annotations

import numpy as np

from pybayessurv.core.result import Result
from pybayessurv.posterior.solvers import (
    credible_intervals,
    joint_credible_region,
    prob_any_benefit,
)
from pybayessurv.survival._common import (
    ContrastParams,
    EpisodeParams,
    RestrictedMeanParams,
    SurvivalParams,
)


def _time_labels(times) -> list[str]:
    return [f"t={t:g}" for t in times]


class SurvivalSolution:
    """Posterior draws of S(t) for one arm on a time grid."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[SurvivalParams]) -> None:
        self._result = _result

    # -- Properties delegating to SurvivalParams --

    @property
    def times(self):
        return self._result.params.times

    @property
    def arm(self):
        return self._result.params.arm

    @property
    def draws(self):
        """(m, N) survival probability per time and draw."""
        return self._result.params.draws

    @property
    def changepoints(self):
        return self._result.params.changepoints

    @property
    def n_draws(self) -> int:
        return self._result.params.n_draws

    @property
    def mean(self):
        """Posterior mean of S(t), shape (m,)."""
        return self.draws.mean(axis=1)

    @property
    def median(self):
        return np.median(self.draws, axis=1)

    @property
    def cumulative_hazard(self):
        """(m, N) draws of H(t) = -log S(t)."""
        with np.errstate(divide='ignore'):
            return -np.log(self.draws)

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def at(self, index: int = 0):
        """(N,) draws at one grid position."""
        return self.draws[index]

    def credible_intervals(self, conf_level: float = 0.95):
        """Pointwise credible interval of S(t) at each grid time."""
        return credible_intervals(
            self.draws.T, conf_level=conf_level, labels=_time_labels(self.times),
        )

    def joint_credible_region(self, conf_level: float = 0.95, method: str = "rank"):
        """Joint credible region of the whole curve."""
        return joint_credible_region(
            self.draws.T, conf_level=conf_level, method=method,
            labels=_time_labels(self.times),
        )

    def summary(self, conf_level: float = 0.95) -> str:
        """Posterior mean and pointwise interval of S(t) per time.

        With a single draw there is no interval; only the values are shown.
        """
        if self.n_draws < 2:
            return self._single_draw_summary()

        ci = self.credible_intervals(conf_level)
        pct = conf_level * 100
        lines = []
        lines.append("Call: survival_curve()")
        lines.append("")
        lines.append(
            f"  arm={self.arm.name}, draws={self.n_draws}, "
            f"changepoints={self.changepoints.tolist()}"
        )
        lines.append("")
        lines.append(
            f"  {'time':>8s}  {'mean':>10s}  {'median':>10s}  "
            f"{f'lower {pct:g}%':>10s}  {f'upper {pct:g}%':>10s}"
        )

        m = len(self.times)
        show = min(m, 20)
        for i in range(show):
            lines.append(
                f"  {self.times[i]:8.4g}  {ci.mean[i]:10.6f}  {ci.median[i]:10.6f}  "
                f"{ci.lower[i]:10.6f}  {ci.upper[i]:10.6f}"
            )
        if m > 20:
            lines.append(f"  ... ({m - 20} more rows)")

        return "\n".join(lines)

    def _single_draw_summary(self) -> str:
        lines = [
            "Call: survival_curve()",
            "",
            f"  arm={self.arm.name}, draws=1, "
            f"changepoints={self.changepoints.tolist()}",
            "",
            f"  {'time':>8s}  {'S(t)':>10s}",
        ]
        for t, s in zip(self.times[:20], self.draws[:20, 0]):
            lines.append(f"  {t:8.4g}  {s:10.6f}")
        if len(self.times) > 20:
            lines.append(f"  ... ({len(self.times) - 20} more rows)")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"SurvivalSolution(arm={self.arm.name}, "
            f"n_times={len(self.times)}, n_draws={self.n_draws})"
        )


class ContrastSolution:
    """Posterior draws of the survival difference between arms."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[ContrastParams]) -> None:
        self._result = _result

    @property
    def times(self):
        return self._result.params.times

    @property
    def reference(self):
        return self._result.params.reference

    @property
    def comparator(self):
        return self._result.params.comparator

    @property
    def reference_draws(self):
        return self._result.params.reference_draws

    @property
    def comparator_draws(self):
        return self._result.params.comparator_draws

    @property
    def difference(self):
        """(m, N) comparator minus reference."""
        return self._result.params.difference

    @property
    def n_draws(self) -> int:
        return self._result.params.n_draws

    @property
    def mean(self):
        return self.difference.mean(axis=1)

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def credible_intervals(self, conf_level: float = 0.95):
        return credible_intervals(
            self.difference.T, conf_level=conf_level,
            labels=_time_labels(self.times),
        )

    def joint_credible_region(self, conf_level: float = 0.95, method: str = "rank"):
        return joint_credible_region(
            self.difference.T, conf_level=conf_level, method=method,
            labels=_time_labels(self.times),
        )

    def prob_any_benefit(self, threshold: float = 0.0):
        """P(comparator survival exceeds reference by threshold at some time)."""
        return prob_any_benefit(
            self.difference.T, threshold=threshold, direction="greater",
            labels=_time_labels(self.times),
        )

    def summary(self, conf_level: float = 0.95) -> str:
        """Pointwise vs joint vs any-benefit summaries of the difference.

        Needs at least 2 draws; raises ValidationError otherwise.
        """
        ci = self.credible_intervals(conf_level)
        region = self.joint_credible_region(conf_level)
        benefit = self.prob_any_benefit()
        pct = conf_level * 100

        lines = []
        lines.append("Call: survival_difference()")
        lines.append("")
        lines.append(
            f"  {self.comparator.name} - {self.reference.name}, "
            f"draws={self.n_draws}"
        )
        lines.append("")
        lines.append(
            f"  {'time':>8s}  {'mean':>10s}  "
            f"{f'lower {pct:g}%':>10s}  {f'upper {pct:g}%':>10s}  "
            f"{'joint lo':>10s}  {'joint hi':>10s}  {'P(>0)':>8s}"
        )
        for i in range(len(self.times)):
            lines.append(
                f"  {self.times[i]:8.4g}  {ci.mean[i]:10.6f}  "
                f"{ci.lower[i]:10.6f}  {ci.upper[i]:10.6f}  "
                f"{region.lower[i]:10.6f}  {region.upper[i]:10.6f}  "
                f"{benefit.prob_each[i]:8.4f}"
            )
        lines.append("")
        lines.append(
            f"  Draws inside all pointwise intervals: {ci.simultaneous_coverage:.4f}"
        )
        lines.append(f"  Joint region coverage: {region.coverage:.4f}")
        lines.append(f"  P(any benefit)= {benefit.prob_any:.4f}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ContrastSolution({self.comparator.name} - {self.reference.name}, "
            f"n_times={len(self.times)}, n_draws={self.n_draws})"
        )


class RestrictedMeanSolution:
    """Restricted mean survival time draws."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[RestrictedMeanParams]) -> None:
        self._result = _result

    @property
    def tau(self) -> float:
        return self._result.params.tau

    @property
    def arm(self):
        return self._result.params.arm

    @property
    def draws(self):
        return self._result.params.draws

    @property
    def n_draws(self) -> int:
        return self._result.params.n_draws

    @property
    def mean(self) -> float:
        return float(np.mean(self.draws))

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def credible_interval(self, conf_level: float = 0.95) -> tuple[float, float]:
        ci = credible_intervals(self.draws, conf_level=conf_level)
        return float(ci.lower[0]), float(ci.upper[0])

    def summary(self, conf_level: float = 0.95) -> str:
        """RMST mean and credible interval. Needs at least 2 draws."""
        lo, hi = self.credible_interval(conf_level)
        return "\n".join([
            "Call: restricted_mean()",
            "",
            f"  arm={self.arm.name}, tau={self.tau:g}, draws={self.n_draws}",
            f"  RMST mean= {self.mean:.4f}, "
            f"{conf_level * 100:g}% interval= ({lo:.4f}, {hi:.4f})",
        ])

    def __repr__(self) -> str:
        return (
            f"RestrictedMeanSolution(arm={self.arm.name}, tau={self.tau:g}, "
            f"mean={self.mean:.4f})"
        )


class EpisodeSolution:
    """Time-split dataset for fitting the piece-wise model."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[EpisodeParams]) -> None:
        self._result = _result

    @property
    def subject(self):
        return self._result.params.subject

    @property
    def period(self):
        return self._result.params.period

    @property
    def tstart(self):
        return self._result.params.tstart

    @property
    def tstop(self):
        return self._result.params.tstop

    @property
    def exposure(self):
        return self._result.params.exposure

    @property
    def event(self):
        return self._result.params.event

    @property
    def arm(self):
        return self._result.params.arm

    @property
    def changepoints(self):
        return self._result.params.changepoints

    @property
    def n_subjects(self) -> int:
        return self._result.params.n_subjects

    @property
    def n_events(self) -> int:
        return self._result.params.n_events

    @property
    def n_rows(self) -> int:
        return len(self.subject)

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def to_dataframe(self):
        """Episodes as a pandas DataFrame with a 1-based ``period`` factor level."""
        import pandas as pd

        return pd.DataFrame({
            "subject": self.subject,
            "arm": self.arm,
            "period": self.period + 1,
            "tstart": self.tstart,
            "tstop": self.tstop,
            "exposure": self.exposure,
            "event": self.event.astype(np.intp),
            "censored": (1 - self.event).astype(np.intp),
        })

    def summary(self) -> str:
        lines = []
        lines.append("Call: split_episodes()")
        lines.append("")
        lines.append(
            f"  subjects={self.n_subjects}, events={self.n_events}, "
            f"episodes={self.n_rows}"
        )
        lines.append("")
        lines.append(
            f"  {'period':>8s}  {'interval':>16s}  {'rows':>6s}  "
            f"{'events':>6s}  {'exposure':>10s}"
        )
        bounds = np.concatenate(([0.0], self.changepoints, [np.inf]))
        for j in range(len(bounds) - 1):
            mask = self.period == j
            interval = f"({bounds[j]:g}, {bounds[j + 1]:g}]"
            lines.append(
                f"  {j + 1:8d}  {interval:>16s}  {int(mask.sum()):6d}  "
                f"{int(self.event[mask].sum()):6d}  "
                f"{self.exposure[mask].sum():10.4g}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"EpisodeSolution(subjects={self.n_subjects}, "
            f"episodes={self.n_rows}, events={self.n_events})"
        )
