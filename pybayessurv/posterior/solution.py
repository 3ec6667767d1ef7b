"""
Solution wrappers for posterior summaries.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with a summary() method.
"""

from __future__ import annotations

from pybayessurv.core.result import Result
from pybayessurv.posterior._common import (
    AnyBenefitParams,
    CredibleIntervalParams,
    JointRegionParams,
)


def _labels(labels, k: int) -> list[str]:
    if labels is None:
        return [f"q{j}" for j in range(k)]
    return [str(lab) for lab in labels]


class CredibleIntervalSolution:
    """Pointwise credible intervals."""

    __slots__ = ('_result', '_labels')

    def __init__(self, _result: Result[CredibleIntervalParams], _labels=None) -> None:
        self._result = _result
        self._labels = _labels

    @property
    def mean(self):
        return self._result.params.mean

    @property
    def median(self):
        return self._result.params.median

    @property
    def lower(self):
        return self._result.params.lower

    @property
    def upper(self):
        return self._result.params.upper

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def inside(self):
        """Per-draw indicator: draw lies inside every pointwise interval."""
        return self._result.params.inside

    @property
    def simultaneous_coverage(self) -> float:
        """Share of draws inside all intervals at once."""
        return self._result.params.simultaneous_coverage

    @property
    def n_draws(self) -> int:
        return self._result.params.n_draws

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Table of mean, median and interval per quantity."""
        pct = self.conf_level * 100
        lines = []
        lines.append("Call: credible_intervals()")
        lines.append("")
        lines.append(f"  draws={self.n_draws}, level={pct:g}%")
        lines.append("")
        lines.append(
            f"  {'':>10s}  {'mean':>10s}  {'median':>10s}  "
            f"{'lower':>10s}  {'upper':>10s}"
        )
        for j, name in enumerate(_labels(self._labels, len(self.mean))):
            lines.append(
                f"  {name:>10s}  {self.mean[j]:10.6f}  {self.median[j]:10.6f}  "
                f"{self.lower[j]:10.6f}  {self.upper[j]:10.6f}"
            )
        lines.append("")
        lines.append(
            f"  Draws inside all intervals: {self.simultaneous_coverage:.4f}"
        )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CredibleIntervalSolution(k={len(self.mean)}, "
            f"level={self.conf_level}, "
            f"simultaneous={self.simultaneous_coverage:.4f})"
        )


class JointRegionSolution:
    """Joint credible region with per-draw membership."""

    __slots__ = ('_result', '_labels')

    def __init__(self, _result: Result[JointRegionParams], _labels=None) -> None:
        self._result = _result
        self._labels = _labels

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def center(self):
        return self._result.params.center

    @property
    def lower(self):
        return self._result.params.lower

    @property
    def upper(self):
        return self._result.params.upper

    @property
    def inside(self):
        """Per-draw membership indicator."""
        return self._result.params.inside

    @property
    def coverage(self) -> float:
        return self._result.params.coverage

    @property
    def cutoff(self) -> float:
        return self._result.params.cutoff

    @property
    def n_draws(self) -> int:
        return self._result.params.n_draws

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        pct = self.conf_level * 100
        lines = []
        lines.append(f"Call: joint_credible_region(method='{self.method}')")
        lines.append("")
        lines.append(
            f"  draws={self.n_draws}, level={pct:g}%, "
            f"achieved coverage={self.coverage:.4f}"
        )
        lines.append("")
        lines.append(
            f"  {'':>10s}  {'center':>10s}  {'lower':>10s}  {'upper':>10s}"
        )
        for j, name in enumerate(_labels(self._labels, len(self.center))):
            lines.append(
                f"  {name:>10s}  {self.center[j]:10.6f}  "
                f"{self.lower[j]:10.6f}  {self.upper[j]:10.6f}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"JointRegionSolution(method={self.method!r}, "
            f"k={len(self.center)}, coverage={self.coverage:.4f})"
        )


class AnyBenefitSolution:
    """Probability of benefit at any coordinate."""

    __slots__ = ('_result', '_labels')

    def __init__(self, _result: Result[AnyBenefitParams], _labels=None) -> None:
        self._result = _result
        self._labels = _labels

    @property
    def threshold(self) -> float:
        return self._result.params.threshold

    @property
    def direction(self) -> str:
        return self._result.params.direction

    @property
    def prob_each(self):
        return self._result.params.prob_each

    @property
    def prob_any(self) -> float:
        return self._result.params.prob_any

    @property
    def prob_all(self) -> float:
        return self._result.params.prob_all

    @property
    def indicator(self):
        return self._result.params.indicator

    @property
    def n_draws(self) -> int:
        return self._result.params.n_draws

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        op = ">" if self.direction == "greater" else "<"
        lines = []
        lines.append("Call: prob_any_benefit()")
        lines.append("")
        lines.append(f"  benefit: value {op} {self.threshold:g}, draws={self.n_draws}")
        lines.append("")
        lines.append(f"  {'':>10s}  {'P(benefit)':>10s}")
        for j, name in enumerate(_labels(self._labels, len(self.prob_each))):
            lines.append(f"  {name:>10s}  {self.prob_each[j]:10.4f}")
        lines.append("")
        lines.append(f"  P(any)= {self.prob_any:.4f}, P(all)= {self.prob_all:.4f}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"AnyBenefitSolution(prob_any={self.prob_any:.4f}, "
            f"prob_all={self.prob_all:.4f})"
        )
