"""
Generic result container for all pybayessurv computations.

The Result class provides a standardized envelope that all domain-specific
results use. Domains define their own parameter payloads; the envelope
carries timing, the backend that produced it and non-fatal warnings.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, conf_level, grid size)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for posterior computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific payload (survival draws, interval bounds, ...)
        info: Structured metadata (method, arm, conf_level)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=SurvivalParams(times=t, arm=Arm.CONTROL, draws=s),
        ...     info={'method': 'piecewise_exponential'},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_piecewise'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
