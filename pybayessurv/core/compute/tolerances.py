"""
Tolerance tiers for numerical validation.

Defines precision expectations for the two survival-curve compute paths:
- CPU FP64 (reference)
- GPU FP32 (CUDA or MPS)

Used by the test suite and by the GPU backend when it reports which tier
its output should be compared with.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# CPU reference
CPU_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='cpu_fp64',
    description='CPU double precision reference',
)

# GPU with FP64 (CUDA only; MPS has no float64)
GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

# GPU with FP32 (default)
GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='gpu_fp32',
    description='GPU single precision, statistically equivalent',
)


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend."""
    if 'gpu' in backend_name:
        if 'fp64' in backend_name:
            return GPU_FP64
        return GPU_FP32
    return CPU_FP64
