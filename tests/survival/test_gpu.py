"""
GPU tests for survival_curve().

survival_curve() is the only GPU-accelerated survival method. Its output
is validated against the CPU float64 reference within the GPU tolerance
tier.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pybayessurv.core.compute.tolerances import GPU_FP32, GPU_FP64, select_tolerance
from pybayessurv.posterior import Arm
from pybayessurv.survival import survival_curve

# Check GPU availability
try:
    import torch
    GPU_AVAILABLE = torch.cuda.is_available()
except ImportError:
    GPU_AVAILABLE = False


GRID = np.linspace(0.0, 48.0, 97)


@pytest.mark.skipif(not GPU_AVAILABLE, reason="CUDA not available")
class TestSurvivalCurveGPU:
    """GPU-accelerated survival curve tests."""

    def test_gpu_matches_cpu(self, simulated_draws):
        cpu = survival_curve(GRID, 1, simulated_draws, backend="cpu")
        gpu = survival_curve(GRID, 1, simulated_draws, backend="gpu")

        assert gpu.backend_name == "gpu_piecewise_fp32"
        tol = select_tolerance(gpu.backend_name)
        assert tol is GPU_FP32
        assert_allclose(gpu.draws, cpu.draws, rtol=tol.rtol, atol=tol.atol)

    def test_gpu_fp64_matches_cpu(self, simulated_draws):
        gpu = survival_curve(GRID, Arm.TREATMENT, simulated_draws, backend="gpu", use_fp64=True)
        cpu = survival_curve(GRID, 2, simulated_draws, backend="cpu")

        assert gpu.backend_name == "gpu_piecewise_fp64"
        assert_allclose(gpu.draws, cpu.draws,
                        rtol=GPU_FP64.rtol, atol=GPU_FP64.atol)

    def test_gpu_returns_float64(self, simulated_draws):
        gpu = survival_curve(GRID, 2, simulated_draws, backend="gpu")
        assert gpu.draws.dtype == np.float64
        assert gpu.draws.shape == (len(GRID), simulated_draws.n_draws)

    def test_gpu_origin_is_one(self, simulated_draws):
        gpu = survival_curve(GRID, 1, simulated_draws, backend="gpu")
        assert np.all(gpu.draws[0] == 1.0)

    def test_auto_selects_gpu(self, simulated_draws):
        result = survival_curve(GRID, 1, simulated_draws, backend="auto")
        assert result.backend_name.startswith("gpu_piecewise")
