"""
Wall-clock timing recorded on every Result.

Solvers time their named stages (segment widths, exponentiation, host
transfer) and store the totals in ``Result.timing``. GPU evaluation
synchronizes CUDA around each stage so queued kernels are counted.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulates the total and per-stage time of one solver call.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('log_survival'):
            log_s = log_survival(times, lower, upper, log_scale)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'log_survival': ...}
    """

    def __init__(self, sync_cuda: bool = False):
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def _sync(self) -> None:
        if self._sync_cuda:
            import torch
            if torch.cuda.is_available():
                torch.cuda.synchronize()

    def start(self) -> None:
        self._sync()
        self._start_time = time.perf_counter()

    def stop(self) -> None:
        self._sync()
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time one solver stage; a stage entered twice adds up."""
        self._sync()
        start = time.perf_counter()
        try:
            yield
        finally:
            self._sync()
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    def result(self) -> dict[str, float]:
        """Stage timings plus 'total_seconds', for ``Result.timing``."""
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")

        result = {'total_seconds': self._total}
        result.update(self._sections)
        return result
