"""Survival curve backends. GPU backend imported lazily (requires torch)."""

from pybayessurv.survival.backends.cpu import CPUSurvivalBackend

__all__ = ["CPUSurvivalBackend"]
