"""Resampling backends for bootstrap inference."""

from pymedfit.bootstrap.backends.cpu import (
    CPUNonparametricBackend,
    CPUParametricBackend,
    CPUPluginBackend,
)

__all__ = [
    "CPUParametricBackend",
    "CPUNonparametricBackend",
    "CPUPluginBackend",
]
