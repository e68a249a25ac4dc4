"""
Shared compute infrastructure for pymedfit.

Numeric infrastructure shared by the bootstrap engine and the mediation
fitters. Domain-specific backends live in {domain}/backends/.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical tolerance constants
    linalg: Linear algebra kernels (QR least squares)
"""

from pymedfit.core.compute.timing import Timer, timed

__all__ = [
    "Timer",
    "timed",
]
