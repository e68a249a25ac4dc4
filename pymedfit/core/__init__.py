"""
Core infrastructure for pymedfit.

Shared abstractions and utilities used by the bootstrap engine and the
mediation layer.

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, linear algebra kernels
"""

from pymedfit.core.protocols import Backend
from pymedfit.core.result import Result
from pymedfit.core.exceptions import (
    PyMedfitError,
    ValidationError,
    InvalidArgument,
    DimensionError,
    MissingRequiredInput,
    NumericalError,
    SingularMatrixError,
    BootstrapError,
    StatisticEvaluationError,
    ResamplingFailure,
    InsufficientSamples,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyMedfitError",
    "ValidationError",
    "InvalidArgument",
    "DimensionError",
    "MissingRequiredInput",
    "NumericalError",
    "SingularMatrixError",
    "BootstrapError",
    "StatisticEvaluationError",
    "ResamplingFailure",
    "InsufficientSamples",
]
