"""
Exception hierarchy for pymedfit.

Everything raised on purpose by the package derives from PyMedfitError:
argument problems from ValidationError, linear-algebra problems from
NumericalError, and failures during a bootstrap run from BootstrapError.
Diagnostic values (the failing iteration, the offending argument, the
minimum eigenvalue) travel as attributes, so callers can branch on them
instead of parsing messages. Messages begin with the argument or field
they concern.
"""


class PyMedfitError(Exception):
    """Base exception for all pymedfit errors."""
    pass


class ValidationError(PyMedfitError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks: unknown method,
    non-positive n_boot, ci_level outside (0, 1), non-callable statistic
    function, or a value object whose invariants do not hold.
    """
    pass


# Public name used throughout the bootstrap documentation.
InvalidArgument = ValidationError


class DimensionError(ValidationError):
    """
    An array has the wrong number of dimensions, or arrays that must align
    (covariance and estimates, columns of a dataset) do not.
    """
    pass


class MissingRequiredInput(ValidationError):
    """
    An input required by the chosen method was not supplied.

    Attributes:
        argument: Name of the missing argument
        method: Bootstrap method that requires it
    """

    def __init__(
        self,
        message: str,
        argument: str | None = None,
        method: str | None = None,
    ):
        super().__init__(message)
        self.argument = argument
        self.method = method


class NumericalError(PyMedfitError):
    """A linear-algebra step could not be carried out reliably."""
    pass


class SingularMatrixError(NumericalError):
    """
    A design matrix is rank-deficient, e.g. collinear predictors in the
    mediator or outcome model.

    Attributes:
        matrix_name: Which matrix, e.g. 'X'
        rank: Numerical rank found
        expected_rank: Rank required (number of columns)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name, self.rank, self.expected_rank = matrix_name, rank, expected_rank


class BootstrapError(PyMedfitError):
    """
    A bootstrap run failed.

    Attributes:
        iteration: Zero-based index of the failing resample iteration,
            or None if the failure is not tied to a single iteration
            (e.g. evaluation of the point estimate).
    """

    def __init__(self, message: str, iteration: int | None = None):
        super().__init__(message)
        self.iteration = iteration


class StatisticEvaluationError(BootstrapError):
    """
    The user statistic function raised or returned something other than
    a single real scalar.
    """
    pass


class ResamplingFailure(BootstrapError):
    """
    A resample could not be drawn or refitted.

    Raised for a covariance matrix that is not positive semi-definite in
    the parametric path, and for a refit callback that raises in the
    nonparametric path.

    Attributes:
        min_eigenvalue: Minimum eigenvalue of the covariance, if computed
    """

    def __init__(
        self,
        message: str,
        iteration: int | None = None,
        min_eigenvalue: float | None = None,
    ):
        super().__init__(message, iteration=iteration)
        self.min_eigenvalue = min_eigenvalue


class InsufficientSamples(BootstrapError):
    """
    Too few bootstrap replicates to compute the requested interval.

    Attributes:
        n_samples: Number of replicates available
        required: Minimum number required
    """

    def __init__(
        self,
        message: str,
        n_samples: int | None = None,
        required: int | None = None,
    ):
        super().__init__(message)
        self.n_samples = n_samples
        self.required = required
