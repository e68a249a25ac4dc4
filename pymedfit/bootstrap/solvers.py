"""
Solver dispatch for bootstrap inference.

Provides bootstrap(): one entry point for parametric, nonparametric, and
plugin inference on a caller-supplied statistic.
"""

from __future__ import annotations

from typing import Any, Callable

from pymedfit.bootstrap._ci import percentile_interval
from pymedfit.bootstrap._common import ReplicateParams
from pymedfit.bootstrap.backends.cpu import (
    CPUNonparametricBackend,
    CPUParametricBackend,
    CPUPluginBackend,
)
from pymedfit.bootstrap.design import BootstrapDesign
from pymedfit.bootstrap.estimate import ParameterEstimate
from pymedfit.bootstrap.solution import BootstrapResult
from pymedfit.core.protocols import Backend

_BACKENDS: dict[str, type[Backend[BootstrapDesign, ReplicateParams]]] = {
    "parametric": CPUParametricBackend,
    "nonparametric": CPUNonparametricBackend,
    "plugin": CPUPluginBackend,
}


def _get_backend(method: str) -> Backend[BootstrapDesign, ReplicateParams]:
    """Backend implementing the resampling strategy for method."""
    return _BACKENDS[method]()


def bootstrap(
    statistic_fn: Callable[[Any], Any] | BootstrapDesign,
    method: str = "parametric",
    *,
    parameter_estimate: ParameterEstimate | None = None,
    data: Any = None,
    n_boot: int = 1000,
    ci_level: float = 0.95,
    parallel: bool = False,
    n_workers: int | None = None,
    pool: str = "thread",
    seed: int | None = None,
) -> BootstrapResult:
    """
    Bootstrap inference for a scalar statistic.

    Parameters
    ----------
    statistic_fn : callable or BootstrapDesign
        For "parametric" and "plugin": receives a dict mapping parameter
        name -> value and returns one number, e.g.
        ``lambda theta: theta["m_X"] * theta["y_M"]``.
        For "nonparametric": the refit-and-evaluate callback; receives a
        resample of ``data`` (same container type, same row count) and
        returns one number.
        A pre-built BootstrapDesign is also accepted.
    method : str
        "parametric" (default): draw parameter vectors from
        N(estimates, covariance). Fast; assumes asymptotic normality.
        "nonparametric": resample rows with replacement and refit. No
        distributional assumption; slower.
        "plugin": point estimate only, no interval.
    parameter_estimate : ParameterEstimate
        Required for "parametric" and "plugin"; ignored otherwise.
    data : array-like, mapping of columns, or DataFrame
        The dataset resampled by rows (its first axis, or the shared
        length of its columns). Required for "nonparametric"; ignored
        otherwise.
    n_boot : int
        Number of bootstrap replicates. Default 1000. Must be >= 2 for
        an interval. Ignored by "plugin".
    ci_level : float
        Confidence level, strictly between 0 and 1. Default 0.95.
    parallel : bool
        Evaluate iterations on a worker pool. Results are identical to a
        sequential run with the same seed. Default False.
    n_workers : int or None
        Worker count of the pool; only used when parallel is True.
        Default: available cores minus one (at least 1).
    pool : str
        "thread" (default) or "process". A process pool needs a picklable
        statistic (e.g. a module-level function); otherwise the run falls
        back to sequential with a RuntimeWarning.
    seed : int or None
        Master seed. Iteration i draws from a generator seeded by
        (seed, i). If None, a seed is drawn from OS entropy and reported
        as ``result.seed``.

    Returns
    -------
    BootstrapResult
        Estimate, percentile interval, replicate distribution.

    Raises
    ------
    ValidationError
        Unknown method, n_boot < 1, ci_level outside (0, 1), statistic
        not callable, empty dataset.
    MissingRequiredInput
        parameter_estimate (parametric/plugin) or data (nonparametric)
        not supplied.
    InsufficientSamples
        n_boot < 2 for parametric/nonparametric.
    ResamplingFailure
        Covariance not positive semi-definite, or a refit failed.
    StatisticEvaluationError
        statistic_fn raised or returned a non-scalar.
    """
    if isinstance(statistic_fn, BootstrapDesign):
        design = statistic_fn
    else:
        design = BootstrapDesign.for_bootstrap(
            statistic_fn,
            method,
            parameter_estimate=parameter_estimate,
            data=data,
            n_boot=n_boot,
            ci_level=ci_level,
            parallel=parallel,
            n_workers=n_workers,
            pool=pool,
            seed=seed,
        )

    be = _get_backend(design.method)
    result = be.solve(design)

    if design.method == "plugin":
        return BootstrapResult.from_result(result, ci=None, ci_level=None)

    ci = percentile_interval(result.params.replicates, design.ci_level)
    return BootstrapResult.from_result(result, ci=ci, ci_level=design.ci_level)
