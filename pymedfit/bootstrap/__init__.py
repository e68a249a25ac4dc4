"""
pymedfit bootstrap inference.

Parametric, nonparametric, and plugin inference for a scalar statistic,
with reproducible sequential or pooled execution.

Usage:
    from pymedfit.bootstrap import ParameterEstimate, bootstrap

    pe = ParameterEstimate(
        estimates={"a": 0.5, "b": 0.4},
        covariance=[[0.01, 0.0], [0.0, 0.01]],
    )
    result = bootstrap(lambda th: th["a"] * th["b"], "parametric",
                       parameter_estimate=pe, n_boot=1000, seed=123)
    result.conf_int
"""

from pymedfit.bootstrap._ci import percentile_interval
from pymedfit.bootstrap._executor import ParallelExecutor, default_worker_count
from pymedfit.bootstrap._seeding import iteration_rng, iteration_seed
from pymedfit.bootstrap.design import BootstrapDesign
from pymedfit.bootstrap.estimate import ParameterEstimate
from pymedfit.bootstrap.solution import BootstrapResult
from pymedfit.bootstrap.solvers import bootstrap

__all__ = [
    "bootstrap",
    "BootstrapDesign",
    "BootstrapResult",
    "ParameterEstimate",
    "ParallelExecutor",
    "default_worker_count",
    "iteration_rng",
    "iteration_seed",
    "percentile_interval",
]
