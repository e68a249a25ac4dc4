"""
CPU backends for bootstrap resampling.

CPUParametricBackend: draws parameter vectors from N(theta_hat, Sigma_hat).
CPUNonparametricBackend: resamples rows with replacement and refits.
CPUPluginBackend: point estimate only, zero resamples.

Each backend evaluates the statistic once for the point estimate and,
except plugin, hands one replicate function to the ParallelExecutor.
Replicate functions are small picklable objects holding only read-only
inputs, so the same object runs sequentially, on threads, or in worker
processes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pymedfit.bootstrap._common import ReplicateParams
from pymedfit.bootstrap._evaluator import StatisticEvaluator
from pymedfit.bootstrap._executor import ExecutionRecord, ParallelExecutor
from pymedfit.bootstrap._seeding import resolve_master_seed
from pymedfit.bootstrap.design import BootstrapDesign
from pymedfit.core.compute.timing import Timer
from pymedfit.core.exceptions import ResamplingFailure
from pymedfit.core.result import Result


def take_rows(data: Any, indices: NDArray[np.intp]) -> Any:
    """Rows ``indices`` of data, in the same container type."""
    if hasattr(data, 'iloc'):
        return data.iloc[indices].reset_index(drop=True)
    if isinstance(data, Mapping):
        return {name: col[indices] for name, col in data.items()}
    return data[indices]


class _ParametricReplicate:
    """One parametric draw: theta* = theta_hat + L z, z ~ N(0, I)."""

    def __init__(self, evaluator, names, mean, factor):
        self.evaluator = evaluator
        self.names = names
        self.mean = mean
        self.factor = factor

    def __call__(self, index: int, rng: np.random.Generator) -> float:
        z = rng.standard_normal(self.mean.shape[0])
        theta = self.mean + self.factor @ z
        return self.evaluator(dict(zip(self.names, theta.tolist())), index)


class _NonparametricReplicate:
    """One nonparametric draw: n rows i.i.d. with replacement, then refit."""

    def __init__(self, evaluator, data, n_rows):
        self.evaluator = evaluator
        self.data = data
        self.n_rows = n_rows

    def __call__(self, index: int, rng: np.random.Generator) -> float:
        indices = rng.integers(0, self.n_rows, size=self.n_rows)
        return self.evaluator(take_rows(self.data, indices), index)


class _ResamplingBackend:
    """Shared solve() for the backends that resample."""

    def __init__(self, executor: ParallelExecutor | None = None):
        self._executor = executor

    @property
    def name(self) -> str:
        raise NotImplementedError

    def _point_estimate(self, design: BootstrapDesign) -> float:
        raise NotImplementedError

    def _replicate(self, design: BootstrapDesign):
        raise NotImplementedError

    def _info(self, design: BootstrapDesign) -> dict[str, Any]:
        return {}

    def _executor_for(self, design: BootstrapDesign) -> ParallelExecutor:
        if self._executor is not None:
            return self._executor
        return ParallelExecutor(
            parallel=design.parallel,
            n_workers=design.n_workers,
            pool=design.pool,
        )

    def solve(self, design: BootstrapDesign) -> Result[ReplicateParams]:
        """Run the bootstrap and return Result[ReplicateParams]."""
        timer = Timer()
        timer.start()

        master_seed = resolve_master_seed(design.seed)

        with timer.section('point_estimate'):
            estimate = self._point_estimate(design)

        with timer.section('replicates'):
            record: ExecutionRecord = self._executor_for(design).run(
                self._replicate(design), design.n_boot, master_seed,
            )

        timer.stop()

        replicates = record.replicates
        replicates.flags.writeable = False

        info = {
            'method': design.method,
            'seed': master_seed,
            'n_boot': design.n_boot,
            'execution': record.mode,
            'n_workers': record.n_workers,
            'n_chunks': record.n_chunks,
        }
        info.update(self._info(design))

        return Result(
            params=ReplicateParams(estimate=estimate, replicates=replicates),
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=record.warnings,
        )


class CPUParametricBackend(_ResamplingBackend):
    """
    Parametric bootstrap.

    Each iteration draws theta* from the multivariate normal with mean the
    point estimates and covariance the estimated covariance, then evaluates
    statistic(dict name -> theta*). The covariance factor was computed, and
    positive semi-definiteness checked, when the design was built.
    """

    @property
    def name(self) -> str:
        return 'cpu_parametric'

    def _point_estimate(self, design: BootstrapDesign) -> float:
        evaluate = StatisticEvaluator(design.statistic)
        return evaluate(design.parameter_estimate.as_dict())

    def _replicate(self, design: BootstrapDesign) -> _ParametricReplicate:
        pe = design.parameter_estimate
        return _ParametricReplicate(
            evaluator=StatisticEvaluator(design.statistic),
            names=pe.names,
            mean=pe.values,
            factor=design.mvn_factor,
        )

    def _info(self, design: BootstrapDesign) -> dict[str, Any]:
        return {'n_params': design.parameter_estimate.n_params}


class CPUNonparametricBackend(_ResamplingBackend):
    """
    Ordinary nonparametric bootstrap.

    Each iteration draws n row indices uniformly with replacement, takes
    those rows, and calls the refit callback on the resample. A callback
    that raises is reported as ResamplingFailure for that iteration; one
    that returns a non-scalar as StatisticEvaluationError.
    """

    @property
    def name(self) -> str:
        return 'cpu_nonparametric'

    def _point_estimate(self, design: BootstrapDesign) -> float:
        evaluate = StatisticEvaluator(design.statistic)
        return evaluate(_plain(design.data))

    def _replicate(self, design: BootstrapDesign) -> _NonparametricReplicate:
        return _NonparametricReplicate(
            evaluator=StatisticEvaluator(design.statistic, failure=ResamplingFailure),
            data=_plain(design.data),
            n_rows=design.n_rows,
        )

    def _info(self, design: BootstrapDesign) -> dict[str, Any]:
        return {'n_rows': design.n_rows}


class CPUPluginBackend:
    """
    Plugin estimator: statistic(point estimates), no resampling.
    """

    @property
    def name(self) -> str:
        return 'cpu_plugin'

    def solve(self, design: BootstrapDesign) -> Result[ReplicateParams]:
        timer = Timer()
        timer.start()

        with timer.section('point_estimate'):
            evaluate = StatisticEvaluator(design.statistic)
            estimate = evaluate(design.parameter_estimate.as_dict())

        timer.stop()

        replicates = np.empty(0, dtype=np.float64)
        replicates.flags.writeable = False

        return Result(
            params=ReplicateParams(estimate=estimate, replicates=replicates),
            info={
                'method': 'plugin',
                'seed': None,
                'n_boot': 0,
                'execution': 'none',
                'n_params': design.parameter_estimate.n_params,
            },
            timing=timer.result(),
            backend_name=self.name,
        )


def _plain(data: Any) -> Any:
    # mappingproxy cannot be pickled for process pools
    if isinstance(data, Mapping):
        return dict(data)
    return data
