"""
Design class for bootstrap inference.

BootstrapDesign encapsulates all inputs needed by a backend to run one
bootstrap call. Immutable, validated at construction: every argument
check happens here, before any resampling begins.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from pymedfit.bootstrap._ci import MIN_REPLICATES
from pymedfit.bootstrap._executor import POOL_KINDS
from pymedfit.bootstrap.estimate import ParameterEstimate
from pymedfit.core.compute.tolerances import PSD_TOL
from pymedfit.core.exceptions import (
    DimensionError,
    InsufficientSamples,
    MissingRequiredInput,
    ResamplingFailure,
    ValidationError,
)
from pymedfit.core.validation import (
    check_callable,
    check_consistent_length,
    check_int,
    check_open_unit_interval,
)

METHODS = ("parametric", "nonparametric", "plugin")


def psd_factor(covariance: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Factor L with L @ L.T == covariance, for a positive semi-definite matrix.

    Uses the symmetric eigendecomposition, L = V diag(sqrt(w)), which
    (unlike Cholesky) also handles singular but valid covariances such as
    a parameter with zero variance. Eigenvalues within PSD_TOL of zero
    are clipped to zero.

    Raises:
        ResamplingFailure: If the matrix has a clearly negative eigenvalue.
    """
    w, v = np.linalg.eigh(covariance)
    scale = max(1.0, float(np.max(np.abs(w))))
    min_eig = float(w[0])
    if min_eig < -PSD_TOL * scale:
        raise ResamplingFailure(
            f"covariance: must be positive semi-definite for parametric "
            f"bootstrap, minimum eigenvalue is {min_eig:.6g}",
            min_eigenvalue=min_eig,
        )
    factor = v * np.sqrt(np.clip(w, 0.0, None))
    factor.flags.writeable = False
    return factor


def _freeze_dataset(data: Any) -> tuple[Any, int]:
    """
    Normalize a nonparametric dataset and return it with its row count.

    Accepted forms:
        - pandas-like DataFrame (anything with ``iloc`` and ``len``),
          kept by reference and never mutated
        - mapping of column name -> 1D column, equal lengths
        - array-like with 1 or 2 dimensions (rows first)
    """
    if hasattr(data, 'iloc'):
        return data, len(data)

    if isinstance(data, Mapping):
        if not data:
            raise ValidationError("data: mapping must contain at least one column")
        columns = {}
        for name, col in data.items():
            arr = np.array(col, copy=True)
            if arr.ndim != 1:
                raise DimensionError(
                    f"data: column {name!r} must be 1D, got shape {arr.shape}"
                )
            arr.flags.writeable = False
            columns[name] = arr
        arrays = tuple(columns.values())
        check_consistent_length(
            *arrays, names=tuple(f"data[{k!r}]" for k in columns),
        )
        return MappingProxyType(columns), arrays[0].shape[0]

    arr = np.array(data, copy=True)
    if arr.ndim not in (1, 2):
        raise DimensionError(
            f"data: must be 1D or 2D, got {arr.ndim}D"
        )
    arr.flags.writeable = False
    return arr, arr.shape[0]


@dataclass(frozen=True, eq=False)
class BootstrapDesign:
    """
    Frozen design for one bootstrap call.

    Attributes:
        statistic: For parametric/plugin: fn(dict name -> value) -> scalar.
            For nonparametric: refit callback fn(resampled data) -> scalar.
        method: "parametric", "nonparametric", or "plugin".
        parameter_estimate: Estimates and covariance (parametric, plugin).
        data: Dataset resampled by rows (nonparametric).
        n_rows: Number of rows in data (nonparametric), else None.
        n_boot: Number of bootstrap replicates (0 for plugin).
        ci_level: Confidence level in (0, 1), or None for plugin.
        parallel: Evaluate iterations on a worker pool.
        n_workers: Pool size, None for the default.
        pool: "thread" or "process".
        seed: Master seed, None to draw one from OS entropy.
        mvn_factor: Factor of the covariance used for parametric draws.
    """
    statistic: Callable
    method: str
    parameter_estimate: ParameterEstimate | None
    data: Any
    n_rows: int | None
    n_boot: int
    ci_level: float | None
    parallel: bool
    n_workers: int | None
    pool: str
    seed: int | None
    mvn_factor: NDArray[np.floating[Any]] | None

    @classmethod
    def for_bootstrap(
        cls,
        statistic: Callable,
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
    ) -> BootstrapDesign:
        """
        Create a bootstrap design with validation.

        Args:
            statistic: Statistic function, or refit callback for
                nonparametric.
            method: "parametric" (default), "nonparametric", or "plugin".
            parameter_estimate: Required for parametric and plugin.
            data: Required for nonparametric.
            n_boot: Number of replicates, >= 1 (>= 2 to form an interval).
                Ignored by plugin after validation.
            ci_level: Confidence level, 0 < ci_level < 1.
            parallel: Run iterations on a worker pool.
            n_workers: Pool size, >= 1.
            pool: "thread" or "process".
            seed: Master seed, a non-negative integer.

        Returns:
            Validated BootstrapDesign.

        Raises:
            ValidationError: Unknown method, bad n_boot/ci_level/seed,
                non-callable statistic, empty dataset.
            MissingRequiredInput: Input required by method not supplied.
            InsufficientSamples: n_boot too small for an interval.
            ResamplingFailure: Covariance not positive semi-definite
                (parametric).
        """
        check_callable(statistic, 'statistic_fn')

        if method not in METHODS:
            raise ValidationError(
                f"method: must be 'parametric', 'nonparametric', or 'plugin', "
                f"got {method!r}"
            )

        n_boot = check_int(n_boot, 'n_boot', minimum=1)
        level = check_open_unit_interval(ci_level, 'ci_level')

        if not isinstance(parallel, (bool, np.bool_)):
            raise ValidationError(
                f"parallel: must be a bool, got {type(parallel).__name__}"
            )
        if n_workers is not None:
            n_workers = check_int(n_workers, 'n_workers', minimum=1)
        if pool not in POOL_KINDS:
            raise ValidationError(
                f"pool: must be 'thread' or 'process', got {pool!r}"
            )
        if seed is not None:
            seed = check_int(seed, 'seed', minimum=0)

        n_rows = None
        mvn_factor = None

        if method in ("parametric", "plugin"):
            if parameter_estimate is None:
                raise MissingRequiredInput(
                    f"parameter_estimate is required for {method} bootstrap",
                    argument='parameter_estimate',
                    method=method,
                )
            if not isinstance(parameter_estimate, ParameterEstimate):
                raise ValidationError(
                    f"parameter_estimate: must be a ParameterEstimate, "
                    f"got {type(parameter_estimate).__name__}"
                )
            data = None
        else:
            if data is None:
                raise MissingRequiredInput(
                    "data is required for nonparametric bootstrap",
                    argument='data',
                    method=method,
                )
            data, n_rows = _freeze_dataset(data)
            if n_rows < 1:
                raise ValidationError(
                    "data: must contain at least 1 row for nonparametric bootstrap"
                )
            parameter_estimate = None

        if method == "plugin":
            n_boot = 0
            level = None
        elif n_boot < MIN_REPLICATES:
            raise InsufficientSamples(
                f"n_boot: a percentile interval requires at least "
                f"{MIN_REPLICATES} replicates, got {n_boot}",
                n_samples=n_boot,
                required=MIN_REPLICATES,
            )

        if method == "parametric":
            mvn_factor = psd_factor(parameter_estimate.covariance)

        return cls(
            statistic=statistic,
            method=method,
            parameter_estimate=parameter_estimate,
            data=data,
            n_rows=n_rows,
            n_boot=n_boot,
            ci_level=level,
            parallel=bool(parallel),
            n_workers=n_workers,
            pool=pool,
            seed=seed,
            mvn_factor=mvn_factor,
        )
