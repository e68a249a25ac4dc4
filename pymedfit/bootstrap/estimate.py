"""
ParameterEstimate: point estimates with their covariance matrix.

Produced by a model fitting/extraction layer and consumed read-only by the
parametric and plugin bootstrap. Immutable, validated at construction.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymedfit.core.compute.tolerances import SYMMETRY_ATOL, SYMMETRY_RTOL
from pymedfit.core.exceptions import DimensionError, ValidationError
from pymedfit.core.validation import (
    check_array,
    check_finite,
    check_square,
    check_symmetric,
)


def _readonly(arr: NDArray) -> NDArray:
    arr = np.array(arr, dtype=np.float64, copy=True)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class ParameterEstimate:
    """
    Frozen container of named point estimates and their covariance.

    Attributes:
        estimates: Name -> point estimate, in model order. Stored as a
            read-only mapping of Python floats.
        covariance: Covariance matrix of the estimates, shape (p, p),
            rows/columns ordered like ``estimates``.
        data: Reference dataset the estimates were fitted on, if kept.
        n_obs: Number of observations used in fitting.
        converged: Whether every underlying model converged.
        source: Tag naming the fitting engine (e.g. 'pymedfit.ols').

    Raises:
        ValidationError: If an estimate is not a finite real number, the
            covariance is not symmetric or has a negative variance,
            or n_obs is not a positive integer.
        DimensionError: If the covariance is not square or its dimension
            differs from the number of estimates.
    """
    estimates: Mapping[str, float]
    covariance: NDArray[np.floating[Any]]
    data: Any = None
    n_obs: int | None = None
    converged: bool = True
    source: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.estimates, Mapping):
            raise ValidationError(
                f"estimates: must be a mapping of name -> value, "
                f"got {type(self.estimates).__name__}"
            )

        names = tuple(self.estimates.keys())
        if not names:
            raise ValidationError("estimates: must contain at least one parameter")
        for name in names:
            if not isinstance(name, str) or not name:
                raise ValidationError(
                    f"estimates: names must be non-empty strings, got {name!r}"
                )

        values = check_array(list(self.estimates.values()), 'estimates')
        if values.ndim != 1:
            raise DimensionError(
                f"estimates: each value must be a scalar, got shape {values.shape[1:]}"
            )
        check_finite(values, 'estimates')

        cov = check_array(self.covariance, 'covariance')
        check_square(cov, 'covariance')
        if cov.shape[0] != len(names):
            raise DimensionError(
                f"covariance: dimension {cov.shape[0]} must equal the number "
                f"of estimates ({len(names)})"
            )
        check_finite(cov, 'covariance')
        check_symmetric(cov, 'covariance', rtol=SYMMETRY_RTOL, atol=SYMMETRY_ATOL)

        diag = np.diag(cov)
        if np.any(diag < 0):
            bad = [names[i] for i in np.flatnonzero(diag < 0)]
            raise ValidationError(
                f"covariance: diagonal must be non-negative, negative variance for {bad}"
            )

        if self.n_obs is not None:
            if isinstance(self.n_obs, bool) or not isinstance(self.n_obs, (int, np.integer)):
                raise ValidationError(
                    f"n_obs: must be an integer, got {type(self.n_obs).__name__}"
                )
            if self.n_obs < 1:
                raise ValidationError(f"n_obs: must be >= 1, got {self.n_obs}")
            object.__setattr__(self, 'n_obs', int(self.n_obs))

        if not isinstance(self.converged, (bool, np.bool_)):
            raise ValidationError(
                f"converged: must be a bool, got {type(self.converged).__name__}"
            )

        if self.source is not None and not isinstance(self.source, str):
            raise ValidationError(
                f"source: must be a string or None, got {type(self.source).__name__}"
            )

        frozen = dict(zip(names, (float(v) for v in values.reshape(-1))))
        object.__setattr__(self, 'estimates', MappingProxyType(frozen))
        object.__setattr__(self, 'covariance', _readonly(cov))
        object.__setattr__(self, 'converged', bool(self.converged))

    @classmethod
    def from_arrays(
        cls,
        names: Sequence[str],
        values: ArrayLike,
        covariance: ArrayLike,
        **metadata: Any,
    ) -> ParameterEstimate:
        """
        Build from parallel name/value sequences.

        Unlike a mapping, a name sequence can contain duplicates; these
        are rejected here.

        Raises:
            ValidationError: If names are duplicated
            DimensionError: If names and values differ in length
        """
        names = list(names)
        dupes = sorted(n for n, count in Counter(names).items() if count > 1)
        if dupes:
            raise ValidationError(f"names: must be unique, duplicated {dupes}")

        vals = check_array(values, 'values')
        if vals.ndim != 1:
            raise DimensionError(
                f"values: expected 1D array, got {vals.ndim}D with shape {vals.shape}"
            )
        if len(names) != vals.shape[0]:
            raise DimensionError(
                f"Inconsistent lengths: names={len(names)}, values={vals.shape[0]}"
            )

        return cls(
            estimates=dict(zip(names, vals.tolist())),
            covariance=np.asarray(covariance),
            **metadata,
        )

    @property
    def names(self) -> tuple[str, ...]:
        """Parameter names in model order."""
        return tuple(self.estimates.keys())

    @property
    def values(self) -> NDArray[np.floating[Any]]:
        """Point estimates as a read-only float64 vector."""
        return _readonly(np.fromiter(self.estimates.values(), dtype=np.float64,
                                     count=len(self.estimates)))

    @property
    def n_params(self) -> int:
        return len(self.estimates)

    @property
    def standard_errors(self) -> dict[str, float]:
        """Square roots of the covariance diagonal, keyed by name."""
        se = np.sqrt(np.diag(self.covariance))
        return dict(zip(self.names, se.tolist()))

    def __getitem__(self, name: str) -> float:
        try:
            return self.estimates[name]
        except KeyError:
            raise KeyError(
                f"No estimate named {name!r}. Available: {list(self.names)}"
            ) from None

    def as_dict(self) -> dict[str, float]:
        """A fresh, mutable copy of the estimates."""
        return dict(self.estimates)

    def __repr__(self) -> str:
        return (
            f"ParameterEstimate(n_params={self.n_params}, "
            f"n_obs={self.n_obs}, source={self.source!r})"
        )
