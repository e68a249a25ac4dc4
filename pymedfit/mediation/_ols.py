"""
Ordinary least squares for the mediator and outcome models.

fit_ols() fits ``response ~ 1 + predictors`` on named columns and returns
an OLSFit with everything extraction needs: coefficients, their covariance
sigma^2 (X'X)^-1, residual SD, and sample size.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from pymedfit.core.compute.linalg.qr import qr_lstsq
from pymedfit.core.compute.timing import Timer
from pymedfit.core.exceptions import ValidationError
from pymedfit.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
)

INTERCEPT = "(Intercept)"


def get_column(data: Any, name: str) -> NDArray[np.floating[Any]]:
    """Named numeric column from a mapping of columns or a DataFrame."""
    try:
        raw = data[name]
    except (KeyError, IndexError, TypeError, ValueError):
        raise ValidationError(f"data: variable {name!r} not found") from None
    col = check_array(raw, f"data[{name!r}]")
    check_1d(col, f"data[{name!r}]")
    check_finite(col, f"data[{name!r}]")
    return col


@dataclass(frozen=True, eq=False)
class OLSFit:
    """
    A fitted linear model.

    Attributes:
        response: Name of the response variable.
        names: Coefficient names, "(Intercept)" first.
        coefficients: Estimates, shape (p,).
        vcov: Covariance of the estimates, shape (p, p).
        sigma: Residual standard error, sqrt(RSS / (n - p)).
        n_obs: Number of observations.
        df_residual: n - p.
    """
    response: str
    names: tuple[str, ...]
    coefficients: NDArray[np.floating[Any]]
    vcov: NDArray[np.floating[Any]]
    sigma: float
    n_obs: int
    df_residual: int
    timing: dict[str, float] | None = field(default=None)

    @property
    def predictors(self) -> tuple[str, ...]:
        """Coefficient names without the intercept."""
        return tuple(n for n in self.names if n != INTERCEPT)

    def coef(self) -> dict[str, float]:
        return dict(zip(self.names, self.coefficients.tolist()))


def fit_ols(data: Any, response: str, predictors: Sequence[str]) -> OLSFit:
    """
    Fit ``response ~ 1 + predictors`` by QR least squares.

    Args:
        data: Mapping of column name -> 1D values, or a DataFrame.
        response: Response column name.
        predictors: Predictor column names.

    Returns:
        OLSFit

    Raises:
        ValidationError: Missing, non-numeric, or non-finite columns, or
            no residual degrees of freedom.
        SingularMatrixError: Collinear predictors.
    """
    timer = Timer()
    timer.start()

    y = get_column(data, response)
    cols = [get_column(data, p) for p in predictors]
    check_consistent_length(
        y, *cols, names=(response, *predictors),
    )

    n = y.shape[0]
    p = len(predictors) + 1
    if n <= p:
        raise ValidationError(
            f"data: {n} observations cannot fit {p} coefficients with a "
            f"residual variance; need at least {p + 1}"
        )

    X = np.column_stack([np.ones(n), *cols])

    with timer.section('qr_solve'):
        beta, R_inv = qr_lstsq(X, y)

    with timer.section('vcov'):
        residuals = y - X @ beta
        df = n - p
        sigma_sq = float(residuals @ residuals) / df
        vcov = sigma_sq * (R_inv @ R_inv.T)
        vcov = (vcov + vcov.T) / 2.0

    timer.stop()

    return OLSFit(
        response=response,
        names=(INTERCEPT, *predictors),
        coefficients=beta,
        vcov=vcov,
        sigma=float(np.sqrt(sigma_sq)),
        n_obs=n,
        df_residual=df,
        timing=timer.result(),
    )
