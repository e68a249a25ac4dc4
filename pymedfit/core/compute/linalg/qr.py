"""
Least squares by Householder QR (LAPACK through NumPy/SciPy).

Backs fit_ols(): the mediator and outcome regressions need both the
coefficients and (X'X)^-1 for their covariance, and QR gives the latter
as R^-1 R^-T without forming X'X.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pymedfit.core.exceptions import SingularMatrixError


@dataclass(frozen=True)
class QRResult:
    """
    Reduced factorization X = Q R of an n x p matrix.

    Attributes:
        Q: n x k with orthonormal columns, k = min(n, p)
        R: k x p upper triangular
        rank: Count of |R_jj| above max(n, p) * eps * max|R_jj|
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int


def qr_cpu(X: NDArray[np.floating[Any]]) -> QRResult:
    Q, R = np.linalg.qr(X, mode='reduced')
    pivots = np.abs(np.diag(R))
    scale = pivots.max() if pivots.size else 0.0
    if scale == 0.0:
        return QRResult(Q=Q, R=R, rank=0)
    tol = max(X.shape) * np.finfo(X.dtype).eps * scale
    return QRResult(Q=Q, R=R, rank=int((pivots > tol).sum()))


def qr_lstsq(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Solve min_b ||y - X b||^2.

    Returns:
        (beta, R_inv) where beta has shape (p,) and R_inv is the inverse
        of the triangular factor, so (X'X)^-1 = R_inv @ R_inv.T.

    Raises:
        SingularMatrixError: If X has fewer rows than columns or is
            numerically rank-deficient.
    """
    n, p = X.shape
    fac = qr_cpu(X)
    if n < p or fac.rank < p:
        raise SingularMatrixError(
            f"X: design matrix is rank-deficient (rank {fac.rank}, need {p}); "
            f"predictors are collinear or there are too few observations",
            matrix_name='X',
            rank=fac.rank,
            expected_rank=p,
        )

    R = fac.R[:p, :p]
    beta = solve_triangular(R, fac.Q.T @ y, lower=False)
    R_inv = solve_triangular(R, np.eye(p), lower=False)
    return beta, R_inv
