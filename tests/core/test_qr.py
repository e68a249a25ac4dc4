"""
Tests for QR least squares.
"""

import numpy as np
import pytest

from pymedfit.core.compute.linalg import qr_cpu, qr_lstsq
from pymedfit.core.exceptions import SingularMatrixError


class TestQR:
    """QR decomposition and least squares."""

    def test_full_rank(self, rng):
        """Q @ R reconstructs X."""
        X = rng.standard_normal((20, 3))
        result = qr_cpu(X)
        assert result.rank == 3
        np.testing.assert_allclose(result.Q @ result.R, X, atol=1e-12)

    def test_lstsq_matches_numpy(self, rng):
        """Coefficients and (X'X)^-1 match numpy."""
        X = np.column_stack([np.ones(50), rng.standard_normal((50, 2))])
        y = X @ np.array([1.0, -2.0, 0.5]) + 0.1 * rng.standard_normal(50)
        beta, R_inv = qr_lstsq(X, y)
        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        np.testing.assert_allclose(beta, expected, rtol=1e-10)
        np.testing.assert_allclose(R_inv @ R_inv.T, np.linalg.inv(X.T @ X), rtol=1e-8)

    def test_collinear(self, rng):
        """Rank deficiency reports actual and expected rank."""
        x = rng.standard_normal(10)
        X = np.column_stack([np.ones(10), x, 2.0 * x])
        with pytest.raises(SingularMatrixError) as exc_info:
            qr_lstsq(X, rng.standard_normal(10))
        assert exc_info.value.rank == 2
        assert exc_info.value.expected_rank == 3

    def test_too_few_rows(self):
        """Fewer rows than columns is rank-deficient."""
        with pytest.raises(SingularMatrixError):
            qr_lstsq(np.ones((2, 3)), np.ones(2))
