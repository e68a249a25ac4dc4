"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from pymedfit.bootstrap import ParameterEstimate
from pymedfit.mediation import MediationData


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def ab_estimate():
    """a = 0.5, b = 0.4, independent, variance 0.01 each."""
    return ParameterEstimate(
        estimates={"a": 0.5, "b": 0.4},
        covariance=np.diag([0.01, 0.01]),
    )


@pytest.fixture
def mediation_columns(rng):
    """Simulated X -> M -> Y data with a = 0.5, b = 0.4, c' = 0.2."""
    n = 200
    x = rng.standard_normal(n)
    c = rng.standard_normal(n)
    m = 0.5 * x + 0.3 * c + rng.standard_normal(n)
    y = 0.2 * x + 0.4 * m - 0.1 * c + rng.standard_normal(n)
    return {"X": x, "M": m, "Y": y, "C": c}


@pytest.fixture
def simple_md():
    """MediationData with a = 0.5, b = 0.4, c' = 0.1."""
    pe = ParameterEstimate(
        estimates={"m_X": 0.5, "y_M": 0.4, "y_X": 0.1},
        covariance=np.diag([0.01, 0.01, 0.01]),
        n_obs=100,
        source="test",
    )
    return MediationData(parameters=pe, treatment="X", mediator="M", outcome="Y")
