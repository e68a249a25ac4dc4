"""
Mediation effects from a MediationData.

    nie = a * b            natural indirect effect
    nde = c'               natural direct effect
    te  = nie + nde        total effect
    pm  = nie / te         proportion mediated

ProductStatistic is the statistic function for bootstrapping a product
of coefficients. It is a module-level class so it pickles for process
pools, unlike a lambda.
"""

from __future__ import annotations

import math
import warnings
from collections.abc import Mapping

import numpy as np

from pymedfit.core.exceptions import ValidationError
from pymedfit.mediation.data import MediationData


def nie(md: MediationData) -> float:
    """Natural indirect effect, a * b."""
    return md.a_path * md.b_path


def nde(md: MediationData) -> float:
    """Natural direct effect, c'."""
    return md.c_prime


def te(md: MediationData) -> float:
    """Total effect, a * b + c'."""
    return nie(md) + nde(md)


def pm(md: MediationData) -> float:
    """
    Proportion mediated, nie / te.

    Returns NaN, with a RuntimeWarning, when the total effect is
    numerically zero.
    """
    total = te(md)
    if abs(total) < np.finfo(float).eps:
        warnings.warn(
            "Total effect is approximately zero; proportion mediated is undefined.",
            RuntimeWarning,
            stacklevel=2,
        )
        return math.nan
    return nie(md) / total


def paths(md: MediationData) -> dict[str, float]:
    """Path coefficients a, b, c'."""
    return {"a": md.a_path, "b": md.b_path, "c_prime": md.c_prime}


def effects(md: MediationData) -> dict[str, float]:
    """nie, nde, te in one dict."""
    return {"nie": nie(md), "nde": nde(md), "te": te(md)}


class ProductStatistic:
    """
    Statistic theta -> prod(theta[name] for name in names).

    Usage:
        indirect = ProductStatistic("m_X", "y_M")
        bootstrap(indirect, "parametric", parameter_estimate=md.parameters)
    """

    def __init__(self, *names: str):
        if not names:
            raise ValidationError("names: at least one parameter name is required")
        for name in names:
            if not isinstance(name, str) or not name:
                raise ValidationError(f"names: must be non-empty strings, got {name!r}")
        self.names = names

    def __call__(self, theta: Mapping[str, float]) -> float:
        value = 1.0
        for name in self.names:
            value *= theta[name]
        return value

    def __repr__(self) -> str:
        return f"ProductStatistic({', '.join(repr(n) for n in self.names)})"


def indirect_statistic(md: MediationData) -> ProductStatistic:
    """Statistic for the indirect effect a * b of md."""
    return ProductStatistic(md.a_name, md.b_name)
