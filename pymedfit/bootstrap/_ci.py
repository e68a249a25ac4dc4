"""
Percentile bootstrap confidence interval.

CI = [Q((1 - c) / 2), Q(1 - (1 - c) / 2)]

Q is the empirical quantile with linear interpolation between order
statistics (Hyndman & Fan type 7, R's default quantile()):

    h = (n - 1) * q
    Q(q) = x[floor(h)] + (h - floor(h)) * (x[floor(h) + 1] - x[floor(h)])

on the sorted replicates x[0] <= ... <= x[n-1].
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymedfit.core.exceptions import InsufficientSamples
from pymedfit.core.validation import check_array, check_1d, check_open_unit_interval

MIN_REPLICATES = 2


def percentile_interval(
    distribution: ArrayLike,
    ci_level: float,
) -> tuple[float, float]:
    """
    Percentile CI from a bootstrap distribution.

    Args:
        distribution: Bootstrap replicates, shape (n_boot,). Order is
            irrelevant; the replicates are sorted before interpolation.
        ci_level: Confidence level c, 0 < c < 1.

    Returns:
        (lower, upper) with lower <= upper.

    Raises:
        InsufficientSamples: If fewer than 2 replicates are supplied.
        ValidationError: If ci_level is outside (0, 1) or the distribution
            is not a 1D numeric array.
    """
    level = check_open_unit_interval(ci_level, 'ci_level')
    t = check_array(distribution, 'distribution')
    check_1d(t, 'distribution')

    n = t.shape[0]
    if n < MIN_REPLICATES:
        raise InsufficientSamples(
            f"distribution: percentile interval requires at least "
            f"{MIN_REPLICATES} bootstrap replicates, got {n}",
            n_samples=n,
            required=MIN_REPLICATES,
        )

    alpha = 1.0 - level
    t_sorted: NDArray[np.floating[Any]] = np.sort(t)
    lower, upper = np.quantile(
        t_sorted, [alpha / 2.0, 1.0 - alpha / 2.0], method="linear",
    )
    return float(lower), float(upper)
