"""
Evaluation of caller-supplied statistic functions.

A statistic must return exactly one real number. Python and NumPy numbers,
0-d arrays, and size-1 arrays are accepted; anything else is rejected
rather than coerced.
"""

from __future__ import annotations

import numbers
from typing import Any, Callable

import numpy as np

from pymedfit.core.exceptions import BootstrapError, StatisticEvaluationError


def _to_float(value: Any, iteration: int | None, where: str) -> float:
    try:
        return float(value)
    except (OverflowError, ValueError) as e:
        raise StatisticEvaluationError(
            f"statistic_fn: return value not representable as a float ({e}){where}",
            iteration=iteration,
        ) from e


def as_scalar(value: Any, iteration: int | None = None) -> float:
    """
    Convert a statistic's return value to float, or raise.

    Raises:
        StatisticEvaluationError: If value is not a single real number
    """
    where = "" if iteration is None else f" at iteration {iteration}"

    if isinstance(value, (bool, np.bool_)):
        raise StatisticEvaluationError(
            f"statistic_fn: must return a numeric scalar, got bool{where}",
            iteration=iteration,
        )

    if isinstance(value, numbers.Real):
        return _to_float(value, iteration, where)

    if isinstance(value, np.ndarray):
        if value.size != 1:
            raise StatisticEvaluationError(
                f"statistic_fn: must return a single scalar, got array "
                f"of shape {value.shape}{where}",
                iteration=iteration,
            )
        if not (np.issubdtype(value.dtype, np.number)
                and not np.issubdtype(value.dtype, np.complexfloating)):
            raise StatisticEvaluationError(
                f"statistic_fn: must return a real number, got dtype "
                f"{value.dtype}{where}",
                iteration=iteration,
            )
        return _to_float(value.reshape(-1)[0], iteration, where)

    raise StatisticEvaluationError(
        f"statistic_fn: must return a numeric scalar, got "
        f"{type(value).__name__}{where}",
        iteration=iteration,
    )


class StatisticEvaluator:
    """
    Calls a statistic function and validates what it returns.

    Args:
        fn: The statistic (parametric/plugin) or refit callback
            (nonparametric).
        failure: Exception class raised when fn itself raises.
            StatisticEvaluationError by default; the nonparametric
            backend reports refit failures as ResamplingFailure.
    """

    def __init__(
        self,
        fn: Callable[[Any], Any],
        failure: type[BootstrapError] = StatisticEvaluationError,
    ):
        self.fn = fn
        self.failure = failure

    def __call__(self, arg: Any, iteration: int | None = None) -> float:
        try:
            value = self.fn(arg)
        except BootstrapError:
            raise
        except Exception as e:
            where = "point estimate" if iteration is None else f"iteration {iteration}"
            raise self.failure(
                f"statistic_fn: raised {type(e).__name__} at {where}: {e}",
                iteration=iteration,
            ) from e
        return as_scalar(value, iteration)
