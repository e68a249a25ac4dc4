"""
Argument validators.

Every validator checks one property and raises on the first violation;
none of them repairs its input. Messages start with the argument name
("n_boot: ...", "covariance: ...") so a failure can be traced to the call
site without a traceback. The only conversion performed is array-like to
float ndarray in check_array.
"""

import numbers
from typing import Any, Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymedfit.core.exceptions import DimensionError, ValidationError

FloatArray = NDArray[np.floating[Any]]


# --- Arrays ---

def check_array(array: ArrayLike, name: str) -> FloatArray:
    """
    Convert an array-like of real numbers to a floating ndarray.

    Integer input is promoted to float64; floating input keeps its dtype.
    Booleans, strings, objects and complex numbers are refused rather than
    cast.

    Raises:
        ValidationError: If the input is not real numeric data
    """
    try:
        arr = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    kind = arr.dtype
    if kind == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )
    if not np.issubdtype(kind, np.number):
        raise ValidationError(f"{name}: non-numeric dtype {kind}, expected numeric data")
    if np.issubdtype(kind, np.complexfloating):
        raise ValidationError(f"{name}: complex dtype {kind}, expected real data")

    if np.issubdtype(kind, np.floating):
        return arr
    return arr.astype(np.float64)


def check_finite(array: FloatArray, name: str) -> None:
    """Raise ValidationError if array holds NaN or +/-Inf."""
    finite = np.isfinite(array)
    if finite.all():
        return
    n_nan = int(np.isnan(array).sum())
    n_inf = int(finite.size - finite.sum()) - n_nan
    raise ValidationError(
        f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
    )


def check_ndim(array: FloatArray, ndim: int, name: str) -> None:
    """Raise DimensionError unless array.ndim == ndim."""
    if array.ndim == ndim:
        return
    raise DimensionError(
        f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
    )


def check_1d(array: FloatArray, name: str) -> None:
    check_ndim(array, 1, name)


def check_2d(array: FloatArray, name: str) -> None:
    check_ndim(array, 2, name)


def check_square(array: FloatArray, name: str) -> None:
    """Raise DimensionError unless array is a square matrix."""
    check_2d(array, name)
    rows, cols = array.shape
    if rows != cols:
        raise DimensionError(f"{name}: must be square, got shape {array.shape}")


def check_symmetric(array: FloatArray, name: str, rtol: float, atol: float) -> None:
    """
    Raise ValidationError unless array equals its transpose within
    np.allclose(rtol, atol). The message reports the largest asymmetry.
    """
    if np.allclose(array, array.T, rtol=rtol, atol=atol):
        return
    max_diff = float(np.abs(array - array.T).max())
    raise ValidationError(f"{name}: must be symmetric, max |A - A^T| = {max_diff:.3g}")


def check_consistent_length(*arrays: FloatArray, names: tuple[str, ...]) -> None:
    """
    Raise DimensionError unless all arrays share their first dimension.

    Raises:
        ValueError: If names and arrays differ in number (caller bug)
        DimensionError: On a length mismatch, listing every length
    """
    if len(names) != len(arrays):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )
    lengths = [a.shape[0] for a in arrays]
    if len(set(lengths)) <= 1:
        return
    details = ", ".join(f"{n}={length}" for n, length in zip(names, lengths))
    raise DimensionError(f"Inconsistent lengths: {details}")


# --- Scalars ---

def check_int(value: Any, name: str, minimum: int) -> int:
    """
    Return value as int if it is an integer >= minimum.

    bool is an int subclass in Python but is refused here; numpy integer
    scalars are accepted.

    Raises:
        ValidationError: If value is not an integer or is below minimum
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name}: must be an integer, got {type(value).__name__}")
    if value < minimum:
        raise ValidationError(f"{name}: must be >= {minimum}, got {value}")
    return int(value)


def check_open_unit_interval(value: Any, name: str) -> float:
    """
    Return value as float if it is a real number with 0 < value < 1.

    Raises:
        ValidationError: Otherwise, including for NaN and bools
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name}: must be a real number, got {type(value).__name__}")
    if not 0.0 < value < 1.0:
        raise ValidationError(f"{name}: must be between 0 and 1 (exclusive), got {value}")
    return float(value)


def check_callable(fn: Callable | Any, name: str) -> None:
    if not callable(fn):
        raise ValidationError(f"{name}: must be callable, got {type(fn).__name__}")
