"""
Input validation utilities for PyOLS.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers
from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyols.core.exceptions import (
    ValidationError,
    DimensionError,
    EmptyInputError,
    InsufficientObservationsError,
    WindowTooSmallError,
    InsufficientDataError,
)


def check_length(array: Any, name: str) -> int:
    """
    Return the number of observations (first dimension) of a sequence.

    Args:
        array: Sequence or array-like to measure
        name: Parameter name for error messages

    Returns:
        Length of the first dimension

    Raises:
        ValidationError: If the input has no length (scalar, generator, ...)
    """
    try:
        return len(array)
    except TypeError as e:
        raise ValidationError(
            f"{name}: expected a sequence of observations, got {type(array).__name__}"
        ) from e


def check_not_empty(array: Any, name: str) -> None:
    """
    Verify a sequence has at least one observation.

    Args:
        array: Sequence or array-like to check
        name: Parameter name for error messages

    Raises:
        EmptyInputError: If the sequence is empty
    """
    if check_length(array, name) == 0:
        raise EmptyInputError(f"{name}: input cannot be empty")


def check_rectangular(rows: Any, name: str) -> int:
    """
    Verify every row of a matrix-like input has the same length.

    Scalar rows count as rows of length one, so a flat list of numbers is a
    single-column matrix. Arrays and DataFrames are rectangular by
    construction and are not iterated.

    Args:
        rows: Sequence of rows (or an array-like with a shape)
        name: Parameter name for error messages

    Returns:
        The common row length

    Raises:
        DimensionError: If rows have different lengths
    """
    shape = getattr(rows, 'shape', None)
    if shape is not None:
        return 1 if len(shape) < 2 else int(shape[1])

    widths = {_row_width(row) for row in rows}
    if len(widths) > 1:
        raise DimensionError(
            f"{name}: all rows must have the same number of columns, "
            f"got row lengths {sorted(widths)}"
        )
    return widths.pop() if widths else 0


def _row_width(row: Any) -> int:
    if isinstance(row, (str, bytes)):
        raise ValidationError(f"row {row!r} is not numeric")
    if np.ndim(row) == 0:
        return 1
    return len(row)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    return result.astype(np.float64, copy=True)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Args:
        array: Array to check
        ndim: Required number of dimensions
        name: Parameter name for error messages

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: Any,
    names: tuple[str, ...]
) -> None:
    """
    Verify all inputs have the same number of observations.

    Works on raw sequences as well as arrays, so it can run before any
    conversion to numpy.

    Args:
        *arrays: Sequences or arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If inputs have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [check_length(arr, name) for arr, name in zip(arrays, names)]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_more_observations_than_parameters(n: int, k: int) -> None:
    """
    Verify n > k so the residual degrees of freedom are positive.

    Args:
        n: Number of observations
        k: Number of parameters, including the intercept

    Raises:
        InsufficientObservationsError: If n <= k
    """
    if n <= k:
        raise InsufficientObservationsError(
            f"Number of observations must be greater than number of parameters "
            f"(n={n}, k={k})",
            n=n,
            k=k,
        )


def check_integer(value: Any, name: str) -> int:
    """
    Verify a scalar is an integer (bools excluded).

    Raises:
        ValidationError: If value is not an integer
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__} {value!r}"
        )
    return int(value)


def check_positive_integer(value: Any, name: str) -> int:
    """
    Verify a scalar is an integer >= 1.

    Raises:
        ValidationError: If value is not a positive integer
    """
    value = check_integer(value, name)
    if value < 1:
        raise ValidationError(f"{name}: must be >= 1, got {value}")
    return value


def check_window(window: Any, n: int) -> int:
    """
    Validate a rolling window size against the series length.

    Args:
        window: Requested window size
        n: Length of the full series

    Returns:
        The window size as int

    Raises:
        ValidationError: If window is not an integer
        WindowTooSmallError: If window < 2
        InsufficientDataError: If n < window
    """
    window = check_integer(window, 'window')
    if window < 2:
        raise WindowTooSmallError(
            f"window: size must be at least 2, got {window}",
            window=window,
        )
    if n < window:
        raise InsufficientDataError(
            f"Data length must be greater than or equal to window size "
            f"(n={n}, window={window})",
            n=n,
            window=window,
        )
    return window


def is_sequence_of_rows(rows: Any) -> bool:
    """True if rows is a plain Python sequence (not an array-like with a shape)."""
    return isinstance(rows, Sequence) and not hasattr(rows, 'shape')
