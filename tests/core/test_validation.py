"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_not_empty / check_length: emptiness and sequence checks
    - check_rectangular: ragged row detection
    - check_finite: NaN/Inf detection
    - check_ndim / check_1d / check_2d: dimensionality checks
    - check_consistent_length: multi-input length matching
    - check_more_observations_than_parameters
    - check_integer / check_positive_integer / check_window
"""

import numpy as np
import pytest

from pyols.core.exceptions import (
    DimensionError,
    EmptyInputError,
    InsufficientDataError,
    InsufficientObservationsError,
    ValidationError,
    WindowTooSmallError,
)
from pyols.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_integer,
    check_length,
    check_more_observations_than_parameters,
    check_ndim,
    check_not_empty,
    check_positive_integer,
    check_rectangular,
    check_window,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to a float64 ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "X")
        assert isinstance(result, np.ndarray)
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_int_array_promoted_to_float(self):
        arr = np.array([1, 2, 3], dtype=np.int32)
        result = check_array(arr, "X")
        assert result.dtype == np.float64

    def test_returns_copy(self):
        arr = np.array([1.0, 2.0, 3.0])
        result = check_array(arr, "X")
        result[0] = 99.0
        assert arr[0] == 1.0

    def test_nested_list_to_2d(self):
        result = check_array([[1, 2], [3, 4]], "X")
        assert result.shape == (2, 2)

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "X")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b", "c"], "X")

    def test_rejects_complex(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array([1 + 2j, 3 + 0j], "X")

    def test_error_message_includes_name(self):
        with pytest.raises(ValidationError, match="my_var"):
            check_array(["a", "b"], "my_var")


# ═══════════════════════════════════════════════════════════════════════
# check_length / check_not_empty
# ═══════════════════════════════════════════════════════════════════════


class TestCheckNotEmpty:

    def test_non_empty_passes(self):
        check_not_empty([1.0], "y")

    def test_empty_list(self):
        with pytest.raises(EmptyInputError, match="y"):
            check_not_empty([], "y")

    def test_empty_array(self):
        with pytest.raises(EmptyInputError):
            check_not_empty(np.array([]), "X")

    def test_scalar_has_no_length(self):
        with pytest.raises(ValidationError, match="sequence"):
            check_length(5.0, "y")


# ═══════════════════════════════════════════════════════════════════════
# check_rectangular
# ═══════════════════════════════════════════════════════════════════════


class TestCheckRectangular:

    def test_equal_rows(self):
        assert check_rectangular([[1, 2], [3, 4], [5, 6]], "X") == 2

    def test_scalar_rows_are_width_one(self):
        assert check_rectangular([1, 2, 3], "X") == 1

    def test_ragged_rows(self):
        with pytest.raises(DimensionError, match=r"\[1, 2\]"):
            check_rectangular([[1], [2, 3], [4]], "X")

    def test_array_not_iterated(self):
        assert check_rectangular(np.zeros((4, 3)), "X") == 3

    def test_1d_array_is_one_column(self):
        assert check_rectangular(np.zeros(4), "X") == 1


# ═══════════════════════════════════════════════════════════════════════
# check_finite
# ═══════════════════════════════════════════════════════════════════════


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0, 3.0]), "X")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan, 3.0]), "X")

    def test_inf_rejected(self):
        with pytest.raises(ValidationError, match="1 Inf"):
            check_finite(np.array([1.0, -np.inf, 3.0]), "X")


# ═══════════════════════════════════════════════════════════════════════
# Dimensionality
# ═══════════════════════════════════════════════════════════════════════


class TestCheckNdim:

    def test_1d_passes(self):
        check_1d(np.zeros(3), "y")

    def test_2d_rejected_as_1d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((3, 2)), "y")

    def test_3d_rejected_as_2d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros((2, 2, 2)), "X")

    def test_check_ndim_message_has_shape(self):
        with pytest.raises(DimensionError, match=r"\(3,\)"):
            check_ndim(np.zeros(3), 2, "X")


class TestCheckConsistentLength:

    def test_matching_lengths(self):
        check_consistent_length([[1], [2]], [1, 2], names=("X", "y"))

    def test_mismatch(self):
        with pytest.raises(DimensionError, match="X=2, y=3"):
            check_consistent_length([[1], [2]], [1, 2, 3], names=("X", "y"))

    def test_names_must_match(self):
        with pytest.raises(ValueError):
            check_consistent_length([1], [1], names=("X",))


# ═══════════════════════════════════════════════════════════════════════
# Counts and windows
# ═══════════════════════════════════════════════════════════════════════


class TestObservationCount:

    def test_more_observations_passes(self):
        check_more_observations_than_parameters(3, 2)

    @pytest.mark.parametrize("n,k", [(2, 2), (2, 4), (1, 1)])
    def test_n_not_greater_than_k(self, n, k):
        with pytest.raises(InsufficientObservationsError) as exc_info:
            check_more_observations_than_parameters(n, k)
        assert exc_info.value.n == n
        assert exc_info.value.k == k


class TestIntegers:

    def test_integer_passes(self):
        assert check_integer(np.int64(5), "window") == 5

    @pytest.mark.parametrize("value", [2.5, "3", True, None])
    def test_non_integers_rejected(self, value):
        with pytest.raises(ValidationError, match="window"):
            check_integer(value, "window")

    def test_positive_integer(self):
        assert check_positive_integer(4, "n_jobs") == 4

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match=">= 1"):
            check_positive_integer(0, "n_jobs")


class TestCheckWindow:

    def test_valid_window(self):
        assert check_window(3, 10) == 3

    def test_window_equal_to_n(self):
        assert check_window(10, 10) == 10

    @pytest.mark.parametrize("window", [1, 0, -5])
    def test_too_small(self, window):
        with pytest.raises(WindowTooSmallError) as exc_info:
            check_window(window, 10)
        assert exc_info.value.window == window

    def test_longer_than_series(self):
        with pytest.raises(InsufficientDataError) as exc_info:
            check_window(3, 2)
        assert exc_info.value.n == 2
        assert exc_info.value.window == 3

    def test_too_small_checked_before_length(self):
        with pytest.raises(WindowTooSmallError):
            check_window(1, 0)
