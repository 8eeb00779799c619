"""
Regression Design.

Design validates the raw (y, X) inputs, normalizes X to a 2-D float
matrix and injects the intercept column. Everything downstream (backends,
inference, prediction) trusts a Design without re-validating it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyols.core.exceptions import DimensionError, EmptyInputError
from pyols.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_2d,
    check_not_empty,
    check_consistent_length,
    check_rectangular,
    check_more_observations_than_parameters,
    is_sequence_of_rows,
)


@dataclass(frozen=True)
class Design:
    """
    Regression design matrix specification.

    Holds X (with the intercept column already prepended when requested)
    and y. Immutable after construction; the arrays are read-only.

    Construction:
        Design.build(y, X)                    # with intercept
        Design.build(y, X, intercept=False)   # through the origin
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _k: int
    _has_intercept: bool

    @classmethod
    def build(cls, y: ArrayLike, X: ArrayLike, intercept: bool = True) -> Design:
        """
        Validate inputs and build a Design.

        Checks run in a fixed order so that each kind of malformed input
        maps to exactly one exception:

            1. empty y or X                      -> EmptyInputError
            2. len(X) != len(y)                  -> DimensionError
            3. ragged rows in X                  -> DimensionError
            4. non-numeric or non-finite values  -> ValidationError
            5. n <= k after adding the intercept -> InsufficientObservationsError

        Args:
            y: Response vector (n,)
            X: Predictors (n, k0), or (n,) for a single predictor
            intercept: Prepend a column of ones to X

        Returns:
            Validated Design
        """
        check_not_empty(y, 'y')
        check_not_empty(X, 'X')
        check_consistent_length(X, y, names=('X', 'y'))

        y_arr = check_array(y, 'y')
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        check_1d(y_arr, 'y')

        X_arr = as_matrix(X, 'X')

        check_finite(X_arr, 'X')
        check_finite(y_arr, 'y')

        n, k0 = X_arr.shape
        if k0 == 0 and not intercept:
            raise EmptyInputError(
                "X: has no predictor columns and no intercept was requested"
            )

        if intercept:
            X_arr = add_intercept(X_arr)
        k = X_arr.shape[1]

        check_more_observations_than_parameters(n, k)

        X_arr.flags.writeable = False
        y_arr.flags.writeable = False
        return cls(_X=X_arr, _y=y_arr, _n=n, _k=k, _has_intercept=bool(intercept))

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x k), intercept column first when present."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def k(self) -> int:
        """Number of parameters, including the intercept."""
        return self._k

    @property
    def p(self) -> int:
        """Number of predictors, excluding the intercept."""
        return self._k - int(self._has_intercept)

    @property
    def has_intercept(self) -> bool:
        return self._has_intercept

    @property
    def labels(self) -> tuple[str, ...]:
        """Coefficient labels: 'intercept' (if present), then x1, x2, ..."""
        return coefficient_labels(self.p, self._has_intercept)

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Compute X'X."""
        return self._X.T @ self._X

    def Xty(self) -> NDArray[np.floating[Any]]:
        """Compute X'y."""
        return self._X.T @ self._y

    def augment(self, rows: ArrayLike, name: str = 'X_new') -> NDArray[np.floating[Any]]:
        """
        Turn new predictor rows into design rows for this model.

        A 1-D input is one observation. The intercept column is prepended
        when the model has one.

        Raises:
            EmptyInputError: If no rows are given
            DimensionError: If rows are ragged or have the wrong width
        """
        check_not_empty(rows, name)
        arr = check_array(rows, name) if not is_sequence_of_rows(rows) else None
        if arr is not None and arr.ndim == 1:
            rows = arr.reshape(1, -1)
        elif arr is None and all(np.ndim(row) == 0 for row in rows):
            rows = [rows]

        X_new = as_matrix(rows, name)
        check_finite(X_new, name)
        if self._has_intercept:
            X_new = add_intercept(X_new)

        if X_new.shape[1] != self._k:
            raise DimensionError(
                f"{name}: prediction input must have the same number of features "
                f"as training data (expected {self.p}, got "
                f"{X_new.shape[1] - int(self._has_intercept)})"
            )
        return X_new


def as_matrix(X: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Convert predictors to a 2-D float matrix.

    Flat inputs (a list of numbers, a 1-D array) become one column. Rows
    must all have the same length.

    Raises:
        DimensionError: If rows are ragged or X has more than two dimensions
        ValidationError: If X is not numeric
    """
    width = check_rectangular(X, name)
    if is_sequence_of_rows(X) and width == 1:
        X = [[row] if np.ndim(row) == 0 else row for row in X]

    X_arr = check_array(X, name)
    if X_arr.ndim == 1:
        X_arr = X_arr.reshape(-1, 1)
    check_2d(X_arr, name)
    return X_arr


def add_intercept(X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Prepend a column of ones."""
    return np.column_stack([np.ones(X.shape[0], dtype=np.float64), X])


def coefficient_labels(p: int, has_intercept: bool) -> tuple[str, ...]:
    """'intercept' (if present) followed by positional labels x1 ... xp."""
    names = [f"x{i + 1}" for i in range(p)]
    if has_intercept:
        names.insert(0, 'intercept')
    return tuple(names)
