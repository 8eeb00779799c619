"""
Rolling regression design.

RollingDesign validates the full series and the window size once. It only
checks the shape of the data; per-window checks (finite values, n > k,
rank) are left to each window's fit so that a bad stretch of data fails
its own windows instead of the whole scan.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyols.core.validation import (
    check_array,
    check_1d,
    check_length,
    check_window,
    check_consistent_length,
)
from pyols.regression.design import as_matrix, coefficient_labels


@dataclass(frozen=True)
class RollingDesign:
    """
    Full series plus window specification for a rolling fit.

    Construction:
        RollingDesign.build(y, X, window=60)
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _window: int
    _has_intercept: bool

    @classmethod
    def build(
        cls,
        y: ArrayLike,
        X: ArrayLike,
        window: int,
        intercept: bool = True,
    ) -> RollingDesign:
        """
        Validate the series and window.

        Raises:
            ValidationError: If window is not an integer or data is non-numeric
            WindowTooSmallError: If window < 2
            InsufficientDataError: If len(y) < window
            DimensionError: If X and y disagree on n, or rows of X are ragged
        """
        n = check_length(y, 'y')
        window = check_window(window, n)
        check_consistent_length(X, y, names=('X', 'y'))

        y_arr = check_array(y, 'y')
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        check_1d(y_arr, 'y')

        X_arr = as_matrix(X, 'X')

        X_arr.flags.writeable = False
        y_arr.flags.writeable = False
        return cls(
            _X=X_arr,
            _y=y_arr,
            _n=n,
            _window=window,
            _has_intercept=bool(intercept),
        )

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Predictors for the full series (n x p), without intercept."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        return self._y

    @property
    def n(self) -> int:
        return self._n

    @property
    def window(self) -> int:
        return self._window

    @property
    def has_intercept(self) -> bool:
        return self._has_intercept

    @property
    def p(self) -> int:
        """Number of predictors, excluding the intercept."""
        return self._X.shape[1]

    @property
    def k(self) -> int:
        """Number of parameters fitted in every window."""
        return self.p + int(self._has_intercept)

    @property
    def n_windows(self) -> int:
        return self._n - self._window + 1

    @property
    def labels(self) -> tuple[str, ...]:
        return coefficient_labels(self.p, self._has_intercept)

    def windows(self) -> Iterator[tuple[int, int, NDArray, NDArray]]:
        """
        Yield (start, end, y_window, X_window) for every window position.

        end is inclusive, so end - start == window - 1. Consecutive windows
        overlap in window - 1 observations.
        """
        for start in range(self.n_windows):
            stop = start + self._window
            yield start, stop - 1, self._y[start:stop], self._X[start:stop]
